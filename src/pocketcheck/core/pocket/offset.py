"""Contour-parallel pocketing: single offset and spiral strategies.

The pocket region is offset inward by the tool radius (plus any extra
offset) to get the first tool-centre pass along the walls.  The spiral
strategy keeps offsetting the region inward by the stepover until nothing
is left, tracing every exterior and hole ring of each offset as one closed
pass.
"""

from __future__ import annotations

from typing import Iterator

from shapely.geometry import MultiPolygon, Polygon

from ..curve import Curve
from .utils import ensure_polygon, iter_polygons, region_to_curves


def offset_region(
    region: Polygon | MultiPolygon,
    distance: float,
    quad_segs: int,
) -> Polygon | MultiPolygon:
    """Shrink *region* by *distance* (grow it for negative values)."""
    if distance == 0:
        return ensure_polygon(region)
    return ensure_polygon(region.buffer(-distance, quad_segs=quad_segs))


def iter_offset_passes(
    region: Polygon | MultiPolygon,
    first_offset: float,
    stepover: float,
    quad_segs: int,
) -> Iterator[Polygon | MultiPolygon]:
    """Yield successively smaller offsets of *region*, outermost first."""
    distance = first_offset
    while True:
        shrunk = offset_region(region, distance, quad_segs)
        if shrunk.is_empty:
            return
        yield shrunk
        distance += stepover


def single_offset_curves(
    region: Polygon | MultiPolygon,
    first_offset: float,
    quad_segs: int,
) -> list[Curve]:
    """One closed pass along every wall of *region*."""
    return region_to_curves(offset_region(region, first_offset, quad_segs))


def _centre_fill(
    shrunk: Polygon | MultiPolygon,
    inner: Polygon | MultiPolygon | None,
    tool_radius: float,
    quad_segs: int,
) -> list[list[Curve]]:
    """Passes one tool radius apart inside the parts of *shrunk* that have
    no further offset, so their centres do not stay uncut."""
    levels: list[list[Curve]] = []
    for poly in iter_polygons(shrunk):
        if inner is not None and poly.intersects(inner):
            continue
        levels.extend(
            region_to_curves(fill)
            for fill in iter_offset_passes(poly, tool_radius, tool_radius, quad_segs)
        )
    return levels


def spiral_curves(
    region: Polygon | MultiPolygon,
    first_offset: float,
    stepover: float,
    quad_segs: int,
    start_from_center: bool = False,
    tool_radius: float = 0.0,
) -> list[Curve]:
    """Concentric closed passes clearing *region*.

    Passes run from the walls inward, or from the centre outward when
    *start_from_center* is set.  When *stepover* exceeds *tool_radius* the
    innermost pass of each island-free part leaves its middle uncut, so
    extra passes spaced by the tool radius fill it.
    """
    offsets = list(iter_offset_passes(region, first_offset, stepover, quad_segs))
    levels: list[list[Curve]] = []
    for i, shrunk in enumerate(offsets):
        levels.append(region_to_curves(shrunk))
        if 0 < tool_radius < stepover:
            inner = offsets[i + 1] if i + 1 < len(offsets) else None
            levels.extend(_centre_fill(shrunk, inner, tool_radius, quad_segs))
    if start_from_center:
        levels.reverse()
    return [curve for rings in levels for curve in rings]
