"""Shapely helpers shared by the pocketing strategies."""

from __future__ import annotations

import math
import warnings

from shapely.geometry import (
    LinearRing,
    LineString,
    MultiLineString,
    MultiPolygon,
    Polygon,
)
from shapely.geometry.polygon import orient
from shapely.ops import unary_union
from shapely.validation import make_valid

from ..curve import Curve


def iter_polygons(geom):
    """Yield every non-empty Polygon inside *geom*, descending into
    multi-part geometries and collections."""
    if geom is None or geom.is_empty:
        return
    if isinstance(geom, Polygon):
        yield geom
        return
    for part in getattr(geom, "geoms", ()):
        yield from iter_polygons(part)


def ensure_polygon(geom) -> Polygon | MultiPolygon:
    """Areal part of *geom* as a valid Polygon or MultiPolygon.

    Invalid input goes through ``make_valid`` first; points and lines left
    over from the repair are dropped.
    """
    if geom is None or geom.is_empty:
        return Polygon()
    if not geom.is_valid:
        geom = make_valid(geom)
    if isinstance(geom, (Polygon, MultiPolygon)):
        return geom
    parts = list(iter_polygons(geom))
    if len(parts) == 1:
        return parts[0]
    return unary_union(parts) if parts else Polygon()


def iter_lines(geom):
    """Yield the LineStrings in the result of a line/polygon intersection."""
    if geom.is_empty:
        return
    if isinstance(geom, LineString):
        yield geom
    elif isinstance(geom, MultiLineString):
        yield from geom.geoms
    else:
        # Mixed results: drop isolated touching points
        for g in getattr(geom, "geoms", []):
            if isinstance(g, LineString) and not g.is_empty:
                yield g


def curve_to_polygon(curve: Curve, accuracy: float) -> Polygon:
    """Linearize *curve* and return the polygon it encloses.

    Curves that enclose no area give an empty Polygon.  Self-touching input
    is repaired with ``make_valid``.
    """
    coords = curve.linearized(accuracy).points
    if len(set(coords)) < 3:
        return Polygon()
    poly = Polygon(coords)
    if not poly.is_valid:
        warnings.warn(
            "Curve does not describe a simple polygon; repairing it.",
            UserWarning,
            stacklevel=3,
        )
        poly = ensure_polygon(poly)
    return poly


def ring_to_curve(ring: LinearRing | LineString) -> Curve:
    """Line-only Curve through the coordinates of *ring*."""
    return Curve.from_points((x, y) for x, y, *_ in ring.coords)


def region_to_curves(geom: Polygon | MultiPolygon) -> list[Curve]:
    """Exterior rings as CCW curves, holes as CW curves."""
    curves: list[Curve] = []
    for poly in iter_polygons(geom):
        poly = orient(poly, sign=1.0)
        curves.append(ring_to_curve(poly.exterior))
        curves.extend(ring_to_curve(interior) for interior in poly.interiors)
    return curves


def quad_segs_for(accuracy: float, radius: float) -> int:
    """Segments per quarter circle keeping the chord error below *accuracy*."""
    if radius <= accuracy or accuracy <= 0:
        return 1
    half_angle = math.acos(1.0 - accuracy / radius)
    return max(1, math.ceil((math.pi / 2) / (2.0 * half_angle)))


def raster_lines(
    bounds: tuple[float, float, float, float],
    spacing: float,
    angle_deg: float = 0.0,
) -> list[LineString]:
    """Parallel passes *spacing* apart sweeping the box *bounds*.

    Every line runs in direction *angle_deg* (0 is along +X) and spans the
    whole box, so clipping it to a region inside the box loses nothing.
    Lines are ordered by their offset along the left-hand normal, starting
    on the box corner with the smallest offset.
    """
    if spacing <= 0:
        raise ValueError("spacing must be positive")
    xmin, ymin, xmax, ymax = bounds
    a = math.radians(angle_deg)
    dx, dy = math.cos(a), math.sin(a)
    nx, ny = -dy, dx
    corners = ((xmin, ymin), (xmax, ymin), (xmax, ymax), (xmin, ymax))
    along = [x * dx + y * dy for x, y in corners]
    across = [x * nx + y * ny for x, y in corners]
    s0, s1 = min(along), max(along)
    t_max = max(across)

    lines = []
    t = min(across)
    while t <= t_max + 1e-9:
        lines.append(LineString([
            (s0 * dx + t * nx, s0 * dy + t * ny),
            (s1 * dx + t * nx, s1 * dy + t * ny),
        ]))
        t += spacing
    return lines
