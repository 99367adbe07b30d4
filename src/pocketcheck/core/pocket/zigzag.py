"""Raster zig-zag pocketing strategy.

Algorithm
---------
1. Fill the bounding box of the tool-centre region with parallel raster
   lines spaced at *stepover*, rotated by *zig_angle*.
2. Clip each raster line to the region.
3. Reverse every other line so consecutive passes run in opposite
   directions.
4. Link a pass to the previous one when the straight link move stays
   inside the region; otherwise start a new curve.
"""

from __future__ import annotations

from shapely.geometry import LineString, MultiPolygon, Polygon

from ..curve import Curve
from .utils import iter_lines, raster_lines


def zigzag_curves(
    region: Polygon | MultiPolygon,
    stepover: float,
    zig_angle: float = 0.0,
    tolerance: float = 1e-6,
) -> list[Curve]:
    """Zig-zag tool-centre passes inside *region*.

    *region* is the area the tool centre may visit (already offset from the
    walls).  *tolerance* grows the region slightly when testing link moves
    that run along its boundary.
    """
    if region.is_empty:
        return []

    rasters = raster_lines(region.bounds, stepover, zig_angle)

    passes: list[list[tuple[float, float]]] = []
    for i, line in enumerate(rasters):
        for ls in iter_lines(line.intersection(region)):
            coords = [(x, y) for x, y, *_ in ls.coords]
            if i % 2 == 1:
                coords.reverse()
            passes.append(coords)

    link_area = region.buffer(tolerance)
    chains: list[list[tuple[float, float]]] = []
    for coords in passes:
        if chains:
            if chains[-1][-1] == coords[0]:
                chains[-1].extend(coords[1:])
                continue
            link = LineString([chains[-1][-1], coords[0]])
            if link_area.covers(link):
                chains[-1].extend(coords)
                continue
        chains.append(list(coords))

    return [Curve.from_points(chain) for chain in chains]
