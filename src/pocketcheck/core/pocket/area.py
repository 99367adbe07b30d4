"""Shapely-backed region accumulator and pocket generator.

A ``ShapelyArea`` collects closed curves and interprets them by winding:
counter-clockwise curves enclose material to remove, clockwise curves
enclose islands.  Curves are applied from the largest enclosed area down,
CCW curves by union and CW curves by difference, so nesting alternates the
way a non-zero fill of properly nested curves does: an island inside a
boundary is a hole, a boundary inside that island is material again.

Boolean operations replace the stored curves with the rings of the result
(exteriors CCW, holes CW), so reading ``curves`` back after ``unite`` or
``subtract`` shows the combined geometry.
"""

from __future__ import annotations

import logging
from typing import Optional

from shapely.geometry import MultiPolygon, Polygon

from ...config.defaults import DEFAULT_ACCURACY
from ..curve import Curve
from .base import PocketParams, PocketStrategy
from .offset import offset_region, single_offset_curves, spiral_curves
from .utils import curve_to_polygon, ensure_polygon, quad_segs_for, region_to_curves
from .zigzag import zigzag_curves

logger = logging.getLogger(__name__)


class ShapelyArea:
    """Pocketing engine built on shapely polygon operations.

    Parameters
    ----------
    accuracy:
        Chordal tolerance used when arcs are turned into polylines and when
        choosing how finely offset corners are rounded.
    """

    def __init__(self, accuracy: float = DEFAULT_ACCURACY):
        if accuracy <= 0:
            raise ValueError("accuracy must be positive")
        self.accuracy = accuracy
        self._curves: list[Curve] = []
        self._region: Optional[Polygon | MultiPolygon] = None

    @classmethod
    def create(cls, accuracy: float = DEFAULT_ACCURACY) -> "ShapelyArea":
        return cls(accuracy)

    # ------------------------------------------------------------------
    # Accumulating geometry
    # ------------------------------------------------------------------

    @property
    def curves(self) -> list[Curve]:
        """Curves currently stored (boundaries CCW, islands CW)."""
        return list(self._curves)

    def add_curve(self, curve: Curve) -> None:
        """Add a boundary (CCW) or island (CW) curve."""
        self._curves.append(curve)
        self._region = None

    def add_island(self, curve: Curve) -> None:
        """Add *curve* drawn as a boundary as an island (reversed)."""
        self.add_curve(curve.reversed())

    @property
    def region(self) -> Polygon | MultiPolygon:
        """The area enclosed by the stored curves."""
        if self._region is None:
            self._region = self._build_region()
        return self._region

    @property
    def is_empty(self) -> bool:
        return self.region.is_empty

    def _build_region(self) -> Polygon | MultiPolygon:
        # Larger curves first so a boundary nested inside an island is added
        # back after the island has been cut out.
        layers: list[tuple[float, bool, Polygon]] = []
        for curve in self._curves:
            poly = curve_to_polygon(curve, self.accuracy)
            if poly.is_empty:
                continue
            is_ccw = curve.linearized(self.accuracy).is_ccw
            layers.append((poly.area, is_ccw, poly))
        layers.sort(key=lambda layer: layer[0], reverse=True)

        region: Polygon | MultiPolygon = Polygon()
        for _, is_ccw, poly in layers:
            if is_ccw:
                region = region.union(poly)
            else:
                region = region.difference(poly)
        return ensure_polygon(region)

    def _replace_region(self, region) -> None:
        self._region = ensure_polygon(region)
        self._curves = region_to_curves(self._region)

    # ------------------------------------------------------------------
    # Boolean operations
    # ------------------------------------------------------------------

    def unite(self, other: "ShapelyArea") -> None:
        """Replace this area with its union with *other*."""
        self._replace_region(self.region.union(other.region))

    def subtract(self, other: "ShapelyArea") -> None:
        """Remove *other* from this area."""
        self._replace_region(self.region.difference(other.region))

    def intersect(self, other: "ShapelyArea") -> None:
        """Keep only the part of this area that *other* also covers."""
        self._replace_region(self.region.intersection(other.region))

    # ------------------------------------------------------------------
    # Pocketing
    # ------------------------------------------------------------------

    def make_pocket(
        self,
        tool_radius: float,
        extra_offset: float = 0.0,
        stepover: float = 1.0,
        start_from_center: bool = False,
        strategy: PocketStrategy = PocketStrategy.SPIRAL,
        zig_angle: float = 0.0,
    ) -> list[Curve]:
        """Generate tool-centre curves that clear the area.

        Returns an empty list when the area is empty or too narrow for the
        tool.
        """
        params = PocketParams(
            tool_radius=tool_radius,
            stepover=stepover,
            extra_offset=extra_offset,
            start_from_center=start_from_center,
            strategy=strategy,
            zig_angle=zig_angle,
        )
        return self.make_pocket_from_params(params)

    def make_pocket_from_params(self, params: PocketParams) -> list[Curve]:
        region = self.region
        if region.is_empty:
            return []

        first = params.wall_offset
        quad_segs = quad_segs_for(self.accuracy, max(first, params.stepover))

        if params.strategy is PocketStrategy.SPIRAL:
            curves = spiral_curves(
                region, first, params.stepover, quad_segs,
                start_from_center=params.start_from_center,
                tool_radius=params.tool_radius,
            )
        elif params.strategy is PocketStrategy.SINGLE_OFFSET:
            curves = single_offset_curves(region, first, quad_segs)
        else:
            inner = offset_region(region, first, quad_segs)
            curves = zigzag_curves(inner, params.stepover, params.zig_angle)
            if params.strategy is PocketStrategy.ZIGZAG_THEN_SINGLE_OFFSET:
                curves += single_offset_curves(region, first, quad_segs)

        logger.debug(
            "%s pocket: %d curves, tool radius %.4g, stepover %.4g",
            params.strategy.value, len(curves), params.tool_radius, params.stepover,
        )
        return curves
