"""Closed 2-D curves built from line and circular-arc segments.

Vertex convention
-----------------
``vertices[0]`` is the start point and carries no segment data.  Every
following vertex describes the segment that *ends* at it: its kind (line,
CCW arc, CW arc), its end point and, for arcs, the arc centre.

Boundaries wind counter-clockwise (positive signed area in a Y-up frame);
islands wind clockwise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

from ..config.defaults import DEGENERATE_EPSILON
from .sampling import sample_arc


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


class VertexKind(Enum):
    """Kind of the segment ending at a vertex."""
    LINE = 0
    CCW_ARC = 1     # arc turning left
    CW_ARC = -1     # arc turning right

    def flipped(self) -> VertexKind:
        return VertexKind(-self.value)

    @property
    def is_arc(self) -> bool:
        return self is not VertexKind.LINE


@dataclass(frozen=True)
class Vertex:
    """End point of a segment plus the data needed to trace it."""
    x: float
    y: float
    kind: VertexKind = VertexKind.LINE
    center: Optional[Point] = None

    def __post_init__(self) -> None:
        if self.kind.is_arc and self.center is None:
            raise ValueError("arc vertex requires a center")

    @classmethod
    def line(cls, x: float, y: float) -> Vertex:
        return cls(x, y)

    @classmethod
    def ccw_arc(cls, x: float, y: float, cx: float, cy: float) -> Vertex:
        return cls(x, y, VertexKind.CCW_ARC, Point(cx, cy))

    @classmethod
    def cw_arc(cls, x: float, y: float, cx: float, cy: float) -> Vertex:
        return cls(x, y, VertexKind.CW_ARC, Point(cx, cy))

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class Curve:
    """An immutable sequence of vertices describing a (usually closed) path."""

    vertices: tuple[Vertex, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable but store a tuple so the curve stays hashable.
        if not isinstance(self.vertices, tuple):
            object.__setattr__(self, "vertices", tuple(self.vertices))

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self.vertices)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def from_points(cls, points: Iterable[tuple[float, float]]) -> Curve:
        """Line-only curve through *points* in the given order."""
        return cls(tuple(Vertex.line(x, y) for x, y in points))

    @classmethod
    def rect(cls, x: float, y: float, width: float, height: float) -> Curve:
        """CCW rectangle with its start point repeated at the end."""
        return cls.from_points([
            (x, y),
            (x + width, y),
            (x + width, y + height),
            (x, y + height),
            (x, y),
        ])

    @classmethod
    def square(cls, x: float, y: float, size: float) -> Curve:
        return cls.rect(x, y, size, size)

    @classmethod
    def circle(cls, cx: float, cy: float, radius: float) -> Curve:
        """CCW circle as four quarter arcs, starting at (cx + r, cy)."""
        r = radius
        return cls((
            Vertex.line(cx + r, cy),
            Vertex.ccw_arc(cx, cy + r, cx, cy),
            Vertex.ccw_arc(cx - r, cy, cx, cy),
            Vertex.ccw_arc(cx, cy - r, cx, cy),
            Vertex.ccw_arc(cx + r, cy, cx, cy),
        ))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def start_point(self) -> Optional[Point]:
        return self.vertices[0].point if self.vertices else None

    @property
    def points(self) -> list[tuple[float, float]]:
        """Raw vertex positions (arc bulges are not represented)."""
        return [(v.x, v.y) for v in self.vertices]

    @property
    def has_arcs(self) -> bool:
        return any(v.kind.is_arc for v in self.vertices[1:])

    @property
    def is_closed(self) -> bool:
        if len(self.vertices) < 2:
            return False
        first, last = self.vertices[0], self.vertices[-1]
        return math.isclose(first.x, last.x) and math.isclose(first.y, last.y)

    @property
    def bounding_box(self) -> tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of the vertex positions.

        Arc bulges are ignored, so for curves with arcs this is an
        under-approximation; linearize first for a tight box.
        """
        xs = [v.x for v in self.vertices]
        ys = [v.y for v in self.vertices]
        if not xs:
            return (math.inf, math.inf, -math.inf, -math.inf)
        return (min(xs), min(ys), max(xs), max(ys))

    @property
    def signed_area(self) -> float:
        """Shoelace area over vertex positions; positive means CCW."""
        verts = self.vertices
        n = len(verts)
        s = 0.0
        for i in range(n):
            j = (i + 1) % n
            s += verts[i].x * verts[j].y - verts[j].x * verts[i].y
        return s * 0.5

    @property
    def is_ccw(self) -> bool:
        return self.signed_area > 0

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------

    def reversed(self) -> Curve:
        """Trace the same closed path in the opposite direction.

        A segment's kind lives on its end vertex, so reversed segment k
        (k = 1..N) ends at old vertex N-k but takes its flipped kind and
        centre from old vertex N-k+1.
        """
        verts = self.vertices
        if len(verts) < 2:
            return self
        n = len(verts) - 1

        result = [Vertex.line(verts[0].x, verts[0].y)]
        for k in range(1, n + 1):
            seg = verts[n - k + 1]
            pt = verts[n - k]
            result.append(Vertex(pt.x, pt.y, seg.kind.flipped(), seg.center))
        return Curve(tuple(result))

    def linearized(self, accuracy: float = 0.1) -> Curve:
        """Replace every arc with a chain of lines.

        Each arc is cut into ``ceil(arc_length / accuracy)`` equal angular
        steps (at least one).  The result holds only line vertices.
        """
        if accuracy <= 0:
            raise ValueError("accuracy must be positive")
        if not self.vertices:
            return self

        first = self.vertices[0]
        result = [Vertex.line(first.x, first.y)]
        cur = first.point
        for v in self.vertices[1:]:
            if not v.kind.is_arc:
                result.append(Vertex.line(v.x, v.y))
            elif (cur - v.center).length <= DEGENERATE_EPSILON:
                result.append(Vertex.line(v.x, v.y))
            else:
                ccw = v.kind is VertexKind.CCW_ARC
                for x, y in sample_arc(cur, v.point, v.center, ccw, accuracy):
                    result.append(Vertex.line(x, y))
            cur = v.point
        return Curve(tuple(result))
