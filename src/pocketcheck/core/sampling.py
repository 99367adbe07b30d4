"""Point sampling along line and arc segments.

Shared by curve linearization and by the material simulator's stamping
pass.  Points are plain ``(x, y)`` tuples; the segment end points only need
``x`` and ``y`` attributes.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterator

from ..config.defaults import DEGENERATE_EPSILON

if TYPE_CHECKING:
    from .curve import Curve, Point


def arc_sweep(a0: float, a1: float, ccw: bool) -> float:
    """Angle swept from *a0* to *a1* in the given direction, in (0, 2π].

    Equal start and end angles mean a full circle.
    """
    sweep = (a1 - a0) if ccw else (a0 - a1)
    if sweep <= 0:
        sweep += 2 * math.pi
    return sweep


def sample_line(p0: Point, p1: Point, step: float) -> Iterator[tuple[float, float]]:
    """Yield points along p0→p1 at most *step* apart, excluding p0."""
    dx = p1.x - p0.x
    dy = p1.y - p0.y
    length = math.hypot(dx, dy)
    if length <= DEGENERATE_EPSILON:
        return
    n = max(1, math.ceil(length / step))
    for i in range(1, n + 1):
        t = i / n
        yield (p0.x + dx * t, p0.y + dy * t)


def sample_arc(
    start: Point,
    end: Point,
    center: Point,
    ccw: bool,
    step: float,
) -> Iterator[tuple[float, float]]:
    """Yield points along an arc at most *step* apart (by arc length).

    The start point is excluded and the last point lands on the end angle.
    Near-zero radius arcs yield nothing.
    """
    r = math.hypot(start.x - center.x, start.y - center.y)
    if r <= DEGENERATE_EPSILON:
        return
    a0 = math.atan2(start.y - center.y, start.x - center.x)
    a1 = math.atan2(end.y - center.y, end.x - center.x)
    sweep = arc_sweep(a0, a1, ccw)
    n = max(1, math.ceil(r * sweep / step))
    da = (1.0 if ccw else -1.0) * sweep / n
    for i in range(1, n + 1):
        a = a0 + i * da
        yield (center.x + r * math.cos(a), center.y + r * math.sin(a))


def sample_curve(curve: Curve, step: float) -> Iterator[tuple[float, float]]:
    """Yield the start point of *curve* followed by samples of every segment."""
    if not curve.vertices:
        return
    prev = curve.vertices[0]
    yield (prev.x, prev.y)
    for v in curve.vertices[1:]:
        if v.kind.is_arc:
            yield from sample_arc(prev, v, v.center, v.kind.value > 0, step)
        else:
            yield from sample_line(prev, v, step)
        prev = v
