"""Tests for line / arc point sampling."""

import math

import pytest

from pocketcheck.core.curve import Curve, Point, Vertex
from pocketcheck.core.sampling import arc_sweep, sample_arc, sample_curve, sample_line


class TestArcSweep:
    def test_ccw_short_way(self):
        assert arc_sweep(0.0, math.pi / 2, ccw=True) == pytest.approx(math.pi / 2)

    def test_cw_long_way(self):
        assert arc_sweep(0.0, math.pi / 2, ccw=False) == pytest.approx(3 * math.pi / 2)

    def test_wraparound(self):
        # From just below +X (CCW) across the atan2 branch cut
        assert arc_sweep(3.0, -3.0, ccw=True) == pytest.approx(2 * math.pi - 6.0)

    def test_equal_angles_is_full_circle(self):
        assert arc_sweep(1.0, 1.0, ccw=True) == pytest.approx(2 * math.pi)
        assert arc_sweep(1.0, 1.0, ccw=False) == pytest.approx(2 * math.pi)


class TestSampleLine:
    def test_count_and_end(self):
        pts = list(sample_line(Point(0, 0), Point(10, 0), step=1.0))
        assert len(pts) == 10
        assert pts[0] == pytest.approx((1.0, 0.0))
        assert pts[-1] == pytest.approx((10.0, 0.0))

    def test_short_line_gives_one_sample(self):
        pts = list(sample_line(Point(0, 0), Point(0.1, 0), step=1.0))
        assert pts == [pytest.approx((0.1, 0.0))]

    def test_degenerate_line(self):
        assert list(sample_line(Point(2, 2), Point(2, 2), step=0.5)) == []


class TestSampleArc:
    def test_quarter_arc(self):
        pts = list(sample_arc(Point(10, 0), Point(0, 10), Point(0, 0), True, step=1.0))
        assert len(pts) == 16  # ceil(15.708)
        assert pts[-1] == pytest.approx((0.0, 10.0), abs=1e-9)
        for x, y in pts:
            assert math.hypot(x, y) == pytest.approx(10.0)

    def test_spacing_within_step(self):
        pts = [(10.0, 0.0)] + list(
            sample_arc(Point(10, 0), Point(-10, 0), Point(0, 0), False, step=0.5)
        )
        gaps = [math.dist(a, b) for a, b in zip(pts, pts[1:])]
        assert max(gaps) <= 0.5

    def test_zero_radius_yields_nothing(self):
        assert list(sample_arc(Point(1, 1), Point(2, 1), Point(1, 1), True, 0.1)) == []


class TestSampleCurve:
    def test_starts_with_start_point(self):
        c = Curve.from_points([(1, 2), (3, 2)])
        pts = list(sample_curve(c, step=1.0))
        assert pts[0] == (1, 2)
        assert pts[-1] == pytest.approx((3.0, 2.0))
        assert len(pts) == 3

    def test_mixed_segments(self):
        c = Curve((
            Vertex.line(0, 0),
            Vertex.line(10, 0),
            Vertex.ccw_arc(0, 10, 0, 0),
        ))
        pts = list(sample_curve(c, step=1.0))
        assert len(pts) == 1 + 10 + 16

    def test_empty_curve(self):
        assert list(sample_curve(Curve(), step=1.0)) == []
