"""Tests for the raster material-removal simulator."""

import math

import numpy as np
import pytest

from pocketcheck.core.curve import Curve, Point, Vertex
from pocketcheck.core.simulator import (
    CellState,
    MaterialSimulator,
    SimulationResult,
    contains_points,
    simulate,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def square() -> Curve:
    """CCW 10x10 square, lower-left at origin."""
    return Curve.square(0, 0, 10)


@pytest.fixture
def right_half_island() -> Curve:
    """CW island covering the right half of the square."""
    return Curve.rect(5, 0, 5, 10).reversed()


def _zigzag(width: float, height: float, spacing: float) -> Curve:
    """Raster path over [0, width] x [0, height]."""
    pts = []
    y = 0.0
    i = 0
    while y <= height + 1e-9:
        row = [(0.0, y), (width, y)]
        pts.extend(row if i % 2 == 0 else row[::-1])
        y += spacing
        i += 1
    return Curve.from_points(pts)


def _cell(result: SimulationResult, x: float, y: float) -> int:
    """State of the cell whose centre is (x, y)."""
    col = round((x - result.origin.x) / result.resolution - 0.5)
    row = round((y - result.origin.y) / result.resolution - 0.5)
    return int(result.cells[row, col])


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class TestParameters:
    def test_default_resolution(self, square):
        assert MaterialSimulator(square, [], 3.0).resolution == pytest.approx(0.6)

    def test_default_resolution_floor(self, square):
        assert MaterialSimulator(square, [], 0.1).resolution == pytest.approx(0.05)

    def test_negative_tool_radius(self, square):
        with pytest.raises(ValueError, match="tool_radius"):
            simulate(square, [], -1.0, [])

    @pytest.mark.parametrize("resolution", [0.0, -0.5])
    def test_invalid_resolution(self, square, resolution):
        with pytest.raises(ValueError, match="resolution"):
            simulate(square, [], 1.0, [], resolution=resolution)


# ---------------------------------------------------------------------------
# Phase 1: classification
# ---------------------------------------------------------------------------


class TestClassification:
    def test_grid_geometry(self, square):
        r = simulate(square, [], 1.0, [], resolution=0.5)
        assert r.origin == Point(-0.5, -0.5)
        assert (r.rows, r.cols) == (22, 22)
        assert r.cells.dtype == np.uint8

    def test_cuttable_cells(self, square):
        r = simulate(square, [], 1.0, [], resolution=0.5)
        assert r.total_cuttable_cells == 400
        assert r.count(CellState.OUTSIDE) == 22 * 22 - 400

    def test_island_cells(self, square):
        island = Curve.rect(4, 4, 2, 2).reversed()
        r = simulate(square, [island], 1.0, [], resolution=0.5)
        assert r.count(CellState.ISLAND) == 16
        assert r.total_cuttable_cells == 400 - 16

    def test_island_winding_does_not_matter(self, square):
        ccw = simulate(square, [Curve.rect(4, 4, 2, 2)], 1.0, [], resolution=0.5)
        assert ccw.count(CellState.ISLAND) == 16

    def test_arc_boundary_is_linearized(self):
        r = simulate(Curve.circle(0, 0, 5), [], 1.0, [], resolution=0.25)
        expected = math.pi * 25 / 0.25 ** 2
        assert r.total_cuttable_cells == pytest.approx(expected, rel=0.03)

    def test_contains_points_needs_three_vertices(self):
        xs = np.array([0.5])
        ys = np.array([0.5])
        line = Curve.from_points([(0, 0), (1, 1)])
        assert not contains_points(line, xs, ys).any()

    def test_contains_points_parity(self):
        xs = np.array([0.5, 1.5, 5.0])
        ys = np.array([0.5, 5.0])
        inside = contains_points(Curve.square(0, 0, 2), xs, ys)
        assert inside.tolist() == [[True, True, False], [False, False, False]]


# ---------------------------------------------------------------------------
# Phase 2 / 3: stamping and metrics
# ---------------------------------------------------------------------------


class TestStamping:
    def test_empty_toolpath(self, square):
        r = simulate(square, [], 1.0, [], resolution=0.5)
        assert r.coverage == 0.0
        assert r.cut_cells == 0
        assert r.uncut_fraction == 1.0

    def test_nothing_cuttable_is_fully_covered(self, square):
        island = Curve.rect(-5, -5, 20, 20).reversed()
        r = simulate(square, [island], 1.0, [], resolution=0.5)
        assert r.total_cuttable_cells == 0
        assert r.coverage == 1.0

    def test_full_coverage(self, square):
        path = _zigzag(10, 10, 2.0)
        r = simulate(square, [], 3.0, [path], resolution=0.5)
        assert r.coverage == 1.0
        assert r.cut_cells == r.total_cuttable_cells
        assert r.island_violation_cells == 0

    def test_empty_curve_is_skipped(self, square):
        r = simulate(square, [], 1.0, [Curve()], resolution=0.5)
        assert r.cut_cells == 0

    def test_padding_cuts_but_does_not_violate(self, square, right_half_island):
        # Tool radius 1, grid 1 → padded radius 1.5
        path = Curve.from_points([(4.0, 5.5)])
        r = simulate(square, [right_half_island], 1.0, [path], resolution=1.0)
        assert _cell(r, 2.5, 5.5) == CellState.CUT       # 1.5 away, padded only
        assert _cell(r, 5.5, 5.5) == CellState.ISLAND    # 1.5 away, island
        assert r.island_violation_cells == 0

    def test_violation_inside_tool_radius(self, square, right_half_island):
        path = Curve.from_points([(4.6, 5.5)])
        r = simulate(square, [right_half_island], 1.0, [path], resolution=1.0)
        assert _cell(r, 5.5, 5.5) == CellState.ISLAND_VIOLATED
        assert r.island_violation_cells >= 1

    def test_island_cells_never_cut(self, square, right_half_island):
        path = _zigzag(10, 10, 1.0)
        r = simulate(square, [right_half_island], 1.0, [path], resolution=0.5)
        assert r.count(CellState.ISLAND) == 0
        assert r.island_violation_cells == 200
        assert r.coverage == 1.0

    def test_arc_toolpath(self, square):
        ring = Curve.circle(5, 5, 3)
        r = simulate(square, [], 1.0, [ring], resolution=1.0)
        assert _cell(r, 7.5, 4.5) == CellState.CUT
        assert _cell(r, 4.5, 4.5) == CellState.UNCUT
        assert 0.0 < r.coverage < 1.0

    def test_zero_radius_arc_only_stamps_start(self, square):
        degenerate = Curve((Vertex.line(5, 5), Vertex.ccw_arc(6, 5, 5, 5)))
        point = Curve.from_points([(5, 5)])
        a = simulate(square, [], 1.0, [degenerate], resolution=0.5)
        b = simulate(square, [], 1.0, [point], resolution=0.5)
        assert a.cut_cells == b.cut_cells
        assert np.array_equal(a.cells, b.cells)

    def test_stamp_near_grid_edge(self, square):
        # Samples outside the grid are clipped, not an error
        path = Curve.from_points([(-20, -20), (-20, 30)])
        r = simulate(square, [], 1.0, [path], resolution=0.5)
        assert r.cut_cells == 0


class TestResult:
    def test_cell_center(self, square):
        r = simulate(square, [], 1.0, [], resolution=0.5)
        assert r.cell_center(0, 0) == Point(-0.25, -0.25)
        assert r.cell_center(2, 1) == Point(0.25, 0.75)

    def test_uncut_cells(self, square):
        path = Curve.from_points([(0, 0), (10, 0)])
        r = simulate(square, [], 1.0, [path], resolution=0.5)
        assert r.uncut_cells == r.total_cuttable_cells - r.cut_cells
        assert r.uncut_fraction == pytest.approx(1.0 - r.coverage)

    def test_simulator_is_reusable(self, square):
        sim = MaterialSimulator(square, [], 1.0, resolution=0.5)
        first = sim.simulate([Curve.from_points([(5, 5)])])
        second = sim.simulate([])
        assert first.cut_cells > 0
        assert second.cut_cells == 0
