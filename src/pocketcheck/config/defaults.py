"""Default tolerances for curve handling, simulation and pocketing.

All lengths are in the caller's drawing units (usually mm).
"""

# Chordal tolerance used when an arc must become a polyline.
DEFAULT_ACCURACY = 0.01

# Grid resolution defaults to tool_radius / GRID_DIVISOR, but never finer
# than MIN_GRID_RESOLUTION.
GRID_DIVISOR = 5.0
MIN_GRID_RESOLUTION = 0.05

# Arcs and lines shorter than this are treated as degenerate.
DEGENERATE_EPSILON = 1e-10

# Pocket verification
MIN_COVERAGE = 0.9


def default_resolution(tool_radius: float) -> float:
    """Grid cell size for a tool of *tool_radius*."""
    return max(tool_radius / GRID_DIVISOR, MIN_GRID_RESOLUTION)
