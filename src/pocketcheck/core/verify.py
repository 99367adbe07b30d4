"""End-to-end pocket verification.

Generates a pocket with an engine, simulates the resulting toolpaths
against the same boundary and islands, and turns the metrics into a list
of issues before anything is sent to a machine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from ..config.defaults import MIN_COVERAGE
from ..config.settings import PocketSettings
from .curve import Curve
from .pocket.area import ShapelyArea
from .pocket.base import PocketEngine, PocketParams
from .simulator import SimulationResult, simulate


@dataclass
class VerificationIssue:
    """A single problem found while verifying a pocket."""

    severity: str  # "error" or "warning"
    message: str


@dataclass
class PocketReport:
    """Toolpaths, simulation metrics and issues for one pocket."""

    toolpaths: list[Curve]
    simulation: SimulationResult
    issues: list[VerificationIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(i.severity == "error" for i in self.issues)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == "warning" for i in self.issues)

    @property
    def is_ok(self) -> bool:
        return len(self.issues) == 0


def check_simulation(
    result: SimulationResult,
    toolpaths: Sequence[Curve],
    min_coverage: float = MIN_COVERAGE,
) -> list[VerificationIssue]:
    """Classify simulation metrics into errors and warnings.

    Checks performed:
    - No island cell swept by the tool
    - Toolpath is non-empty when there is material to cut
    - Coverage at least *min_coverage*
    """
    issues: list[VerificationIssue] = []

    if result.island_violation_cells > 0:
        issues.append(VerificationIssue(
            "error",
            f"Tool cuts into islands ({result.island_violation_cells} cells)",
        ))

    if result.total_cuttable_cells > 0 and not any(len(c) for c in toolpaths):
        issues.append(VerificationIssue(
            "error",
            "Toolpath is empty but the pocket has material to remove",
        ))
    elif result.coverage < min_coverage:
        issues.append(VerificationIssue(
            "warning",
            f"Coverage {result.coverage:.1%} below {min_coverage:.1%} "
            f"({result.uncut_cells} cells uncut)",
        ))

    return issues


def _with_winding(curve: Curve, accuracy: float, ccw: bool) -> Curve:
    """*curve* traced in the requested direction.

    Winding is read from the linearized curve: raw arc vertices can enclose
    zero shoelace area (a circle made of two half arcs).
    """
    if curve.linearized(accuracy).is_ccw == ccw:
        return curve
    return curve.reversed()


def verify_pocket(
    boundary: Curve,
    islands: Sequence[Curve],
    params: PocketParams | float,
    settings: Optional[PocketSettings] = None,
    accuracy: Optional[float] = None,
    resolution: Optional[float] = None,
    min_coverage: Optional[float] = None,
    engine_factory: Callable[[float], PocketEngine] = ShapelyArea,
) -> PocketReport:
    """Generate a pocket for *boundary* minus *islands* and check it.

    *params* may be a bare tool radius, in which case strategy and stepover
    come from *settings*.  Explicit *accuracy*, *resolution* and
    *min_coverage* override the settings values.

    The boundary is fed to the engine counter-clockwise and every island
    clockwise, whatever their original winding.
    """
    settings = settings or PocketSettings()
    if not isinstance(params, PocketParams):
        params = settings.pocket_params(params)
    if accuracy is None:
        accuracy = settings.accuracy
    if resolution is None:
        resolution = settings.resolution
    if min_coverage is None:
        min_coverage = settings.min_coverage

    engine = engine_factory(accuracy)
    engine.add_curve(_with_winding(boundary, accuracy, ccw=True))
    for island in islands:
        engine.add_curve(_with_winding(island, accuracy, ccw=False))

    toolpaths = engine.make_pocket(
        params.tool_radius,
        extra_offset=params.extra_offset,
        stepover=params.stepover,
        start_from_center=params.start_from_center,
        strategy=params.strategy,
        zig_angle=params.zig_angle,
    )

    result = simulate(boundary, islands, params.tool_radius, toolpaths, resolution)
    return PocketReport(
        toolpaths=toolpaths,
        simulation=result,
        issues=check_simulation(result, toolpaths, min_coverage),
    )
