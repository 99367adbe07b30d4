"""Pocketing engine contract and parameter containers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from ..curve import Curve


class PocketStrategy(Enum):
    """How the pocket interior is cleared."""
    SPIRAL = "spiral"                      # concentric offsets, outside in
    ZIGZAG = "zigzag"                      # parallel raster passes
    SINGLE_OFFSET = "single_offset"        # one pass along the walls
    ZIGZAG_THEN_SINGLE_OFFSET = "zigzag_then_single_offset"


@dataclass
class PocketParams:
    """Parameters for one pocket generation run."""

    tool_radius: float
    stepover: float                 # radial distance between passes
    extra_offset: float = 0.0       # material left on the walls
    start_from_center: bool = False
    strategy: PocketStrategy = PocketStrategy.SPIRAL
    zig_angle: float = 0.0          # degrees, 0 means passes along X

    def __post_init__(self) -> None:
        if self.tool_radius < 0:
            raise ValueError("tool_radius must not be negative")
        if self.stepover <= 0:
            raise ValueError("stepover must be positive")

    @property
    def wall_offset(self) -> float:
        """Distance from the pocket walls to the first tool-centre pass."""
        return self.tool_radius + self.extra_offset


@runtime_checkable
class PocketEngine(Protocol):
    """
    Responsibilities:
      • Accumulate closed curves (CCW = material to remove, CW = island).
      • Combine accumulated regions with union / difference in place.
      • Emit toolpath curves that clear the region with a given tool.
    Errors raised by an engine are passed to the caller untouched.
    """

    @property
    def curves(self) -> list[Curve]: ...

    def add_curve(self, curve: Curve) -> None: ...
    def unite(self, other: "PocketEngine") -> None: ...
    def subtract(self, other: "PocketEngine") -> None: ...

    def make_pocket(
        self,
        tool_radius: float,
        extra_offset: float = 0.0,
        stepover: float = 1.0,
        start_from_center: bool = False,
        strategy: PocketStrategy = PocketStrategy.SPIRAL,
        zig_angle: float = 0.0,
    ) -> list[Curve]:
        """Return toolpath curves; empty when nothing fits the tool."""
