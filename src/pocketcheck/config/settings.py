"""User preferences for pocket verification (persisted to disk)."""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from ..core.pocket.base import PocketParams, PocketStrategy
from .defaults import DEFAULT_ACCURACY, MIN_COVERAGE


@dataclass
class PocketSettings:
    """Defaults serialized to ~/.pocketcheck/settings.json."""

    accuracy: float = DEFAULT_ACCURACY
    resolution: Optional[float] = None   # None → derived from tool radius
    min_coverage: float = MIN_COVERAGE
    strategy: str = PocketStrategy.SPIRAL.value
    stepover_fraction: float = 0.4       # fraction of tool diameter

    @staticmethod
    def _path() -> Path:
        return Path.home() / ".pocketcheck" / "settings.json"

    @property
    def pocket_strategy(self) -> PocketStrategy:
        return PocketStrategy(self.strategy)

    def stepover_for(self, tool_radius: float) -> float:
        """Absolute stepover for a tool of *tool_radius*."""
        return 2.0 * tool_radius * self.stepover_fraction

    def pocket_params(self, tool_radius: float) -> PocketParams:
        return PocketParams(
            tool_radius=tool_radius,
            stepover=self.stepover_for(tool_radius),
            strategy=self.pocket_strategy,
        )

    def save(self, path: Optional[Path] = None) -> None:
        p = path or self._path()
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(asdict(self), indent=2))

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "PocketSettings":
        p = path or cls._path()
        if p.exists():
            data = json.loads(p.read_text())
            return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
        return cls()
