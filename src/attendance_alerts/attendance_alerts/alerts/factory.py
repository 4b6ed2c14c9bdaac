from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import StreakMode
from .strategies.base import StreakStrategy
from .strategies.best_run_strategy import BestRunStreakStrategy
from .strategies.trailing_strategy import TrailingStreakStrategy


@dataclass
class StreakStrategyFactory:
    """Factory Pattern: choose the streak measure for the calling surface."""

    def for_mode(self, mode: StreakMode) -> StreakStrategy:
        if mode == StreakMode.TRAILING:
            return TrailingStreakStrategy()
        if mode == StreakMode.BEST_RUN:
            return BestRunStreakStrategy()
        raise ValueError(f"Unsupported streak mode: {mode!r}")
