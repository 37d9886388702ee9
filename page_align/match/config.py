"""Matching mode presets and configuration contract."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

MatchingMode = Literal["strict", "tolerant", "fuzzy"]

MATCHING_MODES: tuple[MatchingMode, ...] = ("strict", "tolerant", "fuzzy")

MODE_THRESHOLDS: dict[str, float] = {
    "strict": 1.0,
    "tolerant": 0.85,
    "fuzzy": 0.60,
}


@dataclass(frozen=True)
class MatchingConfig:
    """Deterministic knobs for sequential page matching."""

    mode: MatchingMode = "tolerant"
    threshold: float | None = None
    max_window_ratio: float = 2.0

    @property
    def effective_threshold(self) -> float:
        if self.threshold is not None:
            return self.threshold
        return MODE_THRESHOLDS[self.mode]

    def validate(self) -> None:
        if self.mode not in MODE_THRESHOLDS:
            raise ValueError(
                f"mode must be one of: {', '.join(MATCHING_MODES)} (got {self.mode!r})"
            )
        if self.threshold is not None:
            if self.mode == "strict":
                raise ValueError("threshold cannot be overridden in strict mode")
            if not 0.0 < self.threshold <= 1.0:
                raise ValueError("threshold must be in (0.0, 1.0]")
        if self.max_window_ratio <= 0:
            raise ValueError("max_window_ratio must be greater than 0")
