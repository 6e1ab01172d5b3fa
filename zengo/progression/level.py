"""
Experience and Level Model.

Three usage channels each earn experience through a diminishing-returns
power curve (coefficient x value^exponent):
- time: hours of usage
- items: number of content items created
- concept: concept-understanding score sum, in units of `concept_unit`

Level L is the largest integer with k x L^growth_exponent <= total XP.

Example with the default config, 1 hour, 10 items, concept sum 1000:
    xp_time    = 80  x 1^0.85          =  80.0
    xp_items   = 100 x 10^0.8          = 630.96
    xp_concept = 220 x 1^0.9           = 220.0
    total      = 930.96  ->  level 1 (thresholds 500 / 1366.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, field_validator

MS_PER_HOUR = 3_600_000


def _finite_non_negative(value: float) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return max(0.0, float(value))


class LevelInputs(BaseModel):
    """
    Raw usage aggregates, clamped at the boundary.

    NaN, infinities and negative values become 0 before any formula runs.
    """

    model_config = ConfigDict(frozen=True)

    total_usage_ms: float = 0.0
    item_count: float = 0.0
    concept_score_sum: float = 0.0

    @field_validator("total_usage_ms", "item_count", "concept_score_sum", mode="before")
    @classmethod
    def clamp_to_finite(cls, value: object) -> float:
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 0.0
        return _finite_non_negative(number)

    @property
    def hours(self) -> float:
        return self.total_usage_ms / MS_PER_HOUR


@dataclass(frozen=True)
class LevelConfig:
    """Coefficients and exponents of the XP and level curves."""

    time_coefficient: float = 80.0
    item_coefficient: float = 100.0
    concept_coefficient: float = 220.0
    concept_unit: float = 1000.0

    # Diminishing returns exponents (0 < exp <= 1)
    time_exponent: float = 0.85
    item_exponent: float = 0.8
    concept_exponent: float = 0.9

    # Level threshold curve: k x L^growth_exponent
    k: float = 500.0
    growth_exponent: float = 1.45

    def __post_init__(self):
        for name in ("time_exponent", "item_exponent", "concept_exponent"):
            exponent = getattr(self, name)
            if not 0 < exponent <= 1:
                raise ValueError(f"{name} must be in (0, 1], got {exponent}")
        if self.k <= 0 or self.growth_exponent <= 0:
            raise ValueError("k and growth_exponent must be positive")

    def threshold(self, level: int) -> float:
        """XP needed to reach a level."""
        return self.k * math.pow(level, self.growth_exponent)


DEFAULT_LEVEL_CONFIG = LevelConfig()


@dataclass(frozen=True)
class XPBreakdown:
    """Per-channel experience and the normalized inputs behind it."""

    xp_time: float
    xp_items: float
    xp_concept: float
    hours: float
    item_count: float
    concept_score_sum: float


@dataclass(frozen=True)
class ProgressionState:
    """Level standing derived from usage aggregates."""

    level: int
    total_xp: float
    next_level: int
    current_threshold: float
    next_threshold: float
    progress_to_next: float  # 0..1
    breakdown: XPBreakdown | None = field(default=None, compare=False)

    @property
    def xp_to_next(self) -> float:
        return max(0.0, self.next_threshold - self.total_xp)


def compute_level(
    inputs: LevelInputs,
    config: LevelConfig = DEFAULT_LEVEL_CONFIG,
) -> ProgressionState:
    """
    Compute total XP and level from usage aggregates.

    Args:
        inputs: Validated usage aggregates
        config: Curve parameters

    Returns:
        ProgressionState with level, thresholds and progress
    """
    hours = inputs.hours
    concept_units = inputs.concept_score_sum / max(1.0, config.concept_unit)

    xp_time = config.time_coefficient * math.pow(hours, config.time_exponent)
    xp_items = config.item_coefficient * math.pow(inputs.item_count, config.item_exponent)
    xp_concept = config.concept_coefficient * math.pow(concept_units, config.concept_exponent)
    total_xp = xp_time + xp_items + xp_concept

    level = max(0, math.floor(math.pow(total_xp / config.k, 1.0 / config.growth_exponent)))
    # Guard against float error right at a threshold
    if config.threshold(level) > total_xp and level > 0:
        level -= 1
    elif config.threshold(level + 1) <= total_xp:
        level += 1
    next_level = level + 1

    current_threshold = config.threshold(level)
    next_threshold = config.threshold(next_level)

    progress = 0.0
    if next_threshold > current_threshold:
        progress = (total_xp - current_threshold) / (next_threshold - current_threshold)
        progress = min(1.0, max(0.0, _finite_non_negative(progress)))

    return ProgressionState(
        level=level,
        total_xp=total_xp,
        next_level=next_level,
        current_threshold=current_threshold,
        next_threshold=next_threshold,
        progress_to_next=progress,
        breakdown=XPBreakdown(
            xp_time=xp_time,
            xp_items=xp_items,
            xp_concept=xp_concept,
            hours=hours,
            item_count=inputs.item_count,
            concept_score_sum=inputs.concept_score_sum,
        ),
    )
