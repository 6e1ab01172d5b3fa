"""
Long-term models fed by finished sessions.

- level: experience/level curves over usage aggregates
- rhythm: fastest weekday/hour engagement slots
- nudges: board-size promotion hints from recent results

All functions are pure; they may run concurrently for different users.
"""

from zengo.progression.level import (
    DEFAULT_LEVEL_CONFIG,
    LevelConfig,
    LevelInputs,
    ProgressionState,
    XPBreakdown,
    compute_level,
)
from zengo.progression.nudges import Nudges, compute_nudges
from zengo.progression.rhythm import ActivityEvent, RhythmBin, compute_fastest_bins, median, weekday_index

__all__ = [
    "DEFAULT_LEVEL_CONFIG",
    "ActivityEvent",
    "LevelConfig",
    "LevelInputs",
    "Nudges",
    "ProgressionState",
    "RhythmBin",
    "XPBreakdown",
    "compute_fastest_bins",
    "compute_level",
    "compute_nudges",
    "median",
    "weekday_index",
]
