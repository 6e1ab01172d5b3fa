"""
Difficulty nudges from recent results.

Suggests moving up a board size once the recent history shows the current
size is comfortable.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from zengo.core.models import ResultEntry, ResultType


@dataclass(frozen=True)
class Nudges:
    ready_for_5x5: bool
    suggest_7x7: bool


def _average_score(entries: Sequence[ResultEntry]) -> float:
    if not entries:
        return 0.0
    return sum(e.score or 0.0 for e in entries) / len(entries)


def compute_nudges(recent: Sequence[ResultEntry]) -> Nudges:
    """
    Evaluate promotion nudges.

    Args:
        recent: Results, newest first

    Returns:
        Nudges: ready_for_5x5 when the last 5 results hold at least two
        EXCELLENT 3x3 games or average >= 80 on 3x3; suggest_7x7 when the last
        10 hold at least four non-FAIL 5x5 games or any EXCELLENT 5x5 game
    """
    last5_3x3 = [e for e in recent[:5] if e.level.startswith("3x3")]
    last10_5x5 = [e for e in recent[:10] if e.level.startswith("5x5")]

    excellent_3x3 = sum(1 for e in last5_3x3 if e.result_type == ResultType.EXCELLENT)
    ready_for_5x5 = excellent_3x3 >= 2 or _average_score(last5_3x3) >= 80

    completed_5x5 = sum(1 for e in last10_5x5 if e.result_type != ResultType.FAIL)
    excellent_5x5 = sum(1 for e in last10_5x5 if e.result_type == ResultType.EXCELLENT)
    suggest_7x7 = completed_5x5 >= 4 or excellent_5x5 >= 1

    return Nudges(ready_for_5x5=ready_for_5x5, suggest_7x7=suggest_7x7)
