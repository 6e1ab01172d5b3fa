"""
Engagement rhythm: which weekday/hour slots show the fastest recurring cadence.

Weekdays are numbered Sunday=0 .. Saturday=6, the numbering used by the
analytics front-end that renders the bins. Each gap is attributed to the
slot of the later event of the pair.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ActivityEvent:
    """One historical user action."""

    timestamp: datetime
    action_type: str


@dataclass(frozen=True)
class RhythmBin:
    """Cadence statistics for one (weekday, hour) slot."""

    weekday: int  # 0..6, Sunday first
    hour: int  # 0..23
    median_interval_min: float
    count: int


def weekday_index(moment: datetime) -> int:
    """Weekday of a timestamp with Sunday=0."""
    return (moment.weekday() + 1) % 7


def median(values: list[float]) -> float:
    """Median by sorting; averages the two middle values for even lengths."""
    if not values:
        raise ValueError("median of empty sample")
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def compute_fastest_bins(
    events: Iterable[ActivityEvent],
    target_action_types: Collection[str],
    min_count: int = 3,
    top_n: int = 3,
) -> list[RhythmBin]:
    """
    Rank weekday/hour slots by their median gap between actions.

    Args:
        events: Historical actions (sorted by timestamp before use)
        target_action_types: Action types whose arrival counts as a sample
        min_count: Minimum samples for a slot to be reported
        top_n: Number of slots to return

    Returns:
        Up to top_n RhythmBin, fastest median first, more samples first on ties
    """
    ordered = sorted(events, key=lambda e: e.timestamp)
    buckets: dict[tuple[int, int], list[float]] = defaultdict(list)

    for previous, current in zip(ordered, ordered[1:]):
        if current.action_type not in target_action_types:
            continue
        gap_min = (current.timestamp - previous.timestamp).total_seconds() / 60.0
        buckets[(weekday_index(current.timestamp), current.timestamp.hour)].append(gap_min)

    bins = [
        RhythmBin(weekday=weekday, hour=hour, median_interval_min=median(gaps), count=len(gaps))
        for (weekday, hour), gaps in buckets.items()
        if len(gaps) >= min_count
    ]
    bins.sort(key=lambda b: (b.median_interval_min, -b.count))
    return bins[: max(0, top_n)]
