"""
Unit tests for the Rhythm Analyzer.
"""

import random
from datetime import datetime, timedelta

import pytest

from zengo.progression.rhythm import ActivityEvent, compute_fastest_bins, median, weekday_index

MONDAY = datetime(2024, 1, 1)  # a Monday
SUNDAY = datetime(2024, 1, 7)


def events_at(start, offsets_min, action_type="create"):
    return [ActivityEvent(start + timedelta(minutes=m), action_type) for m in offsets_min]


class TestMedian:
    """Test the median helper."""

    def test_odd(self):
        assert median([9.0, 1.0, 5.0]) == 5.0

    def test_even_averages_middle_values(self):
        assert median([4.0, 1.0, 3.0, 10.0]) == 3.5

    def test_single(self):
        assert median([2.5]) == 2.5

    def test_empty(self):
        with pytest.raises(ValueError):
            median([])


class TestWeekdayIndex:
    """Weekdays are numbered from Sunday."""

    def test_week_starts_on_sunday(self):
        days = [SUNDAY + timedelta(days=offset) for offset in range(7)]
        assert [weekday_index(day) for day in days] == [0, 1, 2, 3, 4, 5, 6]

    def test_monday_is_one(self):
        assert weekday_index(MONDAY) == 1

    def test_sunday_events_land_in_slot_zero(self):
        events = events_at(SUNDAY.replace(hour=9), [0, 4, 8, 12])
        bins = compute_fastest_bins(events, {"create"}, min_count=1)
        assert (bins[0].weekday, bins[0].hour) == (0, 9)


class TestComputeFastestBins:
    """Test slot ranking."""

    @pytest.fixture
    def events(self):
        monday_9 = events_at(MONDAY.replace(hour=9), [0, 5, 15, 20])
        tuesday_10 = events_at(MONDAY.replace(hour=10) + timedelta(days=1), [0, 2, 4, 6])
        return monday_9 + tuesday_10

    def test_ranks_fastest_first(self, events):
        bins = compute_fastest_bins(events, {"create"})

        assert [(b.weekday, b.hour) for b in bins] == [(2, 10), (1, 9)]
        # Tuesday holds the overnight gap plus three 2-minute gaps
        assert bins[0].count == 4
        assert bins[0].median_interval_min == 2.0
        assert bins[1].count == 3
        assert bins[1].median_interval_min == 5.0

    def test_input_order_does_not_matter(self, events):
        shuffled = list(events)
        random.Random(5).shuffle(shuffled)
        assert compute_fastest_bins(shuffled, {"create"}) == compute_fastest_bins(events, {"create"})

    def test_min_count_discards_sparse_slots(self, events):
        bins = compute_fastest_bins(events, {"create"}, min_count=4)
        assert [(b.weekday, b.hour) for b in bins] == [(2, 10)]

    def test_top_n(self, events):
        assert len(compute_fastest_bins(events, {"create"}, top_n=1)) == 1
        assert compute_fastest_bins(events, {"create"}, top_n=0) == []

    def test_only_target_types_sampled(self):
        events = events_at(MONDAY.replace(hour=8), [0, 1, 2, 3], "view")
        events += events_at(MONDAY.replace(hour=8), [30], "create")
        bins = compute_fastest_bins(events, {"create"}, min_count=1)

        assert len(bins) == 1
        # The single sample is the gap from the last view to the create
        assert bins[0].median_interval_min == 27.0

    def test_gap_belongs_to_later_event_slot(self):
        events = events_at(MONDAY.replace(hour=9, minute=50), [0, 20])
        bins = compute_fastest_bins(events, {"create"}, min_count=1)
        assert (bins[0].weekday, bins[0].hour) == (1, 10)

    def test_ties_prefer_more_samples(self):
        events = events_at(MONDAY.replace(hour=6), [0, 3, 6, 9])
        events += events_at(MONDAY.replace(hour=20), [0, 3, 6, 9, 12])
        bins = compute_fastest_bins(events, {"create"}, min_count=3)

        assert [b.hour for b in bins][:2] == [20, 6]
        assert bins[0].count > bins[1].count

    def test_sorted_and_supported(self):
        rng = random.Random(11)
        start = MONDAY
        events = []
        for _ in range(400):
            start += timedelta(minutes=rng.randint(1, 240))
            events.append(ActivityEvent(start, rng.choice(["create", "review", "view"])))

        bins = compute_fastest_bins(events, {"create", "review"}, min_count=2, top_n=50)
        medians = [b.median_interval_min for b in bins]
        assert medians == sorted(medians)
        assert all(b.count >= 2 for b in bins)

    def test_empty_history(self):
        assert compute_fastest_bins([], {"create"}) == []
