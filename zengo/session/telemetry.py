"""
Session Telemetry for the board game.

Records pointer and click events while the player is placing stones and
derives behavioral statistics from them:
- Timing: first-click latency, inter-click intervals, hesitation periods
- Space: click positions and distance to the nearest word cell
- Order: how closely the click order follows the sentence order

One collector belongs to one session. It is passed explicitly to whoever
forwards UI events; there is no shared module-level instance.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from loguru import logger

from zengo.config import get_settings
from zengo.core.models import GridPoint

DETAILED_DATA_VERSION = "v2.0"


def monotonic_ms() -> float:
    """Default clock: monotonic milliseconds."""
    return time.perf_counter() * 1000.0


@dataclass(frozen=True)
class ClickSample:
    """Raw pointer coordinates of a click plus when it happened."""

    x: float
    y: float
    timestamp: float


@dataclass
class TelemetryRecord:
    """Behavioral record of one play phase."""

    first_click_latency: float | None = None
    inter_click_intervals: list[float] = field(default_factory=list)
    hesitation_periods: list[float] = field(default_factory=list)
    spatial_errors: list[float] = field(default_factory=list)
    click_positions: list[ClickSample] = field(default_factory=list)
    correct_positions: list[GridPoint] = field(default_factory=list)
    sequential_accuracy: float | None = None
    temporal_order_violations: int | None = None
    detailed_data_version: str = DETAILED_DATA_VERSION

    @property
    def is_finalized(self) -> bool:
        return self.sequential_accuracy is not None

    @property
    def mean_inter_click_interval(self) -> float:
        if not self.inter_click_intervals:
            return 0.0
        return sum(self.inter_click_intervals) / len(self.inter_click_intervals)

    @property
    def exact_hits(self) -> int:
        """Number of clicks that landed on a word cell."""
        return sum(1 for error in self.spatial_errors if error == 0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


class TelemetryCollector:
    """
    Collects click/pointer telemetry for a single session.

    The clock is injectable so tests can drive time explicitly.
    """

    def __init__(
        self,
        clock: Callable[[], float] = monotonic_ms,
        hesitation_threshold_ms: float | None = None,
    ):
        """
        Initialize the collector.

        Args:
            clock: Callable returning the current time in milliseconds
            hesitation_threshold_ms: Pointer idle gap that counts as hesitation
                (settings.hesitation_threshold_ms if None)
        """
        self.clock = clock
        if hesitation_threshold_ms is None:
            hesitation_threshold_ms = get_settings().hesitation_threshold_ms
        self.hesitation_threshold_ms = hesitation_threshold_ms
        self.active = False
        self._reset([], [], None)

    def _reset(
        self,
        correct_positions: Sequence[GridPoint],
        expected_sequence: Sequence[int],
        board_size: int | None,
    ) -> None:
        self.record = TelemetryRecord(correct_positions=list(correct_positions))
        self.expected_positions = list(correct_positions)
        self.expected_sequence = list(expected_sequence)
        self.board_size = board_size
        self.user_sequence: list[int] = []
        self.start_time = 0.0
        self.last_click_time: float | None = None
        self.last_move_time = 0.0

    # =========================================================================
    # Event intake
    # =========================================================================

    def start_session(
        self,
        correct_positions: Sequence[GridPoint],
        expected_sequence: Sequence[int] | None = None,
        board_size: int | None = None,
    ) -> None:
        """
        Reset all accumulators and store the ground truth for a new play phase.

        Args:
            correct_positions: Word cells, indexed like the board's mappings
            expected_sequence: Mapping indices in sentence order
            board_size: Board edge length, used to detect off-board clicks
        """
        self._reset(correct_positions, expected_sequence or [], board_size)
        self.start_time = self.clock()
        self.last_move_time = self.start_time
        self.active = True
        logger.debug(f"Telemetry started with {len(self.expected_positions)} target cells")

    def track_pointer_move(self, x: float, y: float) -> None:
        """Record a hesitation if the pointer was idle longer than the threshold."""
        if not self.active:
            return
        now = self.clock()
        idle = now - self.last_move_time
        if idle > self.hesitation_threshold_ms:
            self.record.hesitation_periods.append(idle)
            logger.debug(f"Hesitation detected: {idle:.0f}ms")
        self.last_move_time = now

    def record_click(self, click_x: float, click_y: float, grid_x: int, grid_y: int) -> None:
        """
        Record a click on the board.

        Args:
            click_x: Raw pointer x coordinate
            click_y: Raw pointer y coordinate
            grid_x: Resolved board column
            grid_y: Resolved board row
        """
        if not self.active:
            return
        now = self.clock()

        if self.record.first_click_latency is None:
            self.record.first_click_latency = now - self.start_time
            logger.debug(f"First click latency: {self.record.first_click_latency:.0f}ms")
        elif self.last_click_time is not None:
            self.record.inter_click_intervals.append(now - self.last_click_time)

        self.record.click_positions.append(ClickSample(x=click_x, y=click_y, timestamp=now))

        cell = GridPoint(grid_x, grid_y)
        if cell in self.expected_positions:
            self.user_sequence.append(self.expected_positions.index(cell))

        error = self._spatial_error(cell)
        if error is not None:
            self.record.spatial_errors.append(error)

        self.last_click_time = now

    def _spatial_error(self, cell: GridPoint) -> float | None:
        """Distance from a clicked cell to the nearest word cell."""
        if not self.expected_positions:
            return None
        if self._is_off_board(cell):
            # Off-board input gets the largest distance the board allows
            return self._max_spatial_error()
        return min(math.hypot(cell.x - p.x, cell.y - p.y) for p in self.expected_positions)

    def _is_off_board(self, cell: GridPoint) -> bool:
        if self.board_size is not None:
            return not cell.in_bounds(self.board_size)
        # Without a board size only negative coordinates are known to be off the grid
        return cell.x < 0 or cell.y < 0

    def _max_spatial_error(self) -> float:
        """Board diagonal, using the smallest board holding every word cell when size is unknown."""
        size = self.board_size
        if size is None:
            size = max(max(p.x, p.y) for p in self.expected_positions) + 1
        return math.hypot(size - 1, size - 1)

    # =========================================================================
    # Summary statistics
    # =========================================================================

    def _sequential_accuracy(self) -> float:
        """Fraction of expected order positions matched index-by-index."""
        if not self.expected_sequence or not self.user_sequence:
            return 0.0
        matches = sum(
            1 for expected, actual in zip(self.expected_sequence, self.user_sequence) if expected == actual
        )
        return matches / len(self.expected_sequence)

    def _temporal_order_violations(self) -> int:
        """Count adjacent click pairs that go backwards in sentence order."""
        rank = {index: position for position, index in enumerate(self.expected_sequence)}
        ranks = [rank.get(index, index) for index in self.user_sequence]
        return sum(1 for previous, current in zip(ranks, ranks[1:]) if current < previous)

    def discard(self) -> None:
        """Drop everything collected so far without finalizing."""
        self.active = False
        self._reset([], [], None)

    def finish_session(self) -> TelemetryRecord:
        """Finalize order statistics and return the completed record."""
        self.active = False
        if not self.record.is_finalized:
            self.record.sequential_accuracy = self._sequential_accuracy()
            self.record.temporal_order_violations = self._temporal_order_violations()
            logger.debug(
                f"Telemetry finished: {len(self.record.click_positions)} clicks, "
                f"{len(self.record.hesitation_periods)} hesitations, "
                f"sequential accuracy {self.record.sequential_accuracy:.2f}, "
                f"{self.record.temporal_order_violations} order violations"
            )
        return self.record
