"""
Board Session State Machine.

Drives one play session through its lifecycle:

    idle -> showing -> playing -> submitting -> finished_{excellent,success,fail}

- showing: every word is visible for the board's display time, no input
- playing: the player places stones from memory, up to the stone budget
- submitting: entered on voluntary finish, budget exhaustion or when every
  word has been claimed; hands the session to the scoring engine
- finished_*: terminal, chosen by the scoring verdict

A session can be abandoned from showing or playing, which cancels its
timers and drops all state without scoring.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from zengo.core.models import (
    BoardContent,
    GameState,
    GridPoint,
    PlacedStone,
    ResultType,
    ScoreResult,
    SessionState,
)
from zengo.scoring.engine import ScoringEngine
from zengo.session.telemetry import TelemetryCollector, TelemetryRecord, monotonic_ms


class SessionStateError(RuntimeError):
    """Raised on an illegal session transition."""


class Cancellable(Protocol):
    """A scheduled callback that can be cancelled."""

    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], Cancellable]


def thread_timer(delay_ms: float, callback: Callable[[], None]) -> Cancellable:
    """Wall-clock countdown backed by threading.Timer."""
    timer = threading.Timer(delay_ms / 1000.0, callback)
    timer.daemon = True
    timer.start()
    return timer


# =============================================================================
# Next Round Policy
# =============================================================================


@dataclass(frozen=True)
class NextRound:
    """What to reuse when preparing the next game."""

    keep_content: bool
    keep_positions: bool


def plan_next_round(result_type: ResultType | None) -> NextRound:
    """
    Decide whether the next game reuses the sentence and its layout.

    EXCELLENT moves on to new content, SUCCESS replays the sentence on a new
    layout, FAIL replays the exact same board.
    """
    if result_type == ResultType.SUCCESS:
        return NextRound(keep_content=True, keep_positions=False)
    if result_type == ResultType.FAIL:
        return NextRound(keep_content=True, keep_positions=True)
    return NextRound(keep_content=False, keep_positions=False)


# =============================================================================
# Session
# =============================================================================


class BoardSession:
    """
    A single play session over one BoardContent.

    Timers are only scheduled when a timer factory is supplied; without one
    the caller advances the session explicitly with begin_play()/finish().
    """

    def __init__(
        self,
        content: BoardContent,
        telemetry: TelemetryCollector | None = None,
        scorer: ScoringEngine | None = None,
        clock: Callable[[], float] = monotonic_ms,
        timer_factory: TimerFactory | None = None,
        play_time_limit_ms: float | None = None,
    ):
        """
        Initialize the session.

        Args:
            content: Validated board to play
            telemetry: Collector receiving click/pointer events (new one if None)
            scorer: Scoring engine (default ScoringEngine if None)
            clock: Millisecond clock shared with the telemetry collector
            timer_factory: Schedules display/play countdowns, e.g. thread_timer
            play_time_limit_ms: Optional hard limit on the playing phase
        """
        self.content = content
        self.clock = clock
        self.telemetry = telemetry or TelemetryCollector(clock=clock)
        self.scorer = scorer or ScoringEngine()
        self.timer_factory = timer_factory
        self.play_time_limit_ms = play_time_limit_ms

        self.state = SessionState(total_allowed_stones=content.total_allowed_stones)
        self.result: ScoreResult | None = None
        self.telemetry_record: TelemetryRecord | None = None

        self._claimed: set[GridPoint] = set()
        self._timers: list[Cancellable] = []
        # Bumped on every start/abandon; timer callbacks carry the value they were scheduled under
        self._generation = 0
        self._lock = threading.RLock()

    @property
    def game_state(self) -> GameState:
        return self.state.state

    def _transition(self, new_state: GameState) -> None:
        logger.debug(f"Session {self.state.state.value} -> {new_state.value}")
        self.state.state = new_state

    def _schedule(self, delay_ms: float, callback: Callable[[], None]) -> None:
        if self.timer_factory is not None:
            self._timers.append(self.timer_factory(delay_ms, callback))

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()

    # =========================================================================
    # Transitions
    # =========================================================================

    def start(self) -> None:
        """Reveal the board (idle -> showing) and start the display countdown."""
        with self._lock:
            if self.state.state != GameState.IDLE:
                raise SessionStateError(f"Cannot start from {self.state.state.value}")
            self.state = SessionState(total_allowed_stones=self.content.total_allowed_stones)
            self._claimed.clear()
            self.result = None
            self.telemetry_record = None
            self._generation += 1
            self._transition(GameState.SHOWING)
            self._schedule(
                self.content.initial_display_time_ms,
                lambda generation=self._generation: self._on_display_elapsed(generation),
            )

    def _on_display_elapsed(self, generation: int) -> None:
        with self._lock:
            # Stale countdowns from an abandoned or restarted session are ignored
            if generation == self._generation and self.state.state == GameState.SHOWING:
                self.begin_play()

    def begin_play(self) -> None:
        """Hide the words and start accepting stones (showing -> playing)."""
        with self._lock:
            if self.state.state != GameState.SHOWING:
                raise SessionStateError(f"Cannot begin play from {self.state.state.value}")
            self._cancel_timers()
            self._transition(GameState.PLAYING)
            self.state.start_time = self.clock()
            self.telemetry.start_session(
                self.content.positions,
                self.content.expected_sequence,
                board_size=self.content.board_size,
            )
            if self.play_time_limit_ms is not None:
                self._schedule(
                    self.play_time_limit_ms,
                    lambda generation=self._generation: self._on_play_time_elapsed(generation),
                )

    def _on_play_time_elapsed(self, generation: int) -> None:
        with self._lock:
            if generation == self._generation and self.state.state == GameState.PLAYING:
                logger.debug("Play time limit reached")
                self.finish()

    def track_pointer_move(self, x: float, y: float) -> None:
        """Forward pointer movement to telemetry while playing."""
        with self._lock:
            if self.state.state == GameState.PLAYING:
                self.telemetry.track_pointer_move(x, y)

    def place_stone(
        self,
        grid_x: int,
        grid_y: int,
        click_x: float | None = None,
        click_y: float | None = None,
    ) -> PlacedStone | None:
        """
        Place a stone on a cell.

        The click is always forwarded to telemetry while playing. A stone is
        recorded unless the cell already holds one or the budget is spent.

        Args:
            grid_x: Board column
            grid_y: Board row
            click_x: Raw pointer x (defaults to grid_x)
            click_y: Raw pointer y (defaults to grid_y)

        Returns:
            The PlacedStone, or None if the input was not accepted
        """
        with self._lock:
            if self.state.state != GameState.PLAYING:
                logger.debug(f"Ignoring placement in {self.state.state.value}")
                return None

            now = self.clock()
            self.telemetry.record_click(
                grid_x if click_x is None else click_x,
                grid_y if click_y is None else click_y,
                grid_x,
                grid_y,
            )

            point = GridPoint(grid_x, grid_y)
            if self.state.has_stone_at(point):
                return None
            if self.state.used_stones_count >= self.state.total_allowed_stones:
                return None

            mapping = self.content.mapping_at(point)
            correct = mapping is not None and point not in self._claimed
            if correct:
                self._claimed.add(point)

            stone = PlacedStone(
                position=point,
                correct=correct,
                click_timestamp=now,
                placement_index=len(self.state.placed_stones),
                word_order=mapping.order if correct else None,
            )
            self.state.placed_stones.append(stone)
            self.state.used_stones_count += 1

            all_claimed = len(self._claimed) == self.content.total_words
            budget_spent = self.state.used_stones_count >= self.state.total_allowed_stones
            if all_claimed or budget_spent:
                self._submit()
            return stone

    def finish(self) -> ScoreResult:
        """Voluntarily end the playing phase and score the session."""
        with self._lock:
            if self.state.state != GameState.PLAYING:
                raise SessionStateError(f"Cannot finish from {self.state.state.value}")
            return self._submit()

    def _submit(self) -> ScoreResult:
        self._cancel_timers()
        self._transition(GameState.SUBMITTING)
        self.state.finished_at = self.clock()
        self.telemetry_record = self.telemetry.finish_session()
        result = self.scorer.score(self.state, self.telemetry_record, self.content)
        self.result = result
        self._transition(result.result_type.final_state)
        return result

    def abandon(self) -> None:
        """Discard the session from showing or playing without scoring."""
        with self._lock:
            if self.state.state not in {GameState.SHOWING, GameState.PLAYING}:
                raise SessionStateError(f"Cannot abandon from {self.state.state.value}")
            self._generation += 1
            self._cancel_timers()
            self.telemetry.discard()
            self.state = SessionState(total_allowed_stones=self.content.total_allowed_stones)
            self._claimed.clear()
            logger.debug("Session abandoned")

    def next_round(self) -> NextRound:
        """Next-round policy for the finished session."""
        if self.result is None:
            raise SessionStateError("Session has not been scored")
        return plan_next_round(self.result.result_type)
