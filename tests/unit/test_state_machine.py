"""
Unit tests for the Board Session state machine.

Timers come from a fake factory and fire only when a test fires them, so
every transition is driven explicitly.
"""

import threading

import pytest

from zengo.core.models import GameState, ResultType
from zengo.session.state_machine import (
    BoardSession,
    NextRound,
    SessionStateError,
    plan_next_round,
    thread_timer,
)


@pytest.fixture
def session(sample_board, clock, timers):
    return BoardSession(sample_board, clock=clock, timer_factory=timers)


def start_playing(session, timers):
    session.start()
    timers.timers[-1].fire()
    assert session.game_state == GameState.PLAYING


def place_all_in_order(session, board, clock, step_ms=1000):
    for mapping in board.word_mappings:
        clock.advance(step_ms)
        session.place_stone(mapping.position.x, mapping.position.y)


class TestTransitions:
    """Test lifecycle transitions."""

    def test_starts_idle(self, session):
        assert session.game_state == GameState.IDLE
        assert session.state.used_stones_count == 0

    def test_start_shows_board_and_schedules_display_timer(self, session, timers, sample_board):
        session.start()
        assert session.game_state == GameState.SHOWING
        assert len(timers.pending) == 1
        assert timers.pending[0].delay_ms == sample_board.initial_display_time_ms

    def test_display_timer_begins_play(self, session, timers, clock):
        session.start()
        clock.advance(8000)
        timers.timers[0].fire()

        assert session.game_state == GameState.PLAYING
        assert session.state.start_time == clock.now
        assert session.telemetry.active is True

    def test_hesitation_threshold_from_settings(self, sample_board, clock, settings_env):
        settings_env(hesitation_threshold_ms=100)
        session = BoardSession(sample_board, clock=clock)
        assert session.telemetry.hesitation_threshold_ms == 100.0

        session.start()
        session.begin_play()
        clock.advance(150)
        session.track_pointer_move(5, 5)
        assert session.telemetry.record.hesitation_periods == [150]

    def test_manual_begin_play_without_timers(self, sample_board, clock):
        session = BoardSession(sample_board, clock=clock)
        session.start()
        session.begin_play()
        assert session.game_state == GameState.PLAYING

    def test_cannot_start_twice(self, session):
        session.start()
        with pytest.raises(SessionStateError):
            session.start()

    def test_cannot_begin_play_from_idle(self, session):
        with pytest.raises(SessionStateError, match="idle"):
            session.begin_play()

    def test_cannot_finish_outside_playing(self, session):
        with pytest.raises(SessionStateError):
            session.finish()
        session.start()
        with pytest.raises(SessionStateError):
            session.finish()


class TestPlacement:
    """Test stone placement during play."""

    def test_input_ignored_while_showing(self, session):
        session.start()
        assert session.place_stone(0, 0) is None
        assert session.state.placed_stones == []

    def test_correct_and_incorrect_stones(self, session, timers):
        start_playing(session, timers)

        hit = session.place_stone(1, 2)
        miss = session.place_stone(2, 2)

        assert hit.correct is True
        assert hit.word_order == 2
        assert miss.correct is False
        assert miss.word_order is None
        assert session.state.used_stones_count == 2
        assert session.state.remaining_stones == 6

    def test_same_cell_twice_is_ignored(self, session, timers):
        start_playing(session, timers)
        session.place_stone(2, 2)
        assert session.place_stone(2, 2) is None
        assert session.state.used_stones_count == 1
        # Telemetry still sees both clicks
        assert len(session.telemetry.record.click_positions) == 2

    def test_off_grid_click_is_incorrect_stone(self, session, timers):
        start_playing(session, timers)
        stone = session.place_stone(7, -1)
        assert stone.correct is False
        assert session.state.used_stones_count == 1
        assert session.game_state == GameState.PLAYING

    def test_pointer_moves_forwarded_only_while_playing(self, session, timers, clock):
        session.start()
        clock.advance(5000)
        session.track_pointer_move(1, 1)
        timers.timers[0].fire()
        clock.advance(1500)
        session.track_pointer_move(1, 1)
        assert session.telemetry.record.hesitation_periods == [1500]


class TestSubmission:
    """Test submission and verdicts."""

    def test_claiming_every_word_auto_submits(self, session, timers, sample_board, clock):
        start_playing(session, timers)
        place_all_in_order(session, sample_board, clock)

        assert session.game_state == GameState.FINISHED_EXCELLENT
        assert session.result.result_type == ResultType.EXCELLENT
        assert session.result.time_taken_ms == 5000
        assert session.telemetry_record.sequential_accuracy == 1.0
        assert session.state.finished_at == clock.now

    def test_slow_complete_game_is_success(self, session, timers, sample_board, clock):
        start_playing(session, timers)
        place_all_in_order(session, sample_board, clock, step_ms=3000)
        assert session.game_state == GameState.FINISHED_SUCCESS

    def test_budget_exhaustion_submits(self, session, timers):
        start_playing(session, timers)
        misses = [(1, 1), (2, 2), (3, 3), (4, 0), (4, 1), (4, 2), (4, 3), (2, 0)]
        for x, y in misses:
            session.place_stone(x, y)

        assert session.state.used_stones_count == 8
        assert session.game_state == GameState.FINISHED_FAIL
        assert session.result.correct_placements == 0

    def test_voluntary_finish(self, session, timers, clock):
        start_playing(session, timers)
        session.place_stone(0, 0)
        clock.advance(2000)
        result = session.finish()

        assert result.result_type == ResultType.FAIL
        assert session.game_state == GameState.FINISHED_FAIL
        assert result.time_taken_ms == 2000

    def test_no_mutation_after_terminal_state(self, session, timers, sample_board, clock):
        start_playing(session, timers)
        place_all_in_order(session, sample_board, clock)
        stones_before = list(session.state.placed_stones)

        assert session.place_stone(2, 2) is None
        assert session.state.placed_stones == stones_before
        with pytest.raises(SessionStateError):
            session.finish()

    def test_play_time_limit(self, sample_board, clock, timers):
        session = BoardSession(sample_board, clock=clock, timer_factory=timers, play_time_limit_ms=30000)
        start_playing(session, timers)
        session.place_stone(0, 0)

        play_timer = timers.pending[-1]
        assert play_timer.delay_ms == 30000
        clock.advance(30000)
        play_timer.fire()

        assert session.game_state == GameState.FINISHED_FAIL

    def test_submission_cancels_play_timer(self, sample_board, clock, timers):
        session = BoardSession(sample_board, clock=clock, timer_factory=timers, play_time_limit_ms=30000)
        start_playing(session, timers)
        place_all_in_order(session, sample_board, clock)
        assert timers.pending == []


class TestAbandon:
    """Test cancellation from showing or playing."""

    def test_abandon_while_showing_cancels_timer(self, session, timers):
        session.start()
        session.abandon()

        assert session.game_state == GameState.IDLE
        assert timers.pending == []
        assert session.result is None

    def test_stale_display_timer_is_ignored(self, session, timers):
        session.start()
        stale = timers.timers[0]
        session.abandon()
        stale.callback()
        assert session.game_state == GameState.IDLE

    def test_abandon_while_playing_discards_state(self, session, timers):
        start_playing(session, timers)
        session.place_stone(0, 0)
        session.abandon()

        assert session.state.placed_stones == []
        assert session.state.used_stones_count == 0
        assert session.telemetry.active is False
        assert session.telemetry_record is None

    def test_cannot_abandon_finished_session(self, session, timers, sample_board, clock):
        start_playing(session, timers)
        place_all_in_order(session, sample_board, clock)
        with pytest.raises(SessionStateError):
            session.abandon()

    def test_restart_after_abandon(self, session, timers):
        session.start()
        session.abandon()
        session.start()
        assert session.game_state == GameState.SHOWING

    def test_display_timer_from_before_restart_is_ignored(self, session, timers):
        session.start()
        stale = timers.timers[0]
        session.abandon()
        session.start()

        # The old countdown may already be past its cancel check and waiting on the lock
        stale.callback()
        assert session.game_state == GameState.SHOWING

        timers.timers[-1].fire()
        assert session.game_state == GameState.PLAYING

    def test_play_timer_from_before_restart_is_ignored(self, sample_board, clock, timers):
        session = BoardSession(sample_board, clock=clock, timer_factory=timers, play_time_limit_ms=30000)
        start_playing(session, timers)
        stale = timers.timers[-1]
        session.abandon()
        start_playing(session, timers)

        stale.callback()
        assert session.game_state == GameState.PLAYING
        assert session.result is None


class TestNextRound:
    """Test what the following game reuses."""

    @pytest.mark.parametrize(
        "result_type,expected",
        [
            (ResultType.EXCELLENT, NextRound(keep_content=False, keep_positions=False)),
            (ResultType.SUCCESS, NextRound(keep_content=True, keep_positions=False)),
            (ResultType.FAIL, NextRound(keep_content=True, keep_positions=True)),
        ],
    )
    def test_policy(self, result_type, expected):
        assert plan_next_round(result_type) == expected

    def test_session_next_round(self, session, timers, sample_board, clock):
        start_playing(session, timers)
        place_all_in_order(session, sample_board, clock)
        assert session.next_round() == NextRound(keep_content=False, keep_positions=False)

    def test_next_round_requires_result(self, session):
        with pytest.raises(SessionStateError):
            session.next_round()


class TestThreadTimer:
    """Test the wall-clock timer factory."""

    def test_fires(self):
        fired = threading.Event()
        thread_timer(10, fired.set)
        assert fired.wait(timeout=2.0)

    def test_cancel(self):
        fired = threading.Event()
        timer = thread_timer(200, fired.set)
        timer.cancel()
        assert not fired.wait(timeout=0.4)
