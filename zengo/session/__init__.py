"""
Play session bookkeeping.

- state_machine: idle/showing/playing/submitting/finished lifecycle
- telemetry: click and pointer statistics for the playing phase
- recorder: JSONL hand-off of finished sessions
"""

from zengo.session.recorder import SessionRecorder
from zengo.session.state_machine import (
    BoardSession,
    NextRound,
    SessionStateError,
    plan_next_round,
    thread_timer,
)
from zengo.session.telemetry import ClickSample, TelemetryCollector, TelemetryRecord

__all__ = [
    "BoardSession",
    "ClickSample",
    "NextRound",
    "SessionRecorder",
    "SessionStateError",
    "TelemetryCollector",
    "TelemetryRecord",
    "plan_next_round",
    "thread_timer",
]
