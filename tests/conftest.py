"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from zengo.config import get_settings  # noqa: E402
from zengo.core.models import BoardContent, GridPoint, WordMapping  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


class FakeTimer:
    """Scheduled callback that only fires when the test says so."""

    def __init__(self, delay_ms: float, callback):
        self.delay_ms = delay_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.callback()


class FakeTimerFactory:
    """Collects every timer a session schedules."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, delay_ms: float, callback) -> FakeTimer:
        timer = FakeTimer(delay_ms, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled]


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def clock():
    """Provide a hand-driven millisecond clock starting at 1000ms."""
    return FakeClock(start=1000.0)


@pytest.fixture
def timers():
    """Provide a timer factory whose timers fire on demand."""
    return FakeTimerFactory()


@pytest.fixture
def rng():
    """Provide a seeded random source."""
    return random.Random(42)


@pytest.fixture
def sample_board():
    """
    Provide a five-word board with a 10s target.

    Positions (0,0) (1,2) (3,1) (4,4) (0,3): no three on one line.
    """
    words = ["Slow", "and", "steady", "wins", "races"]
    points = [GridPoint(0, 0), GridPoint(1, 2), GridPoint(3, 1), GridPoint(4, 4), GridPoint(0, 3)]
    return BoardContent(
        language="en",
        difficulty_level="5x5-medium",
        board_size=5,
        word_mappings=tuple(
            WordMapping(word=w, position=p, order=i + 1) for i, (w, p) in enumerate(zip(words, points))
        ),
        total_allowed_stones=8,
        initial_display_time_ms=8000,
        target_time_ms=10000,
        sentence=" ".join(words),
    )


@pytest.fixture
def settings_env(monkeypatch):
    """
    Set ZENGO_* environment variables for one test.

    The cached settings are dropped before and after, so values set through
    the returned callable are picked up by get_settings() and do not leak.
    """
    get_settings.cache_clear()

    def set_env(**values):
        for name, value in values.items():
            monkeypatch.setenv(f"ZENGO_{name.upper()}", str(value))
        get_settings.cache_clear()

    yield set_env
    get_settings.cache_clear()
