"""
Core Models for the Zengo board engine.

Canonical data types shared by generation, session, scoring and
progression code:
- GridPoint / WordMapping / BoardContent: the generated board
- PlacedStone: one placement attempt during play
- ResultType / ScoreResult: the graded outcome of a session
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class GameState(str, Enum):
    """Lifecycle of a single play session."""

    IDLE = "idle"
    SHOWING = "showing"
    PLAYING = "playing"
    SUBMITTING = "submitting"
    FINISHED_EXCELLENT = "finished_excellent"
    FINISHED_SUCCESS = "finished_success"
    FINISHED_FAIL = "finished_fail"

    @property
    def is_terminal(self) -> bool:
        """Whether no further mutation may happen in this state."""
        return self in {
            GameState.FINISHED_EXCELLENT,
            GameState.FINISHED_SUCCESS,
            GameState.FINISHED_FAIL,
        }


class ResultType(str, Enum):
    """Discrete verdict of a finished session."""

    EXCELLENT = "EXCELLENT"
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"

    @property
    def final_state(self) -> GameState:
        """Terminal session state for this verdict."""
        return {
            ResultType.EXCELLENT: GameState.FINISHED_EXCELLENT,
            ResultType.SUCCESS: GameState.FINISHED_SUCCESS,
            ResultType.FAIL: GameState.FINISHED_FAIL,
        }[self]


@dataclass(frozen=True, order=True)
class GridPoint:
    """Integer cell coordinates on the board."""

    x: int
    y: int

    def in_bounds(self, board_size: int) -> bool:
        return 0 <= self.x < board_size and 0 <= self.y < board_size

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class WordMapping:
    """Binds one token to a grid cell and its 1-based sentence order."""

    word: str
    position: GridPoint
    order: int

    def to_dict(self) -> dict[str, Any]:
        return {"word": self.word, "position": self.position.to_dict(), "order": self.order}


@dataclass(frozen=True)
class BoardContent:
    """
    Generated, validated pairing of a sentence's words to grid positions.

    Built by the content generator at session start and never mutated.
    """

    language: str
    difficulty_level: str
    board_size: int
    word_mappings: tuple[WordMapping, ...]
    total_allowed_stones: int
    initial_display_time_ms: int
    target_time_ms: int
    sentence: str = ""

    @property
    def total_words(self) -> int:
        return len(self.word_mappings)

    @property
    def positions(self) -> list[GridPoint]:
        """Word positions in mapping order."""
        return [m.position for m in self.word_mappings]

    @property
    def expected_sequence(self) -> list[int]:
        """Mapping indices sorted by sentence order."""
        return [
            index
            for index, _ in sorted(enumerate(self.word_mappings), key=lambda pair: pair[1].order)
        ]

    def mapping_at(self, point: GridPoint) -> WordMapping | None:
        """Return the mapping occupying a cell, if any."""
        for mapping in self.word_mappings:
            if mapping.position == point:
                return mapping
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "difficulty_level": self.difficulty_level,
            "board_size": self.board_size,
            "sentence": self.sentence,
            "word_mappings": [m.to_dict() for m in self.word_mappings],
            "total_words": self.total_words,
            "total_allowed_stones": self.total_allowed_stones,
            "initial_display_time_ms": self.initial_display_time_ms,
            "target_time_ms": self.target_time_ms,
        }


@dataclass(frozen=True)
class PlacedStone:
    """One placement attempt made during the playing state."""

    position: GridPoint
    correct: bool
    click_timestamp: float
    placement_index: int = 0
    word_order: int | None = None  # sentence order of the claimed word, when correct


@dataclass(frozen=True)
class ScoreResult:
    """Graded outcome of a session. Never mutated after creation."""

    result_type: ResultType
    score: float
    order_correct: bool
    correct_placements: int = 0
    incorrect_placements: int = 0
    time_taken_ms: float = 0.0

    @property
    def completed(self) -> bool:
        return self.result_type != ResultType.FAIL

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["result_type"] = self.result_type.value
        return data


@dataclass
class ResultEntry:
    """A persisted summary of one finished session, newest first in history lists."""

    level: str
    result_type: ResultType
    score: float | None = None


@dataclass
class SessionState:
    """
    Mutable bookkeeping for one play session.

    Owned by a single session; only the session state machine mutates it.
    Times are clock milliseconds from the session's clock.
    """

    state: GameState = GameState.IDLE
    placed_stones: list[PlacedStone] = field(default_factory=list)
    used_stones_count: int = 0
    start_time: float | None = None
    finished_at: float | None = None
    total_allowed_stones: int = 0

    @property
    def correct_placements(self) -> int:
        return sum(1 for stone in self.placed_stones if stone.correct)

    @property
    def incorrect_placements(self) -> int:
        return sum(1 for stone in self.placed_stones if not stone.correct)

    @property
    def remaining_stones(self) -> int:
        return max(0, self.total_allowed_stones - self.used_stones_count)

    @property
    def claimed_orders(self) -> list[int]:
        """Sentence order of each correctly claimed word, in placement order."""
        stones = sorted(self.placed_stones, key=lambda stone: stone.placement_index)
        return [stone.word_order for stone in stones if stone.correct and stone.word_order is not None]

    @property
    def time_taken_ms(self) -> float:
        """Length of the play phase, 0 if it never started or has not ended."""
        if self.start_time is None or self.finished_at is None:
            return 0.0
        return max(0.0, self.finished_at - self.start_time)

    def has_stone_at(self, point: GridPoint) -> bool:
        return any(stone.position == point for stone in self.placed_stones)
