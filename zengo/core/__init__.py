"""
Core Module - Shared domain models.

All engine modules (content, session, scoring, progression) import their
data types from here rather than redefining them.
"""

from zengo.core.models import (
    BoardContent,
    GameState,
    GridPoint,
    PlacedStone,
    ResultEntry,
    ResultType,
    ScoreResult,
    SessionState,
    WordMapping,
)

__all__ = [
    "BoardContent",
    "GameState",
    "GridPoint",
    "PlacedStone",
    "ResultEntry",
    "ResultType",
    "ScoreResult",
    "SessionState",
    "WordMapping",
]
