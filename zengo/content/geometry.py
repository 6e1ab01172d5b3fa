"""
Board geometry checks.

Word positions must never have three points on one straight line, otherwise
players can recall a row or diagonal instead of individual cells.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import combinations

from zengo.core.models import GridPoint, WordMapping


class PositionOutOfBoundsError(ValueError):
    """Raised when a word mapping lies outside the board."""


def is_collinear(points: Sequence[GridPoint]) -> bool:
    """
    Check whether any three of the given points lie on one line.

    Uses the cross-product test (bx-ax)(cy-ay) == (by-ay)(cx-ax) over every
    combination of three points, returning on the first match.

    Args:
        points: Grid points to check

    Returns:
        True if some triple is collinear, False otherwise (including fewer
        than three points)
    """
    if len(points) < 3:
        return False
    for a, b, c in combinations(points, 3):
        if (b.x - a.x) * (c.y - a.y) == (b.y - a.y) * (c.x - a.x):
            return True
    return False


def validate_positions(mappings: Iterable[WordMapping], board_size: int) -> None:
    """Raise PositionOutOfBoundsError if any mapping lies off the board."""
    for mapping in mappings:
        if not mapping.position.in_bounds(board_size):
            raise PositionOutOfBoundsError(
                f"Position ({mapping.position.x}, {mapping.position.y}) for {mapping.word!r} "
                f"is outside the {board_size}x{board_size} board"
            )
