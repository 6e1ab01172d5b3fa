"""
Board Content Generator.

Places the words of a validated sentence on a square board:
1. Enumerate every cell of the board
2. Shuffle the cells and take the first N as a candidate layout
3. Accept the candidate only if no three positions are collinear
4. Give up with GenerationError once the attempt ceiling is reached

The i-th word is bound to the i-th accepted point and keeps its 1-based
sentence index as `order`, so reading order can be scored independently
of where the words landed.
"""

from __future__ import annotations

import random
from dataclasses import replace

from loguru import logger

from zengo.config import DifficultyProfile, get_profile, get_settings
from zengo.content.geometry import is_collinear, validate_positions
from zengo.content.validator import ContentValidator
from zengo.core.models import BoardContent, GridPoint, WordMapping


class GenerationError(Exception):
    """Raised when no valid layout can be produced."""

    def __init__(self, message: str, count: int, board_size: int, attempts: int = 0):
        super().__init__(message)
        self.count = count
        self.board_size = board_size
        self.attempts = attempts


class ContentGenerator:
    """
    Produces non-collinear word layouts and assembles BoardContent.

    Randomness comes from an injectable random.Random so layouts are
    reproducible under a fixed seed.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        max_attempts: int | None = None,
        validator: ContentValidator | None = None,
    ):
        """
        Initialize the generator.

        Args:
            rng: Random source (a fresh unseeded Random if None)
            max_attempts: Attempt ceiling (settings.generation_max_attempts if None,
                MAX_ATTEMPTS unless overridden by the environment)
            validator: Sentence validator (default ContentValidator if None)
        """
        self.rng = rng or random.Random()
        if max_attempts is None:
            max_attempts = get_settings().generation_max_attempts
        self.max_attempts = max_attempts
        self.validator = validator or ContentValidator()

    def _search(self, count: int, board_size: int) -> tuple[list[GridPoint] | None, int]:
        """Bounded shuffle search. Returns (layout or None, attempts used)."""
        cells = [GridPoint(x, y) for x in range(board_size) for y in range(board_size)]
        for attempt in range(1, self.max_attempts + 1):
            self.rng.shuffle(cells)
            candidate = cells[:count]
            if not is_collinear(candidate):
                return candidate, attempt
        return None, self.max_attempts

    def generate(self, count: int, board_size: int) -> list[GridPoint]:
        """
        Generate `count` distinct, in-bounds, non-collinear positions.

        Args:
            count: Number of positions (one per word)
            board_size: Board edge length

        Returns:
            List of GridPoint in binding order

        Raises:
            GenerationError: If the request cannot fit on the board or the
                attempt ceiling is exhausted
        """
        if board_size <= 0:
            raise GenerationError(f"Board size must be positive, got {board_size}", count, board_size)
        if count < 0:
            raise GenerationError(f"Cannot place a negative number of words ({count})", count, board_size)
        if count > board_size * board_size:
            raise GenerationError(
                f"Cannot place {count} words on a {board_size}x{board_size} board",
                count,
                board_size,
            )

        layout, attempts = self._search(count, board_size)
        if layout is None:
            logger.warning(
                f"No non-collinear layout for {count} words on {board_size}x{board_size} "
                f"after {attempts} attempts"
            )
            raise GenerationError(
                f"Failed to find a non-collinear layout for {count} words on a "
                f"{board_size}x{board_size} board within {attempts} attempts",
                count,
                board_size,
                attempts,
            )

        logger.debug(f"Layout for {count} words on {board_size}x{board_size} found in {attempts} attempt(s)")
        return list(layout)

    def build(
        self,
        sentence: str,
        level: str | DifficultyProfile,
        language: str | None = None,
    ) -> BoardContent:
        """
        Validate a sentence and lay it out as BoardContent.

        Args:
            sentence: Source sentence
            level: Difficulty level id or profile
            language: Language tag (settings default if None)

        Returns:
            Immutable BoardContent

        Raises:
            ContentValidationError: If the sentence has overflow or duplicate words
            GenerationError: If the words do not fit or no layout is found
        """
        profile = level if isinstance(level, DifficultyProfile) else get_profile(level)
        tokens = self.validator.require_valid(sentence, profile.board_size, profile.level)

        if len(tokens) > profile.total_allowed_stones:
            raise GenerationError(
                f"{len(tokens)} words exceed the stone budget of {profile.total_allowed_stones}",
                len(tokens),
                profile.board_size,
            )
        if not profile.min_words <= len(tokens) <= profile.max_words:
            logger.warning(
                f"{sentence!r} has {len(tokens)} words; {profile.level} expects "
                f"{profile.min_words}-{profile.max_words}"
            )

        positions = self.generate(len(tokens), profile.board_size)
        mappings = tuple(
            WordMapping(word=word, position=point, order=index + 1)
            for index, (word, point) in enumerate(zip(tokens, positions))
        )
        validate_positions(mappings, profile.board_size)

        return BoardContent(
            language=language or get_settings().default_language,
            difficulty_level=profile.level,
            board_size=profile.board_size,
            word_mappings=mappings,
            total_allowed_stones=profile.total_allowed_stones,
            initial_display_time_ms=profile.initial_display_time_ms,
            target_time_ms=profile.target_time_ms,
            sentence=" ".join(tokens),
        )

    def reshuffle(self, content: BoardContent) -> BoardContent:
        """Return the same sentence laid out on fresh positions."""
        positions = self.generate(content.total_words, content.board_size)
        mappings = tuple(
            replace(mapping, position=point)
            for mapping, point in zip(content.word_mappings, positions)
        )
        validate_positions(mappings, content.board_size)
        return replace(content, word_mappings=mappings)
