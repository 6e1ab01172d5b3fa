"""
Sentence Validation for board content.

Two data-quality checks run before a sentence may become a board:
1. Overflow - a token longer than the difficulty's character budget does
   not fit inside one cell at that board size
2. Duplicate - the same token twice gives two cells an identical marker,
   so the player cannot tell which one belongs where

Defects block board creation. Overflow words can be remediated by
substituting a shorter synonym; duplicates must be fixed by the author.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from zengo.config import DifficultyProfile, get_profile, profile_for_board_size


class DefectKind(str, Enum):
    """Type of content defect."""

    OVERFLOW = "overflow"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class ContentDefect:
    """A single validation problem with one token."""

    kind: DefectKind
    token: str
    detail: str


@dataclass
class ValidationReport:
    """Result of validating one sentence."""

    tokens: list[str]
    errors: list[ContentDefect] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def overflow_tokens(self) -> list[str]:
        return [d.token for d in self.errors if d.kind == DefectKind.OVERFLOW]

    @property
    def duplicate_tokens(self) -> list[str]:
        return [d.token for d in self.errors if d.kind == DefectKind.DUPLICATE]


class ContentValidationError(ValueError):
    """Raised when a sentence with defects is used to build a board."""

    def __init__(self, sentence: str, defects: list[ContentDefect]):
        self.sentence = sentence
        self.defects = defects
        summary = "; ".join(f"{d.kind.value}: {d.token!r}" for d in defects)
        super().__init__(f"Invalid board content {sentence!r} ({summary})")


# Shorter replacements for words that overflow small cells
DEFAULT_REPLACEMENTS: dict[str, str] = {
    "excellent": "great",
    "happiness": "joy",
    "eventually": "finally",
    "beautiful": "lovely",
    "important": "vital",
    "impossible": "hard",
    "difference": "change",
    "intelligence": "wisdom",
    "knowledge": "wisdom",
    "consistently": "always",
    "intelligent": "smart",
    "successful": "winning",
    "tomorrow": "later",
    "everything": "all",
    "something": "a thing",
    "yesterday": "before",
    "opportunity": "chance",
    "experience": "trial",
}


class ContentValidator:
    """
    Validates sentences against a difficulty's board constraints.

    Tokenization is whitespace splitting with empty tokens dropped; duplicate
    detection is exact, case-sensitive string comparison.
    """

    def __init__(self, replacements: dict[str, str] | None = None):
        self.replacements = DEFAULT_REPLACEMENTS if replacements is None else replacements

    @staticmethod
    def tokenize(sentence: str) -> list[str]:
        return [token for token in sentence.split() if token]

    @staticmethod
    def resolve_profile(board_size: int, difficulty_level: str | None = None) -> DifficultyProfile:
        """Pick the profile for a level id, falling back to the board size."""
        if difficulty_level:
            profile = get_profile(difficulty_level)
            if profile.board_size != board_size:
                raise ValueError(
                    f"Level {difficulty_level!r} uses a {profile.board_size}x{profile.board_size} "
                    f"board, not {board_size}x{board_size}"
                )
            return profile
        return profile_for_board_size(board_size)

    def validate(
        self,
        sentence: str,
        board_size: int,
        difficulty_level: str | None = None,
    ) -> ValidationReport:
        """
        Tokenize a sentence and flag overflow and duplicate tokens.

        Args:
            sentence: Source sentence (e.g. a proverb)
            board_size: Board edge length the sentence is meant for
            difficulty_level: Level id; inferred from board_size when omitted

        Returns:
            ValidationReport with the tokens and any defects found
        """
        profile = self.resolve_profile(board_size, difficulty_level)
        tokens = self.tokenize(sentence)
        report = ValidationReport(tokens=tokens)

        for token in tokens:
            if len(token) > profile.max_word_chars:
                report.errors.append(
                    ContentDefect(
                        kind=DefectKind.OVERFLOW,
                        token=token,
                        detail=f"{len(token)} chars exceeds {profile.max_word_chars} for {profile.level}",
                    )
                )

        counts = Counter(tokens)
        for token, count in counts.items():
            if count > 1:
                report.errors.append(
                    ContentDefect(
                        kind=DefectKind.DUPLICATE,
                        token=token,
                        detail=f"appears {count} times",
                    )
                )

        if report.errors:
            logger.warning(
                f"Content defects in {sentence!r}: "
                + ", ".join(f"{d.kind.value}={d.token}" for d in report.errors)
            )
        return report

    def require_valid(
        self,
        sentence: str,
        board_size: int,
        difficulty_level: str | None = None,
    ) -> list[str]:
        """Return the tokens of a valid sentence or raise ContentValidationError."""
        report = self.validate(sentence, board_size, difficulty_level)
        if not report.is_valid:
            raise ContentValidationError(sentence, report.errors)
        return report.tokens

    def remediate(
        self,
        sentence: str,
        board_size: int,
        difficulty_level: str | None = None,
    ) -> tuple[str, ValidationReport]:
        """
        Substitute known shorter synonyms for overflow tokens and re-validate.

        Replacement lookup is case-insensitive; a replacement may itself be
        several words. Duplicates are left for the author to fix.

        Returns:
            Tuple of (possibly rewritten sentence, report for that sentence)
        """
        report = self.validate(sentence, board_size, difficulty_level)
        overflow = set(report.overflow_tokens)
        if not overflow:
            return sentence, report

        rewritten: list[str] = []
        for token in report.tokens:
            replacement = self.replacements.get(token.lower()) if token in overflow else None
            if replacement:
                logger.info(f"Replacing overflow word {token!r} with {replacement!r}")
                rewritten.append(replacement)
            else:
                rewritten.append(token)

        new_sentence = " ".join(rewritten)
        return new_sentence, self.validate(new_sentence, board_size, difficulty_level)
