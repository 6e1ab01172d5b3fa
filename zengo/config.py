"""
Configuration settings for the Zengo board engine.

Uses Pydantic Settings for environment variable management with .env file support.
Difficulty profiles are static tables supplied to the engine from outside;
nothing here is computed from play data.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Defaults shared by Settings and the engine classes that read them
MAX_ATTEMPTS = 10_000
HESITATION_THRESHOLD_MS = 1000.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ZENGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Content Generation
    # ========================================
    generation_max_attempts: int = Field(
        default=MAX_ATTEMPTS,
        ge=1,
        description="Shuffle attempts before giving up on a non-collinear layout",
    )
    default_language: str = Field(
        default="en",
        description="Language tag used when content does not carry one",
    )

    # ========================================
    # Telemetry
    # ========================================
    hesitation_threshold_ms: float = Field(
        default=HESITATION_THRESHOLD_MS,
        gt=0,
        description="Pointer idle gap that counts as a hesitation period",
    )
    telemetry_dir: Path = Field(
        default=Path.home() / ".zengo" / "telemetry",
        description="Directory for JSONL session records",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Install loguru sinks according to settings."""
    settings = settings or get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB")


# ========================================
# Difficulty Profiles
# ========================================


class UnknownDifficultyError(KeyError):
    """Raised when a difficulty level id has no profile."""


@dataclass(frozen=True)
class DifficultyProfile:
    """Board geometry, timing and budget for one difficulty level."""

    level: str
    board_size: int
    initial_display_time_ms: int
    target_time_ms: int
    total_allowed_stones: int
    min_words: int
    max_words: int
    max_word_chars: int  # longer tokens overflow a cell at this board size

    @property
    def cell_count(self) -> int:
        return self.board_size * self.board_size


DIFFICULTY_PROFILES: dict[str, DifficultyProfile] = {
    "3x3-easy": DifficultyProfile(
        level="3x3-easy",
        board_size=3,
        initial_display_time_ms=4000,
        target_time_ms=30000,
        total_allowed_stones=5,
        min_words=3,
        max_words=4,
        max_word_chars=8,
    ),
    "5x5-medium": DifficultyProfile(
        level="5x5-medium",
        board_size=5,
        initial_display_time_ms=8000,
        target_time_ms=60000,
        total_allowed_stones=8,
        min_words=5,
        max_words=6,
        max_word_chars=7,
    ),
    "7x7-hard": DifficultyProfile(
        level="7x7-hard",
        board_size=7,
        initial_display_time_ms=14000,
        target_time_ms=90000,
        total_allowed_stones=10,
        min_words=7,
        max_words=8,
        max_word_chars=6,
    ),
}


def get_profile(level: str) -> DifficultyProfile:
    """
    Look up a difficulty profile.

    Args:
        level: Level id such as "5x5-medium"

    Returns:
        The matching DifficultyProfile

    Raises:
        UnknownDifficultyError: If the level is not supported
    """
    try:
        return DIFFICULTY_PROFILES[level]
    except KeyError:
        supported = ", ".join(DIFFICULTY_PROFILES)
        raise UnknownDifficultyError(
            f"Unsupported level {level!r}. Supported levels are {supported}."
        ) from None


def profile_for_board_size(board_size: int) -> DifficultyProfile:
    """Return the profile whose board matches board_size."""
    for profile in DIFFICULTY_PROFILES.values():
        if profile.board_size == board_size:
            return profile
    raise UnknownDifficultyError(f"No difficulty profile for a {board_size}x{board_size} board")
