"""
Board content generation and validation.

- geometry: collinearity and bounds checks
- validator: overflow/duplicate word checks with synonym remediation
- generator: non-collinear layouts and BoardContent assembly
"""

from zengo.config import MAX_ATTEMPTS
from zengo.content.generator import ContentGenerator, GenerationError
from zengo.content.geometry import PositionOutOfBoundsError, is_collinear, validate_positions
from zengo.content.validator import (
    ContentDefect,
    ContentValidationError,
    ContentValidator,
    DefectKind,
    ValidationReport,
)

__all__ = [
    "MAX_ATTEMPTS",
    "ContentDefect",
    "ContentGenerator",
    "ContentValidationError",
    "ContentValidator",
    "DefectKind",
    "GenerationError",
    "PositionOutOfBoundsError",
    "ValidationReport",
    "is_collinear",
    "validate_positions",
]
