"""Session grading."""

from zengo.scoring.engine import ScoringEngine

__all__ = ["ScoringEngine"]
