"""
Scoring Engine for board sessions.

Turns a finished session into a verdict and a 0-100 score.

Verdict policy (first match wins):
    EXCELLENT - every word claimed, claimed in sentence order, within target time
    SUCCESS   - every word claimed, but out of order or over time
    FAIL      - any word left unclaimed

Score formula:
    60% x placement ratio +
    25% x order component (1.0 in order, else half the sequential accuracy) +
    15% x time efficiency (target / taken, capped at 1)

The engine keeps no state between calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from zengo.core.models import BoardContent, ResultType, ScoreResult, SessionState

if TYPE_CHECKING:
    from zengo.session.telemetry import TelemetryRecord


class ScoringEngine:
    """Maps (session, telemetry, content) to a ScoreResult."""

    MAX_SCORE = 100.0

    # Score weights
    WEIGHT_PLACEMENT = 0.60
    WEIGHT_ORDER = 0.25
    WEIGHT_TIME = 0.15

    # Partial order credit when the order is not exact
    PARTIAL_ORDER_FACTOR = 0.5

    @staticmethod
    def is_order_correct(session: SessionState, content: BoardContent) -> bool:
        """Whether every word was claimed exactly in sentence order."""
        expected = sorted(mapping.order for mapping in content.word_mappings)
        return session.claimed_orders == expected

    def calculate_score(
        self,
        placement_ratio: float,
        order_correct: bool,
        sequential_accuracy: float,
        time_efficiency: float,
    ) -> float:
        """
        Calculate the weighted score.

        Each input is clamped to [0, 1], so the result never exceeds MAX_SCORE
        and never decreases when any single input grows.

        Args:
            placement_ratio: Correct placements / total words
            order_correct: Whether the claim order matched the sentence exactly
            sequential_accuracy: Index-aligned order match from telemetry (0-1)
            time_efficiency: Target time / time taken

        Returns:
            Score between 0 and MAX_SCORE, rounded to 2 decimals
        """
        placement = min(max(placement_ratio, 0.0), 1.0)
        partial = self.PARTIAL_ORDER_FACTOR * min(max(sequential_accuracy, 0.0), 1.0)
        order = 1.0 if order_correct else partial
        efficiency = min(max(time_efficiency, 0.0), 1.0)

        score = self.MAX_SCORE * (
            placement * self.WEIGHT_PLACEMENT
            + order * self.WEIGHT_ORDER
            + efficiency * self.WEIGHT_TIME
        )
        return round(min(score, self.MAX_SCORE), 2)

    def score(
        self,
        session: SessionState,
        telemetry: TelemetryRecord | None,
        content: BoardContent,
    ) -> ScoreResult:
        """
        Grade a submitted session.

        Args:
            session: Session bookkeeping (stones, timing)
            telemetry: Finalized telemetry for the play phase, if collected
            content: The board that was played

        Returns:
            Immutable ScoreResult
        """
        total_words = content.total_words
        correct = session.correct_placements
        time_taken = session.time_taken_ms
        all_claimed = total_words > 0 and correct >= total_words
        order_correct = self.is_order_correct(session, content)
        within_target = time_taken <= content.target_time_ms

        if all_claimed and order_correct and within_target:
            result_type = ResultType.EXCELLENT
        elif all_claimed:
            result_type = ResultType.SUCCESS
        else:
            result_type = ResultType.FAIL

        sequential_accuracy = 0.0
        if telemetry is not None and telemetry.sequential_accuracy is not None:
            sequential_accuracy = telemetry.sequential_accuracy

        score = self.calculate_score(
            placement_ratio=correct / total_words if total_words else 0.0,
            order_correct=order_correct,
            sequential_accuracy=sequential_accuracy,
            time_efficiency=content.target_time_ms / max(time_taken, 1.0),
        )

        logger.info(
            f"Verdict {result_type.value}: {correct}/{total_words} claimed, "
            f"order={'ok' if order_correct else 'off'}, {time_taken:.0f}ms, score={score}"
        )
        return ScoreResult(
            result_type=result_type,
            score=score,
            order_correct=order_correct,
            correct_placements=correct,
            incorrect_placements=session.incorrect_placements,
            time_taken_ms=time_taken,
        )
