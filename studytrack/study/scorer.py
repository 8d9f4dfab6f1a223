"""
Review Scorer.

Turns a finished quiz into the concept's next state:

    retention' = round((retention + quiz_score) / 2), capped at 100
    status'    = Mastered if retention' > 80 else Reviewing
    next review = today + interval(quiz_score)

Only the previous retention score and the new quiz score are blended; older
reviews do not weigh in. The interval is chosen from the raw quiz score,
the status from the blended score.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date

from loguru import logger

from studytrack.core.models import (
    MAX_SCORE,
    Concept,
    ConceptStatus,
    ReviewSession,
    clamp_score,
    generate_id,
    round_half_up,
)

from .scheduler import ReviewScheduler

MASTERY_THRESHOLD = 80


def blend_retention(retention_score: int, quiz_score: int) -> int:
    """Single-step average of the prior retention and the new quiz score."""
    return min(MAX_SCORE, round_half_up((retention_score + quiz_score) / 2))


def status_for(retention_score: int) -> ConceptStatus:
    """Status assigned after a review."""
    if retention_score > MASTERY_THRESHOLD:
        return ConceptStatus.MASTERED
    return ConceptStatus.REVIEWING


class ReviewScorer:
    """Applies quiz outcomes to concepts without mutating them."""

    def __init__(self, scheduler: ReviewScheduler | None = None):
        self.scheduler = scheduler or ReviewScheduler()

    def apply_review(
        self,
        concept: Concept,
        quiz_score: int,
        time_spent: int = 0,
        today: date | None = None,
    ) -> Concept:
        """
        Compute the concept state after one completed quiz.

        Args:
            concept: Concept as it was before the quiz
            quiz_score: Percent of questions answered correctly (clamped to 0-100)
            time_spent: Minutes spent on the quiz (negative values become 0)
            today: Review date (defaults to date.today())

        Returns:
            New Concept with one more ReviewSession
        """
        today = today or date.today()
        score = clamp_score(quiz_score)
        if not 0 <= quiz_score <= MAX_SCORE:
            logger.warning(f"Quiz score {quiz_score} out of range, clamped to {score}")

        new_retention = blend_retention(concept.retention_score, score)
        session = ReviewSession(
            id=generate_id({r.id for r in concept.reviews}),
            date=today,
            score=score,
            time_spent=max(0, int(time_spent)),
        )

        updated = replace(
            concept,
            retention_score=new_retention,
            last_reviewed=today,
            next_review_date=self.scheduler.next_review_date(score, today),
            status=status_for(new_retention),
            reviews=(*concept.reviews, session),
        )

        logger.debug(
            f"Reviewed {concept.id}: quiz={score}, "
            f"retention {concept.retention_score}->{new_retention}, "
            f"next_review={updated.next_review_date}"
        )
        return updated
