"""
Fixed-Band Review Scheduler.

Maps the score earned on a quiz to the number of days until the next
review, and decides whether a concept is due.

Bands (strict comparisons):
    score > 80  -> 14 days
    score > 50  ->  7 days
    otherwise   ->  2 days

This is deliberately not SM-2/FSRS: there is no per-concept easiness or
stability, only the latest quiz score.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from studytrack.core.models import Concept


@dataclass(frozen=True)
class IntervalPolicy:
    """Score bands and their review intervals."""

    high_threshold: int = 80
    mid_threshold: int = 50
    high_interval_days: int = 14
    mid_interval_days: int = 7
    low_interval_days: int = 2


class ReviewScheduler:
    """
    Single source of truth for review timing.

    Used both when a review is committed and when counting due concepts,
    so the two can never disagree.
    """

    def __init__(self, policy: IntervalPolicy | None = None):
        """
        Initialize scheduler.

        Args:
            policy: Custom bands (uses defaults if None)
        """
        self.policy = policy or IntervalPolicy()

    def interval(self, score: int) -> int:
        """Days until the next review after earning `score` on a quiz."""
        if score > self.policy.high_threshold:
            return self.policy.high_interval_days
        if score > self.policy.mid_threshold:
            return self.policy.mid_interval_days
        return self.policy.low_interval_days

    def next_review_date(self, score: int, reviewed_on: date) -> date:
        return reviewed_on + timedelta(days=self.interval(score))

    def is_due(self, concept: Concept, as_of: date | datetime | None = None) -> bool:
        """True once the concept's next review date has arrived (date-only)."""
        return concept.next_review_date <= _as_date(as_of)

    def days_overdue(self, concept: Concept, as_of: date | datetime | None = None) -> int:
        """Days past the scheduled review date."""
        delta = _as_date(as_of) - concept.next_review_date
        return max(0, delta.days)


def _as_date(value: date | datetime | None) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


_default_scheduler = ReviewScheduler()


def review_interval(score: int) -> int:
    """Interval in days for `score` under the default bands."""
    return _default_scheduler.interval(score)


def is_due(concept: Concept, as_of: date | datetime | None = None) -> bool:
    """Due check under the default bands."""
    return _default_scheduler.is_due(concept, as_of)
