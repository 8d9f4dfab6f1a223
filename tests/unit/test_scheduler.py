"""
Unit tests for the fixed-band review scheduler.
"""

from datetime import date, datetime

import pytest

from studytrack.study.scheduler import (
    IntervalPolicy,
    ReviewScheduler,
    is_due,
    review_interval,
)


class TestInterval:
    """Every band boundary."""

    @pytest.mark.parametrize(
        "score,days",
        [(100, 14), (81, 14), (80, 7), (51, 7), (50, 2), (1, 2), (0, 2)],
    )
    def test_bands(self, score, days):
        assert review_interval(score) == days

    def test_custom_policy(self):
        scheduler = ReviewScheduler(IntervalPolicy(high_interval_days=30, low_interval_days=1))

        assert scheduler.interval(90) == 30
        assert scheduler.interval(60) == 7
        assert scheduler.interval(10) == 1

    def test_next_review_date(self):
        scheduler = ReviewScheduler()

        assert scheduler.next_review_date(90, date(2024, 2, 20)) == date(2024, 3, 5)
        assert scheduler.next_review_date(30, date(2024, 12, 31)) == date(2025, 1, 2)


class TestIsDue:
    def test_due_on_the_day(self, concept_factory):
        concept = concept_factory(next_review=date(2024, 3, 13))
        assert is_due(concept, date(2024, 3, 13)) is True

    def test_due_when_overdue(self, concept_factory):
        concept = concept_factory(next_review=date(2024, 3, 1))
        assert is_due(concept, date(2024, 3, 13)) is True

    def test_not_due_before_date(self, concept_factory):
        concept = concept_factory(next_review=date(2024, 3, 14))
        assert is_due(concept, date(2024, 3, 13)) is False

    def test_time_of_day_ignored(self, concept_factory):
        concept = concept_factory(next_review=date(2024, 3, 13))
        assert is_due(concept, datetime(2024, 3, 13, 0, 0, 1)) is True
        assert is_due(concept, datetime(2024, 3, 12, 23, 59, 59)) is False

    def test_new_concept_due_immediately(self):
        from studytrack.core.models import Concept

        concept = Concept.new("n", "Title", "History", "Desc", "Easy", today=date(2024, 5, 1))
        assert is_due(concept, date(2024, 5, 1)) is True

    def test_days_overdue(self, concept_factory):
        scheduler = ReviewScheduler()
        concept = concept_factory(next_review=date(2024, 3, 10))

        assert scheduler.days_overdue(concept, date(2024, 3, 13)) == 3
        assert scheduler.days_overdue(concept, date(2024, 3, 1)) == 0
