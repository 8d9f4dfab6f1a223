"""
Unit tests for the review scorer.

Checks the blended retention update, the status rule, and that the
interval comes from the raw quiz score.
"""

from datetime import date, timedelta

import pytest

from studytrack.core.models import ConceptStatus
from studytrack.study.scorer import ReviewScorer, blend_retention, status_for


@pytest.fixture
def scorer():
    return ReviewScorer()


class TestBlendRetention:
    @pytest.mark.parametrize(
        "retention,quiz,expected",
        [
            (0, 0, 0),
            (0, 100, 50),
            (100, 100, 100),
            (100, 0, 50),
            (62, 90, 76),
            (61, 90, 76),  # 75.5 rounds up
            (0, 1, 1),  # 0.5 rounds up
            (79, 82, 81),  # 80.5 rounds up
        ],
    )
    def test_blend(self, retention, quiz, expected):
        assert blend_retention(retention, quiz) == expected


class TestStatusFor:
    @pytest.mark.parametrize(
        "retention,status",
        [(81, ConceptStatus.MASTERED), (100, ConceptStatus.MASTERED),
         (80, ConceptStatus.REVIEWING), (0, ConceptStatus.REVIEWING)],
    )
    def test_threshold(self, retention, status):
        assert status_for(retention) is status


class TestApplyReview:
    def test_end_to_end_scenario(self, scorer, sample_concept, today):
        """62 retention + 90 quiz -> 76, Reviewing, next review in 14 days."""
        updated = scorer.apply_review(sample_concept, 90, time_spent=12, today=today)

        assert updated.retention_score == 76
        assert updated.status == ConceptStatus.REVIEWING
        assert updated.next_review_date == today + timedelta(days=14)
        assert updated.last_reviewed == today

    def test_appends_one_review(self, scorer, sample_concept, today):
        updated = scorer.apply_review(sample_concept, 40, time_spent=7, today=today)

        assert len(updated.reviews) == len(sample_concept.reviews) + 1
        assert updated.reviews[:-1] == sample_concept.reviews
        last = updated.reviews[-1]
        assert (last.date, last.score, last.time_spent) == (today, 40, 7)
        assert last.id not in {r.id for r in sample_concept.reviews}

    def test_input_not_mutated(self, scorer, sample_concept, today):
        before = sample_concept.to_dict()
        scorer.apply_review(sample_concept, 100, today=today)

        assert sample_concept.to_dict() == before

    def test_reaches_mastered(self, scorer, concept_factory, today):
        concept = concept_factory(retention=78)
        updated = scorer.apply_review(concept, 90, today=today)

        assert updated.retention_score == 84
        assert updated.status == ConceptStatus.MASTERED

    def test_mastered_can_drop_to_reviewing(self, scorer, concept_factory, today):
        concept = concept_factory(retention=100, status=ConceptStatus.MASTERED)
        updated = scorer.apply_review(concept, 0, today=today)

        assert updated.retention_score == 50
        assert updated.status == ConceptStatus.REVIEWING
        assert updated.next_review_date == today + timedelta(days=2)

    @pytest.mark.parametrize("quiz,days", [(81, 14), (80, 7), (51, 7), (50, 2)])
    def test_interval_uses_quiz_score(self, scorer, concept_factory, today, quiz, days):
        concept = concept_factory(retention=0)
        updated = scorer.apply_review(concept, quiz, today=today)

        assert updated.next_review_date == today + timedelta(days=days)

    @pytest.mark.parametrize("quiz,stored", [(-20, 0), (150, 100)])
    def test_out_of_range_quiz_clamped(self, scorer, concept_factory, today, quiz, stored):
        concept = concept_factory(retention=100)
        updated = scorer.apply_review(concept, quiz, today=today)

        assert updated.reviews[-1].score == stored
        assert 0 <= updated.retention_score <= 100

    def test_negative_time_spent_becomes_zero(self, scorer, concept_factory, today):
        updated = scorer.apply_review(concept_factory(), 50, time_spent=-4, today=today)
        assert updated.reviews[-1].time_spent == 0

    def test_never_new_or_fading_after_review(self, scorer, concept_factory, today):
        for retention in (0, 40, 80, 100):
            for quiz in (0, 33, 67, 100):
                concept = concept_factory(retention=retention, status=ConceptStatus.FADING)
                updated = scorer.apply_review(concept, quiz, today=today)
                assert updated.status in (ConceptStatus.MASTERED, ConceptStatus.REVIEWING)
                assert 0 <= updated.retention_score <= 100

    def test_history_beyond_prior_score_ignored(self, scorer, concept_factory, today):
        from studytrack.core.models import ReviewSession

        plain = concept_factory(retention=60)
        with_history = concept_factory(
            retention=60,
            reviews=(ReviewSession("a", date(2024, 1, 1), 0, 5),
                     ReviewSession("b", date(2024, 1, 2), 0, 5)),
        )

        assert (scorer.apply_review(plain, 80, today=today).retention_score
                == scorer.apply_review(with_history, 80, today=today).retention_score)
