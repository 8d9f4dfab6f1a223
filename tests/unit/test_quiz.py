"""
Unit tests for quiz questions and grading.
"""

import pytest

from studytrack.study.quiz import Question, QuizSession


def make_question(correct: int = 0) -> Question:
    return Question(
        question="Pick one",
        options=("A", "B", "C", "D"),
        correct_answer_index=correct,
        explanation="Because.",
    )


class TestQuestion:
    def test_correct_answer(self):
        assert make_question(2).correct_answer == "C"

    def test_rejects_index_outside_options(self):
        with pytest.raises(ValueError):
            make_question(4)

    def test_from_dict(self):
        question = Question.from_dict({
            "question": "2 + 2?",
            "options": ["3", "4", "5", "22"],
            "correctAnswerIndex": 1,
            "explanation": "Arithmetic.",
        })

        assert question.options == ("3", "4", "5", "22")
        assert question.correct_answer == "4"
        assert question.to_dict()["correctAnswerIndex"] == 1

    def test_from_dict_without_explanation(self):
        question = Question.from_dict(
            {"question": "q", "options": ["a", "b"], "correctAnswerIndex": 0}
        )
        assert question.explanation == ""


class TestQuizSession:
    def test_walks_through_questions(self):
        session = QuizSession([make_question(0), make_question(1), make_question(2)])

        assert session.current_index == 0
        assert session.answer(0) is True
        assert session.answer(3) is False
        assert session.current_index == 2
        assert not session.is_finished

        session.answer(2)
        assert session.is_finished
        assert session.current is None
        assert session.correct_count == 2

    @pytest.mark.parametrize(
        "answers,expected",
        [([0, 0, 0], 100), ([0, 0, 1], 67), ([0, 1, 1], 33), ([1, 1, 1], 0)],
    )
    def test_score_percent(self, answers, expected):
        session = QuizSession([make_question(0) for _ in range(3)])
        for choice in answers:
            session.answer(choice)

        assert session.score_percent() == expected

    def test_score_counts_unanswered_as_wrong(self):
        session = QuizSession([make_question(0), make_question(0)])
        session.answer(0)

        assert session.score_percent() == 50

    def test_empty_quiz_scores_zero(self):
        session = QuizSession([])

        assert session.is_finished
        assert session.score_percent() == 0

    def test_answer_after_finish_raises(self):
        session = QuizSession([make_question()])
        session.answer(0)

        with pytest.raises(IndexError):
            session.answer(0)

    def test_answer_out_of_range_raises(self):
        session = QuizSession([make_question()])

        with pytest.raises(ValueError):
            session.answer(7)
        assert session.current_index == 0
