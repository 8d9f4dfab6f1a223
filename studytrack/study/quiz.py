"""
Quiz session grading.

Walks through a list of multiple-choice questions and turns the answers
into the percent score fed to the review scorer.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from studytrack.core.models import round_half_up


@dataclass(frozen=True)
class Question:
    """One multiple-choice question; option 0 is not necessarily correct."""

    question: str
    options: tuple[str, ...]
    correct_answer_index: int
    explanation: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.correct_answer_index < len(self.options):
            raise ValueError(
                f"Correct answer index {self.correct_answer_index} "
                f"outside {len(self.options)} options"
            )

    @property
    def correct_answer(self) -> str:
        return self.options[self.correct_answer_index]

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        return cls(
            question=str(data["question"]),
            options=tuple(str(o) for o in data["options"]),
            correct_answer_index=int(data["correctAnswerIndex"]),
            explanation=str(data.get("explanation", "")),
        )

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswerIndex": self.correct_answer_index,
            "explanation": self.explanation,
        }


@dataclass
class QuizSession:
    """Answers for one pass through a question list."""

    questions: list[Question]
    answers: list[int] = field(default_factory=list)

    @property
    def current_index(self) -> int:
        return len(self.answers)

    @property
    def current(self) -> Question | None:
        if self.is_finished:
            return None
        return self.questions[self.current_index]

    @property
    def is_finished(self) -> bool:
        return self.current_index >= len(self.questions)

    @property
    def correct_count(self) -> int:
        return sum(
            1
            for question, choice in zip(self.questions, self.answers)
            if choice == question.correct_answer_index
        )

    def answer(self, option_index: int) -> bool:
        """Record a choice for the current question and advance."""
        question = self.current
        if question is None:
            raise IndexError("Quiz already finished")
        if not 0 <= option_index < len(question.options):
            raise ValueError(f"No option {option_index} for this question")
        self.answers.append(option_index)
        return option_index == question.correct_answer_index

    def score_percent(self) -> int:
        """Percent of all questions answered correctly (0 with no questions)."""
        if not self.questions:
            return 0
        return round_half_up(self.correct_count / len(self.questions) * 100)
