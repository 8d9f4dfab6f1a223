"""
Core domain models.

Concepts and their review history, as persisted in the key-value store.

Design:
- Difficulty / ConceptStatus: string enums matching the persisted values
- ReviewSession: one completed quiz, immutable
- Concept: a unit of study material, immutable; updates go through
  dataclasses.replace so concepts never share mutable state

The persisted JSON keeps the camelCase field names of the stored format
(retentionScore, lastReviewed, nextReviewDate, timeSpent).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

# Persisted marker for a concept that was never reviewed
NEVER_REVIEWED = "-"

MIN_SCORE = 0
MAX_SCORE = 100


class Difficulty(str, Enum):
    """Self-assessed difficulty, fixed at creation."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @property
    def label(self) -> str:
        """Name shown in the add-concept form."""
        return {
            Difficulty.EASY: "Beginner",
            Difficulty.MEDIUM: "Intermediate",
            Difficulty.HARD: "Advanced",
        }[self]


class ConceptStatus(str, Enum):
    """Derived learning state of a concept."""

    NEW = "New"
    REVIEWING = "Reviewing"
    FADING = "Fading"
    MASTERED = "Mastered"

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            ConceptStatus.NEW: "blue",
            ConceptStatus.REVIEWING: "cyan",
            ConceptStatus.FADING: "yellow",
            ConceptStatus.MASTERED: "green",
        }[self]


def round_half_up(value: float) -> int:
    """Round .5 away from zero (Python's round() would go to even)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp_score(score: float) -> int:
    """Force a score into the 0-100 range."""
    return max(MIN_SCORE, min(MAX_SCORE, round_half_up(score)))


def generate_id(taken: set[str] | frozenset[str] = frozenset()) -> str:
    """Time-based id in milliseconds, bumped until it is not in `taken`."""
    candidate = int(time.time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class ReviewSession:
    """A single completed quiz against a concept."""

    id: str
    date: date
    score: int  # 0-100
    time_spent: int = 0  # minutes

    def __post_init__(self) -> None:
        if not MIN_SCORE <= self.score <= MAX_SCORE:
            raise ValueError(f"Review score out of range: {self.score}")
        if self.time_spent < 0:
            raise ValueError(f"Negative time spent: {self.time_spent}")

    @classmethod
    def from_dict(cls, data: dict) -> ReviewSession:
        return cls(
            id=str(data["id"]),
            date=_parse_date(data["date"]),
            score=int(data["score"]),
            time_spent=int(data.get("timeSpent", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "score": self.score,
            "timeSpent": self.time_spent,
        }


@dataclass(frozen=True)
class Concept:
    """
    A unit of study material with its retention state.

    `last_reviewed` is None until the first review. `reviews` is a tuple in
    chronological order and only ever grows.
    """

    id: str
    title: str
    subject: str
    description: str
    difficulty: Difficulty
    retention_score: int = 0
    last_reviewed: date | None = None
    next_review_date: date = field(default_factory=date.today)
    status: ConceptStatus = ConceptStatus.NEW
    reviews: tuple[ReviewSession, ...] = ()

    def __post_init__(self) -> None:
        if not MIN_SCORE <= self.retention_score <= MAX_SCORE:
            raise ValueError(f"Retention score out of range: {self.retention_score}")

    @classmethod
    def new(
        cls,
        concept_id: str,
        title: str,
        subject: str,
        description: str,
        difficulty: Difficulty | str,
        today: date | None = None,
    ) -> Concept:
        """Create an unreviewed concept that is due on its creation day."""
        return cls(
            id=concept_id,
            title=title,
            subject=subject,
            description=description,
            difficulty=Difficulty(difficulty),
            retention_score=0,
            last_reviewed=None,
            next_review_date=today or date.today(),
            status=ConceptStatus.NEW,
            reviews=(),
        )

    @property
    def review_count(self) -> int:
        return len(self.reviews)

    @property
    def latest_review(self) -> ReviewSession | None:
        return self.reviews[-1] if self.reviews else None

    @classmethod
    def from_dict(cls, data: dict) -> Concept:
        """Build a concept from its persisted form; raises on bad records."""
        last_reviewed = data.get("lastReviewed")
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            subject=str(data["subject"]),
            description=str(data.get("description", "")),
            difficulty=Difficulty(data["difficulty"]),
            retention_score=int(data["retentionScore"]),
            last_reviewed=(
                None
                if last_reviewed in (None, "", NEVER_REVIEWED)
                else _parse_date(last_reviewed)
            ),
            next_review_date=_parse_date(data["nextReviewDate"]),
            status=ConceptStatus(data["status"]),
            reviews=tuple(ReviewSession.from_dict(r) for r in data.get("reviews", [])),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "subject": self.subject,
            "description": self.description,
            "difficulty": self.difficulty.value,
            "lastReviewed": (
                self.last_reviewed.isoformat() if self.last_reviewed else NEVER_REVIEWED
            ),
            "nextReviewDate": self.next_review_date.isoformat(),
            "retentionScore": self.retention_score,
            "reviews": [r.to_dict() for r in self.reviews],
            "status": self.status.value,
        }
