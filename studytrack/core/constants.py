"""
Built-in data: starter collection, subject list, and advisor fallback text.
"""

from __future__ import annotations

from datetime import date

from .models import Concept, ConceptStatus, Difficulty, ReviewSession

SUBJECTS = [
    "Physics",
    "Biology",
    "Computer Science",
    "History",
    "Mathematics",
    "Literature",
]

# Storage keys
CONCEPTS_KEY = "concepts"
API_KEY_KEY = "apiKeyConfig"
SESSION_FLAG_KEY = "sessionFlag"
USERNAME_KEY = "username"

# Insight text
PENDING_INSIGHT = "Crunching the numbers on your learning journey..."
DEFAULT_INSIGHT = (
    "Consistent daily reviews are the key to building long-term memory structures. "
    "Focus on your weakest concepts first!"
)
EMPTY_RESPONSE_INSIGHT = "Keep reviewing your concepts regularly to maintain retention!"
FALLBACK_INSIGHT = (
    "Consistent daily reviews are the key to building long-term memory structures. "
    "Focus on the concepts with the lowest retention today!"
)


def starter_concepts() -> list[Concept]:
    """Fresh copy of the collection used when no valid saved state exists."""
    return [
        Concept(
            id="1",
            title="Newton's Third Law",
            subject="Physics",
            description="For every action, there is an equal and opposite reaction.",
            difficulty=Difficulty.EASY,
            retention_score=85,
            last_reviewed=date(2023, 10, 25),
            next_review_date=date(2023, 11, 15),
            status=ConceptStatus.MASTERED,
            reviews=(ReviewSession("r1", date(2023, 10, 25), 90, 10),),
        ),
        Concept(
            id="2",
            title="Photosynthesis",
            subject="Biology",
            description=(
                "The process by which green plants and some other organisms use "
                "sunlight to synthesize foods from carbon dioxide and water."
            ),
            difficulty=Difficulty.MEDIUM,
            retention_score=62,
            last_reviewed=date(2023, 10, 20),
            next_review_date=date(2023, 10, 28),
            status=ConceptStatus.FADING,
            reviews=(
                ReviewSession("r2", date(2023, 10, 10), 80, 15),
                ReviewSession("r3", date(2023, 10, 20), 45, 20),
            ),
        ),
        Concept(
            id="3",
            title="Binary Search Algorithm",
            subject="Computer Science",
            description=(
                "An efficient algorithm for finding an item from a sorted list of items."
            ),
            difficulty=Difficulty.HARD,
            retention_score=78,
            last_reviewed=date(2023, 10, 27),
            next_review_date=date(2023, 11, 1),
            status=ConceptStatus.REVIEWING,
            reviews=(ReviewSession("r4", date(2023, 10, 27), 85, 30),),
        ),
    ]
