"""
Core Module - Shared domain models and built-in data.

Components:
- models: Concept, ReviewSession, Difficulty, ConceptStatus
- constants: starter collection, subjects, storage keys, fallback text
"""

from studytrack.core.constants import SUBJECTS, starter_concepts
from studytrack.core.models import (
    Concept,
    ConceptStatus,
    Difficulty,
    ReviewSession,
    clamp_score,
    generate_id,
    round_half_up,
)

__all__ = [
    "Concept",
    "ConceptStatus",
    "Difficulty",
    "ReviewSession",
    "SUBJECTS",
    "clamp_score",
    "generate_id",
    "round_half_up",
    "starter_concepts",
]
