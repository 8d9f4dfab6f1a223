"""
Gemini Advisor: quiz questions and coaching insight.

Two calls to Gemini, both optional:
- generate_quiz: 3 multiple-choice questions for a concept
- generate_insight: a short coaching note on retention scores

Without an API key, or when a call fails in any way, each returns a fixed
local fallback so reviews keep working offline. The credential travels in
an AdvisorConfig passed to every call; no client is cached between calls.
"""

from __future__ import annotations

import asyncio
import json
import re
from dataclasses import dataclass

from loguru import logger

from studytrack.core.constants import (
    DEFAULT_INSIGHT,
    EMPTY_RESPONSE_INSIGHT,
    FALLBACK_INSIGHT,
    PENDING_INSIGHT,
)
from studytrack.core.models import Concept
from studytrack.study.quiz import Question

QUESTIONS_PER_QUIZ = 3
OPTIONS_PER_QUESTION = 4

# =============================================================================
# Prompts
# =============================================================================

QUIZ_PROMPT_TEMPLATE = """Generate {count} high-quality multiple choice questions to test the understanding of the following academic concept:
  Title: {title}
  Subject: {subject}
  Description: {description}

Each question must have exactly {options} options."""

INSIGHT_PROMPT_TEMPLATE = (
    "Analyze the following academic concept retention scores and provide a brief "
    "(2-sentence) coaching insight for the student: {summary}"
)

QUIZ_RESPONSE_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "question": {"type": "string"},
            "options": {"type": "array", "items": {"type": "string"}},
            "correctAnswerIndex": {"type": "integer"},
            "explanation": {"type": "string"},
        },
        "required": ["question", "options", "correctAnswerIndex", "explanation"],
    },
}


@dataclass(frozen=True)
class AdvisorConfig:
    """Credential and model for one advisor call."""

    api_key: str | None = None
    model_name: str = "gemini-2.0-flash"

    @property
    def is_available(self) -> bool:
        return bool(self.api_key)


# =============================================================================
# Fallbacks
# =============================================================================


def fallback_quiz(concept: Concept) -> list[Question]:
    """Three questions built from the concept's own fields; answer is option 0."""
    return [
        Question(
            question=f'What is the core concept behind "{concept.title}"?',
            options=(
                concept.description,
                "None of the above",
                "All of the above",
                "Not enough information",
            ),
            correct_answer_index=0,
            explanation=concept.description,
        ),
        Question(
            question=f'"{concept.title}" belongs to which subject?',
            options=(concept.subject, "Art", "Music", "Sports"),
            correct_answer_index=0,
            explanation=f"{concept.title} is a topic in {concept.subject}.",
        ),
        Question(
            question=f'What is the difficulty level of "{concept.title}"?',
            options=(concept.difficulty.value, "Impossible", "Trivial", "Unknown"),
            correct_answer_index=0,
            explanation=f"This concept is rated as {concept.difficulty.value}.",
        ),
    ]


def retention_summary(concepts: list[Concept]) -> str:
    return ", ".join(f"{c.title} ({c.retention_score}%)" for c in concepts)


# =============================================================================
# Gemini Calls
# =============================================================================


def _generate(config: AdvisorConfig, prompt: str, generation_config: dict | None = None) -> str:
    """One blocking Gemini call with the credential from `config`."""
    # Lazy import to avoid dependency if not used
    import google.generativeai as genai

    genai.configure(api_key=config.api_key)
    model = genai.GenerativeModel(model_name=config.model_name)
    response = model.generate_content(prompt, generation_config=generation_config)
    return response.text or ""


def parse_quiz_response(text: str) -> list[Question]:
    """
    Parse a JSON question list.

    Raises:
        ValueError: if no usable questions are present
    """
    json_match = re.search(r"\[[\s\S]*\]", text)
    if not json_match:
        raise ValueError("No JSON array in quiz response")

    data = json.loads(json_match.group(0))
    questions = []
    for item in data:
        question = Question.from_dict(item)
        if len(question.options) != OPTIONS_PER_QUESTION:
            raise ValueError(f"Question has {len(question.options)} options")
        questions.append(question)

    if not questions:
        raise ValueError("Quiz response contained no questions")
    return questions


def generate_quiz(concept: Concept, config: AdvisorConfig) -> list[Question]:
    """
    Quiz content for a review session.

    Args:
        concept: Concept under review
        config: Credential and model; no key means the local fallback

    Returns:
        Generated questions, or fallback_quiz(concept). Never raises.
    """
    if not config.is_available:
        logger.debug("No Gemini API key, using fallback quiz")
        return fallback_quiz(concept)

    prompt = QUIZ_PROMPT_TEMPLATE.format(
        count=QUESTIONS_PER_QUIZ,
        title=concept.title,
        subject=concept.subject,
        description=concept.description,
        options=OPTIONS_PER_QUESTION,
    )
    try:
        text = _generate(
            config,
            prompt,
            generation_config={
                "temperature": 0.3,
                "response_mime_type": "application/json",
                "response_schema": QUIZ_RESPONSE_SCHEMA,
            },
        )
        return parse_quiz_response(text)
    except ImportError:
        logger.error("google-generativeai not installed. Run: pip install google-generativeai")
    except Exception as e:
        logger.error(f"Quiz generation failed for {concept.id}: {e}")
    return fallback_quiz(concept)


def generate_insight(concepts: list[Concept], config: AdvisorConfig) -> str:
    """
    Short coaching note for the whole collection.

    Returns:
        Generated text, or a fixed fallback string. Never raises.
    """
    if not config.is_available:
        return DEFAULT_INSIGHT

    prompt = INSIGHT_PROMPT_TEMPLATE.format(summary=retention_summary(concepts))
    try:
        text = _generate(config, prompt)
    except ImportError:
        logger.error("google-generativeai not installed. Run: pip install google-generativeai")
        return FALLBACK_INSIGHT
    except Exception as e:
        logger.error(f"Insight generation failed: {e}")
        return FALLBACK_INSIGHT

    return text.strip() or EMPTY_RESPONSE_INSIGHT


# =============================================================================
# Cached Insight
# =============================================================================


class InsightAdvisor:
    """
    Holds the insight text shown on the dashboard.

    `refresh` runs the blocking call in a worker thread. When several
    refreshes overlap, whichever finishes last sets the text. Concept state
    is never touched here.
    """

    def __init__(self, config: AdvisorConfig | None = None):
        self.config = config or AdvisorConfig()
        self.insight = PENDING_INSIGHT
        self._requests = 0

    async def refresh(self, concepts: list[Concept]) -> str:
        self._requests += 1
        request_no = self._requests
        snapshot = list(concepts)

        text = await asyncio.to_thread(generate_insight, snapshot, self.config)

        self.insight = text
        logger.debug(f"Insight updated by request {request_no}/{self._requests}")
        return text

    def refresh_sync(self, concepts: list[Concept]) -> str:
        """Blocking refresh for callers outside an event loop."""
        return asyncio.run(self.refresh(concepts))
