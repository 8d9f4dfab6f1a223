"""
External service integrations.

- gemini_advisor: Gemini quiz generation and coaching insight, with offline fallbacks
"""

from .gemini_advisor import (
    AdvisorConfig,
    InsightAdvisor,
    fallback_quiz,
    generate_insight,
    generate_quiz,
)

__all__ = [
    "AdvisorConfig",
    "InsightAdvisor",
    "fallback_quiz",
    "generate_insight",
    "generate_quiz",
]
