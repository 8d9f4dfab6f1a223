"""
Study Tracker - application service.

Wires the concept store, scheduler, scorer, analytics and advisor together
and exposes the operations the CLI needs. The analytics view and the
insight are refreshed from store change notifications, not recomputed by
callers.
"""

from __future__ import annotations

from datetime import date

from loguru import logger

from studytrack.config import Settings, get_settings
from studytrack.core.models import Concept, Difficulty
from studytrack.delivery.state_store import (
    ConceptNotFoundError,
    ConceptRepository,
    ConceptStore,
    JsonFileStorage,
)
from studytrack.integrations.gemini_advisor import (
    AdvisorConfig,
    InsightAdvisor,
    generate_quiz,
)

from .analytics import AnalyticsAggregator, DashboardView
from .quiz import Question
from .scheduler import ReviewScheduler
from .scorer import ReviewScorer


class StudyTracker:
    """
    Facade over the study components for one learner's collection.

    Store changes only mark the insight stale. The next `insight()` call
    refreshes it synchronously, so `dashboard` without `--no-insight`
    blocks on the Gemini request; the SDK call has no timeout of its own.
    """

    def __init__(
        self,
        store: ConceptStore,
        scheduler: ReviewScheduler | None = None,
        scorer: ReviewScorer | None = None,
        aggregator: AnalyticsAggregator | None = None,
        advisor: InsightAdvisor | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.store = store
        self.scheduler = scheduler or ReviewScheduler()
        self.scorer = scorer or ReviewScorer(self.scheduler)
        self.aggregator = aggregator or AnalyticsAggregator(
            self.scheduler,
            attention_limit=self.settings.needs_attention_limit,
            streak=self.settings.study_streak,
        )
        self.advisor = advisor or InsightAdvisor(self.advisor_config())

        self.aggregator.attach(self.store)
        self._insight_stale = True
        self.store.subscribe(self._mark_insight_stale)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> StudyTracker:
        """Default wiring with the JSON state file from settings."""
        settings = settings or get_settings()
        storage = JsonFileStorage(settings.store_path)
        store = ConceptStore(ConceptRepository(storage))
        return cls(store, settings=settings)

    # =========================================================================
    # Configuration
    # =========================================================================

    def advisor_config(self) -> AdvisorConfig:
        """Stored key first, then the environment key."""
        api_key = self.store.repository.get_api_key() or self.settings.gemini_api_key
        return AdvisorConfig(api_key=api_key, model_name=self.settings.ai_model)

    def set_api_key(self, api_key: str | None) -> None:
        self.store.repository.set_api_key(api_key)
        self.advisor.config = self.advisor_config()
        self._insight_stale = True
        logger.info("Gemini API key " + ("saved" if api_key else "cleared"))

    # =========================================================================
    # Concepts
    # =========================================================================

    def concepts(self) -> list[Concept]:
        return self.store.all()

    def get_concept(self, concept_id: str) -> Concept:
        return self.store.require(concept_id)

    def add_concept(
        self,
        title: str,
        subject: str,
        description: str,
        difficulty: Difficulty | str = Difficulty.MEDIUM,
        today: date | None = None,
    ) -> Concept:
        title = title.strip()
        description = description.strip()
        if not title:
            raise ValueError("Concept title is required")
        if not description:
            raise ValueError("Concept description is required")
        return self.store.create(title, subject.strip(), description, difficulty, today)

    def delete_concept(self, concept_id: str) -> bool:
        return self.store.delete(concept_id)

    def reset(self) -> list[Concept]:
        return self.store.reset()

    # =========================================================================
    # Reviews
    # =========================================================================

    def quiz_for(self, concept_id: str) -> list[Question]:
        return generate_quiz(self.get_concept(concept_id), self.advisor_config())

    def complete_review(
        self,
        concept_id: str,
        quiz_score: int,
        time_spent: int | None = None,
        today: date | None = None,
    ) -> Concept:
        """
        Commit a finished quiz.

        Raises:
            ConceptNotFoundError: if the concept was deleted meanwhile
        """
        concept = self.store.get(concept_id)
        if concept is None:
            raise ConceptNotFoundError(concept_id)

        minutes = self.settings.default_time_spent_minutes if time_spent is None else time_spent
        updated = self.scorer.apply_review(concept, quiz_score, minutes, today)
        self.store.replace(updated)

        logger.info(
            f"Review recorded for {concept.title}: {updated.retention_score}% "
            f"({updated.status.value}), next review {updated.next_review_date}"
        )
        return updated

    # =========================================================================
    # Dashboard
    # =========================================================================

    def dashboard(self, today: date | None = None) -> DashboardView:
        """Derived views; the cached one unless a specific day is asked for."""
        if today is None and self.aggregator.latest is not None:
            return self.aggregator.latest
        return self.aggregator.snapshot(self.store.all(), today)

    def insight(self) -> str:
        """Cached insight, refreshed if the collection changed since last time."""
        if self._insight_stale:
            self.refresh_insight()
        return self.advisor.insight

    def refresh_insight(self) -> str:
        self._insight_stale = False
        return self.advisor.refresh_sync(self.store.all())

    def _mark_insight_stale(self, concepts: list[Concept]) -> None:
        self._insight_stale = True
