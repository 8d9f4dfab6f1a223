"""
Analytics Aggregator - Dashboard and report projections.

Everything here is derived from the current concept collection and nothing
else; the aggregator keeps no running totals. Views:

- summary: total, average retention, due today, streak
- weekly_trend: mean review score per day over the trailing 7 days
- needs_attention: weakest concepts below the mastery line
- subject_distribution: concept count per subject
- leaderboard: concepts ordered by retention
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import TYPE_CHECKING

from loguru import logger

from studytrack.core.models import Concept, ConceptStatus, round_half_up

from .scheduler import ReviewScheduler

if TYPE_CHECKING:
    from studytrack.delivery.state_store import ConceptStore

ATTENTION_THRESHOLD = 80
TREND_DAYS = 7

# Indexed by date.isoweekday() % 7 (Sunday first)
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


# =============================================================================
# View Types
# =============================================================================


@dataclass(frozen=True)
class SummaryStats:
    """Headline numbers for the dashboard."""

    total: int
    avg_retention: int
    due_today: int
    streak: int


@dataclass(frozen=True)
class TrendPoint:
    """Average review score for one calendar day."""

    label: str
    day: date
    score: int


@dataclass
class DashboardView:
    """All derived views for one version of the collection."""

    summary: SummaryStats
    weekly_trend: list[TrendPoint] = field(default_factory=list)
    needs_attention: list[Concept] = field(default_factory=list)
    subject_distribution: dict[str, int] = field(default_factory=dict)
    leaderboard: list[Concept] = field(default_factory=list)
    status_breakdown: dict[ConceptStatus, int] = field(default_factory=dict)


# =============================================================================
# Aggregator
# =============================================================================


class AnalyticsAggregator:
    """
    Read-only projections over a concept collection.

    Can be attached to a ConceptStore so that `latest` is recomputed after
    every mutation.
    """

    def __init__(
        self,
        scheduler: ReviewScheduler | None = None,
        attention_limit: int = 3,
        streak: int = 0,
    ):
        """
        Initialize the aggregator.

        Args:
            scheduler: Shared scheduler for the due check
            attention_limit: Length of the needs-attention list
            streak: Externally tracked consecutive-days counter
        """
        self.scheduler = scheduler or ReviewScheduler()
        self.attention_limit = attention_limit
        self.streak = streak
        self.latest: DashboardView | None = None

    def attach(self, store: ConceptStore) -> None:
        """Recompute `latest` now and on every store change."""
        store.subscribe(self.on_change)
        self.on_change(store.all())

    def detach(self, store: ConceptStore) -> None:
        store.unsubscribe(self.on_change)

    def on_change(self, concepts: list[Concept]) -> None:
        self.latest = self.snapshot(concepts)
        logger.debug(
            f"Dashboard recomputed: {self.latest.summary.total} concepts, "
            f"{self.latest.summary.due_today} due"
        )

    # =========================================================================
    # Views
    # =========================================================================

    def summary(
        self,
        concepts: list[Concept],
        today: date | None = None,
        streak: int | None = None,
    ) -> SummaryStats:
        today = today or date.today()
        total = len(concepts)
        avg = sum(c.retention_score for c in concepts) / total if total else 0
        return SummaryStats(
            total=total,
            avg_retention=round_half_up(avg),
            due_today=sum(1 for c in concepts if self.scheduler.is_due(c, today)),
            streak=self.streak if streak is None else streak,
        )

    def weekly_trend(
        self,
        concepts: list[Concept],
        today: date | None = None,
    ) -> list[TrendPoint]:
        """
        Trailing 7-day score trend, oldest first, ending with "Today".

        Each concept reviewed on a day contributes the mean of its scores for
        that day; the day's value is the mean over those concepts. Days
        without reviews score 0.
        """
        today = today or date.today()
        points = []

        for offset in range(TREND_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            per_concept = []
            for concept in concepts:
                scores = [r.score for r in concept.reviews if r.date == day]
                if scores:
                    per_concept.append(sum(scores) / len(scores))

            score = round_half_up(sum(per_concept) / len(per_concept)) if per_concept else 0
            label = "Today" if offset == 0 else WEEKDAY_LABELS[day.isoweekday() % 7]
            points.append(TrendPoint(label=label, day=day, score=score))

        return points

    def needs_attention(
        self,
        concepts: list[Concept],
        limit: int | None = None,
    ) -> list[Concept]:
        """Weakest concepts under the threshold, worst first."""
        limit = self.attention_limit if limit is None else limit
        weak = [c for c in concepts if c.retention_score < ATTENTION_THRESHOLD]
        return sorted(weak, key=lambda c: c.retention_score)[:limit]

    def subject_distribution(self, concepts: list[Concept]) -> dict[str, int]:
        counts: dict[str, int] = {}
        for concept in concepts:
            counts[concept.subject] = counts.get(concept.subject, 0) + 1
        return counts

    def leaderboard(self, concepts: list[Concept]) -> list[Concept]:
        return sorted(concepts, key=lambda c: c.retention_score, reverse=True)

    def status_breakdown(self, concepts: list[Concept]) -> dict[ConceptStatus, int]:
        counts = {status: 0 for status in ConceptStatus}
        for concept in concepts:
            counts[concept.status] += 1
        return counts

    def snapshot(
        self,
        concepts: list[Concept],
        today: date | None = None,
        streak: int | None = None,
    ) -> DashboardView:
        today = today or date.today()
        return DashboardView(
            summary=self.summary(concepts, today, streak),
            weekly_trend=self.weekly_trend(concepts, today),
            needs_attention=self.needs_attention(concepts),
            subject_distribution=self.subject_distribution(concepts),
            leaderboard=self.leaderboard(concepts),
            status_breakdown=self.status_breakdown(concepts),
        )
