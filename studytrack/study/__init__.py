"""
Study module - scheduling, scoring, quizzes and analytics.
"""

from .analytics import AnalyticsAggregator, DashboardView, SummaryStats, TrendPoint
from .quiz import Question, QuizSession
from .scheduler import IntervalPolicy, ReviewScheduler, is_due, review_interval
from .scorer import ReviewScorer, blend_retention, status_for

__all__ = [
    "AnalyticsAggregator",
    "DashboardView",
    "IntervalPolicy",
    "Question",
    "QuizSession",
    "ReviewScheduler",
    "ReviewScorer",
    "SummaryStats",
    "TrendPoint",
    "blend_retention",
    "is_due",
    "review_interval",
    "status_for",
]
