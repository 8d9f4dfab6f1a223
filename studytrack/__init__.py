"""
studytrack: personal spaced-repetition study tracker.

Stores the concepts a learner is studying, schedules reviews, runs quizzes
that update a retention score, and summarizes progress on a dashboard.
"""

__version__ = "1.0.0"
