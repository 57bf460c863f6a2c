# src/wellness_forum/models/__init__.py
"""SQLAlchemy models for the Wellness Forum application."""

from .comment import ForumComment
from .post import ForumPost
from .reminder import CyclePredictionRecord, Reminder
from .tracking import DailyLog, HealthProfile

__all__ = [
    "CyclePredictionRecord",
    "DailyLog",
    "ForumComment",
    "ForumPost",
    "HealthProfile",
    "Reminder",
]
