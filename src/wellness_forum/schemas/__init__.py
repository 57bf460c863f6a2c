"""
Pydantic schemas for forum entities and API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import Comment, CommentCreate, CommentNode
from .cycle import (
    ActualPeriodReport,
    CyclePrediction,
    CyclePredictionOut,
    CyclePredictionRequest,
    CyclePredictionResponse,
    ReminderDraft,
)
from .events import COMMENTS_TABLE, POSTS_TABLE, ChangeEvent, EventKind
from .post import Post, PostCreate, PostPageResponse, PostUpdate, parse_tags
from .reminder import MedicationReminderCreate, ReminderOut, ReminderUpdate
from .tracking import DailyLogOut, DailyLogUpsert, HealthProfileOut, HealthProfileUpdate

__all__ = [
    "Comment", "CommentCreate", "CommentNode",
    "ActualPeriodReport", "CyclePrediction", "CyclePredictionOut", "CyclePredictionRequest",
    "CyclePredictionResponse", "ReminderDraft",
    "COMMENTS_TABLE", "POSTS_TABLE", "ChangeEvent", "EventKind",
    "Post", "PostCreate", "PostPageResponse", "PostUpdate", "parse_tags",
    "MedicationReminderCreate", "ReminderOut", "ReminderUpdate",
    "DailyLogOut", "DailyLogUpsert", "HealthProfileOut", "HealthProfileUpdate",
]
