# src/wellness_forum/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .cycle import router as cycle_router
from .posts import router as posts_router
from .reminders import router as reminders_router
from .system import router as system_router
from .tracking import router as tracking_router

__all__ = [
    "posts_router",
    "comments_router",
    "cycle_router",
    "reminders_router",
    "tracking_router",
    "system_router",
]
