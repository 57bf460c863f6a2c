# src/wellness_forum/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    cycle_router,
    posts_router,
    reminders_router,
    system_router,
    tracking_router,
)

__all__ = [
    "posts_router",
    "comments_router",
    "cycle_router",
    "reminders_router",
    "tracking_router",
    "system_router",
]
