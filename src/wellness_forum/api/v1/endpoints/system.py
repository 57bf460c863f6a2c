"""System and transparency endpoints for the Wellness Forum API."""

from __future__ import annotations

from fastapi import APIRouter

from wellness_forum.api.v1.dependencies import ChangeFeedDep
from wellness_forum.core.settings import settings
from wellness_forum.forum.pipeline import FilterMode, SortMode
from wellness_forum.schemas.events import COMMENTS_TABLE, POSTS_TABLE

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/config")
async def get_public_config(feed: ChangeFeedDep) -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes secrets and connection strings; suitable for client bootstrapping.

    Args:
        feed: Change feed, reported for realtime diagnostics

    Returns:
        Dictionary containing app metadata, forum view options and realtime
        subscriber counts
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "jwt_algorithm": settings.jwt_algorithm,
            "access_token_expire_minutes": settings.access_token_expire_minutes,
            "debug": settings.debug,
        },
        "forum": {
            "page_size": settings.forum_page_size,
            "page_window": settings.forum_page_window,
            "filters": [mode.value for mode in FilterMode],
            "sorts": [mode.value for mode in SortMode],
            "store_timeout_seconds": settings.store_timeout_seconds,
        },
        "realtime": {
            "subscribers": {
                POSTS_TABLE: feed.subscriber_count(POSTS_TABLE),
                COMMENTS_TABLE: feed.subscriber_count(COMMENTS_TABLE),
            },
        },
    }
