# src/wellness_forum/api/v1/endpoints/comments.py
"""Comment endpoints that are not scoped under a post."""

from fastapi import APIRouter, status

from wellness_forum.api.v1.dependencies import CurrentActorDep, StoreDep, raise_for_forum_error
from wellness_forum.forum.errors import ForumError
from wellness_forum.schemas.comment import Comment

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/{comment_id}", response_model=Comment)
async def get_comment(comment_id: str, store: StoreDep) -> Comment:
    """Get a single comment by ID."""
    try:
        return await store.get_comment(comment_id)
    except ForumError as err:
        raise_for_forum_error(err)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(comment_id: str, actor: CurrentActorDep, store: StoreDep) -> None:
    """Delete the caller's own comment together with its replies.

    Raises:
        HTTPException: If the comment is missing or owned by someone else
    """
    try:
        await store.delete_comment(comment_id, actor)
    except ForumError as err:
        raise_for_forum_error(err)
