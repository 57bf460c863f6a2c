# src/wellness_forum/api/v1/endpoints/posts.py
"""Post-related endpoints for the Wellness Forum API."""

from fastapi import APIRouter, Query, status

from wellness_forum.api.v1.dependencies import (
    CurrentActorDep,
    OptionalActorDep,
    StoreDep,
    raise_for_forum_error,
)
from wellness_forum.forum.errors import ForumError
from wellness_forum.forum.pipeline import FilterMode, SortMode, build_page, page_window
from wellness_forum.forum.threads import build_comment_tree
from wellness_forum.schemas.comment import Comment, CommentCreate, CommentNode
from wellness_forum.schemas.post import Post, PostCreate, PostPageResponse, PostUpdate

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=PostPageResponse)
async def list_posts(
    store: StoreDep,
    actor: OptionalActorDep,
    q: str = Query("", description="Case-insensitive search in title, content and tags"),
    filter_mode: FilterMode = Query(FilterMode.ALL, alias="filter"),
    sort_mode: SortMode = Query(SortMode.NEWEST, alias="sort"),
    page: int = Query(1, ge=1),
) -> PostPageResponse:
    """List one page of posts after search, filter and sort.

    Args:
        store: Forum store bound to the request session
        actor: Caller, required for ``filter=mine`` to match anything
        q: Free-text query
        filter_mode: ``all``, ``mine`` or ``anonymous``
        sort_mode: ``newest``, ``oldest``, ``most_liked`` or ``most_commented``
        page: 1-based page index, clamped to the last page

    Returns:
        The requested page and pager metadata
    """
    try:
        posts = await store.list_posts("created_at", descending=True)
    except ForumError as err:
        raise_for_forum_error(err)

    result = build_page(
        posts,
        query=q,
        filter_mode=filter_mode,
        sort_mode=sort_mode,
        page=page,
        actor=actor,
    )
    return PostPageResponse(
        posts=list(result.posts),
        page=result.page,
        total_pages=result.total_pages,
        total_count=result.total_count,
        page_window=page_window(result.page, result.total_pages),
    )


@router.post("/", response_model=Post, status_code=status.HTTP_201_CREATED)
async def create_post(post_data: PostCreate, actor: CurrentActorDep, store: StoreDep) -> Post:
    """Create a new post authored by the caller."""
    try:
        return await store.create_post(post_data, actor)
    except ForumError as err:
        raise_for_forum_error(err)


@router.get("/{post_id}", response_model=Post)
async def get_post(post_id: str, store: StoreDep) -> Post:
    """Get a specific post by ID.

    Raises:
        HTTPException: If post not found
    """
    try:
        return await store.get_post(post_id)
    except ForumError as err:
        raise_for_forum_error(err)


@router.patch("/{post_id}", response_model=Post)
async def update_post(
    post_id: str,
    changes: PostUpdate,
    actor: CurrentActorDep,
    store: StoreDep,
) -> Post:
    """Edit title, content, tags or anonymity of the caller's own post."""
    try:
        return await store.update_post(post_id, changes, actor)
    except ForumError as err:
        raise_for_forum_error(err)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: str, actor: CurrentActorDep, store: StoreDep) -> None:
    """Delete the caller's own post; its comments are removed with it."""
    try:
        await store.delete_post(post_id, actor)
    except ForumError as err:
        raise_for_forum_error(err)


@router.post("/{post_id}/like", response_model=Post)
async def like_post(post_id: str, actor: CurrentActorDep, store: StoreDep) -> Post:
    """Add one like to a post and return the updated post."""
    try:
        return await store.increment_counter(post_id, "likes_count")
    except ForumError as err:
        raise_for_forum_error(err)


@router.get("/{post_id}/comments", response_model=list[CommentNode])
async def get_post_comments(post_id: str, store: StoreDep) -> list[CommentNode]:
    """Return the post's comments as top-level comments with their replies."""
    try:
        await store.get_post(post_id)
        comments = await store.list_comments(post_id, "created_at", descending=False)
    except ForumError as err:
        raise_for_forum_error(err)
    return build_comment_tree(comments)


@router.post(
    "/{post_id}/comments",
    response_model=Comment,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: str,
    comment_data: CommentCreate,
    actor: CurrentActorDep,
    store: StoreDep,
) -> Comment:
    """Comment on a post, or reply to one of its top-level comments.

    Raises:
        HTTPException: 404 if the post is missing, 422 if the parent is not a
            top-level comment of this post
    """
    try:
        return await store.create_comment(post_id, comment_data, actor)
    except ForumError as err:
        raise_for_forum_error(err)
