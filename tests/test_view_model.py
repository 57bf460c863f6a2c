# tests/test_view_model.py
"""Tests for the forum view-model driving the forum screen."""

import asyncio
import threading

import pytest

from wellness_forum.forum.errors import (
    NotAuthenticatedError,
    PermissionDeniedError,
    StoreError,
    StoreTimeoutError,
)
from wellness_forum.forum.pipeline import FilterMode, SortMode
from wellness_forum.forum.view_model import ForumViewModel
from wellness_forum.schemas.comment import CommentCreate
from wellness_forum.schemas.post import PostCreate


async def _seed_posts(store, actor, total: int) -> list:
    return [
        await store.create_post(PostCreate(title=f"Post {i}", content="Body"), actor)
        for i in range(total)
    ]


@pytest.fixture()
def view_model(store, actor) -> ForumViewModel:
    return ForumViewModel(store, actor, page_size=10, timeout=1.0)


@pytest.mark.asyncio
async def test_load_fills_cache(view_model, store, actor) -> None:
    await _seed_posts(store, actor, 3)

    result = await view_model.load()

    assert result.ok
    assert len(view_model.cache.posts) == 3
    assert view_model.current_page().total_count == 3
    assert view_model.is_loading is False


@pytest.mark.asyncio
async def test_current_page_is_reused_until_inputs_change(view_model, store, actor) -> None:
    await _seed_posts(store, actor, 2)
    await view_model.load()

    first = view_model.current_page()
    assert view_model.current_page() is first

    view_model.set_query("Post 1")
    narrowed = view_model.current_page()
    assert narrowed is not first
    assert [p.title for p in narrowed.posts] == ["Post 1"]


@pytest.mark.asyncio
async def test_page_resets_only_when_listing_changes(view_model, store, actor) -> None:
    await _seed_posts(store, actor, 25)
    await view_model.load()

    view_model.set_page(2)
    view_model.set_sort(SortMode.NEWEST)
    view_model.set_query("")
    view_model.set_filter("all")
    assert view_model.state.page == 2

    view_model.set_sort("most_liked")
    assert view_model.state.page == 1

    view_model.set_page(3)
    view_model.set_filter(FilterMode.MINE)
    assert view_model.state.page == 1

    view_model.set_page(3)
    view_model.set_query("post")
    assert view_model.state.page == 1


@pytest.mark.asyncio
async def test_set_page_clamps(view_model, store, actor) -> None:
    await _seed_posts(store, actor, 12)
    await view_model.load()

    view_model.set_page(50)
    assert view_model.state.page == 2
    view_model.next_page()
    assert view_model.state.page == 2
    view_model.set_page(0)
    assert view_model.state.page == 1
    view_model.previous_page()
    assert view_model.state.page == 1
    assert view_model.pager() == [1, 2]


@pytest.mark.asyncio
async def test_store_timeout_becomes_notice(view_model, store, monkeypatch) -> None:
    async def slow_list_posts(*args, **kwargs):
        await asyncio.sleep(1)
        return []

    monkeypatch.setattr(store, "list_posts", slow_list_posts)
    view_model.timeout = 0.01

    result = await view_model.load()

    assert not result.ok
    assert isinstance(result.error, StoreTimeoutError)
    assert result.notice.message == "Failed to load posts"
    assert view_model.is_loading is False


@pytest.mark.asyncio
async def test_create_post_requires_actor(store, mocker) -> None:
    spy = mocker.spy(store, "create_post")
    view_model = ForumViewModel(store, None)

    result = await view_model.create_post("Title", "Body")

    assert not result.ok
    assert isinstance(result.error, NotAuthenticatedError)
    assert result.notice.message == "Please sign in to create a post"
    spy.assert_not_called()


@pytest.mark.asyncio
async def test_create_post_rejects_blank_fields(view_model, store, mocker) -> None:
    spy = mocker.spy(store, "create_post")

    result = await view_model.create_post("   ", "Body")

    assert result.notice.message == "Please fill in all required fields"
    spy.assert_not_called()


@pytest.mark.asyncio
async def test_create_post_prepends_after_confirmation(view_model, store, actor) -> None:
    await _seed_posts(store, actor, 1)
    await view_model.load()

    result = await view_model.create_post("Fresh", "Body", tags="sleep, , rest ")

    assert result.ok
    assert result.notice.message == "Post created successfully!"
    assert view_model.cache.posts[0].title == "Fresh"
    assert view_model.cache.posts[0].tags == ["sleep", "rest"]


@pytest.mark.asyncio
async def test_create_post_failure_leaves_cache_untouched(view_model, store, mocker) -> None:
    mocker.patch.object(store, "create_post", side_effect=StoreError("boom"))

    result = await view_model.create_post("Title", "Body")

    assert not result.ok
    assert result.notice.level == "error"
    assert result.notice.message == "Failed to create post"
    assert view_model.cache.posts == ()

    view_model.dismiss_notice(result.notice)
    assert view_model.notices == []


@pytest.mark.asyncio
async def test_concurrent_likes_are_not_lost(view_model, store, actor) -> None:
    (post,) = await _seed_posts(store, actor, 1)
    await view_model.load()

    results = await asyncio.gather(view_model.like_post(post.id), view_model.like_post(post.id))

    assert all(r.ok for r in results)
    assert (await store.get_post(post.id)).likes_count == 2
    assert view_model.cache.get_post(post.id).likes_count == 2


@pytest.mark.asyncio
async def test_like_without_actor_is_silent(store, actor) -> None:
    (post,) = await _seed_posts(store, actor, 1)
    view_model = ForumViewModel(store, None)

    result = await view_model.like_post(post.id)

    assert not result.ok
    assert result.notice is None
    assert (await store.get_post(post.id)).likes_count == 0


@pytest.mark.asyncio
async def test_comment_and_reply_update_thread(view_model, store, actor) -> None:
    (post,) = await _seed_posts(store, actor, 1)
    await view_model.load()

    top = await view_model.create_comment(post.id, "First!")
    assert top.notice.message == "Comment added!"
    assert view_model.cache.get_post(post.id).comments_count == 1

    reply = await view_model.create_comment(post.id, "Agreed", parent_id=top.value.id)
    assert reply.notice.message == "Reply added!"
    # Replies do not count towards the post total.
    assert view_model.cache.get_post(post.id).comments_count == 1

    nested = await view_model.create_comment(post.id, "Deeper", parent_id=reply.value.id)
    assert not nested.ok
    assert nested.notice.message == "Replies can only be made to top-level comments"

    (node,) = view_model.thread(post.id)
    assert node.id == top.value.id
    assert [r.id for r in node.replies] == [reply.value.id]


@pytest.mark.asyncio
async def test_blank_comment_is_rejected(view_model, store, actor, mocker) -> None:
    (post,) = await _seed_posts(store, actor, 1)
    spy = mocker.spy(store, "create_comment")

    result = await view_model.create_comment(post.id, "  ")

    assert result.notice.message == "Please enter a comment"
    spy.assert_not_called()


@pytest.mark.asyncio
async def test_select_post_fetches_comments_once(view_model, store, actor, mocker) -> None:
    (post,) = await _seed_posts(store, actor, 1)
    spy = mocker.spy(store, "list_comments")

    await view_model.select_post(post.id)
    await view_model.select_post(post.id)

    assert view_model.state.selected_post_id == post.id
    assert spy.call_count == 1


@pytest.mark.asyncio
async def test_subscription_merges_remote_changes(view_model, store, feed, other_actor) -> None:
    await view_model.load()
    view_model.subscribe()
    assert feed.subscriber_count("posts") == 1

    remote = await store.create_post(PostCreate(title="From elsewhere", content="Hi"), other_actor)
    assert view_model.cache.get_post(remote.id) is not None

    await store.increment_counter(remote.id, "likes_count")
    assert view_model.cache.get_post(remote.id).likes_count == 1

    await store.delete_post(remote.id, other_actor)
    assert view_model.cache.get_post(remote.id) is None

    view_model.close()
    assert feed.subscriber_count("posts") == 0
    assert feed.subscriber_count("comments") == 0


@pytest.mark.asyncio
async def test_cannot_delete_someone_elses_post(store, actor, other_actor) -> None:
    (post,) = await _seed_posts(store, actor, 1)
    view_model = ForumViewModel(store, other_actor)
    await view_model.load()

    result = await view_model.delete_post(post.id)

    assert isinstance(result.error, PermissionDeniedError)
    assert view_model.cache.get_post(post.id) is not None


@pytest.mark.asyncio
async def test_delete_post_clears_selection(view_model, store, actor) -> None:
    (post,) = await _seed_posts(store, actor, 1)
    await view_model.load()
    await view_model.select_post(post.id)

    result = await view_model.delete_post(post.id)

    assert result.notice.message == "Post deleted"
    assert view_model.cache.posts == ()
    assert view_model.state.selected_post_id is None


@pytest.mark.asyncio
async def test_delete_comment_removes_replies(view_model, store, actor) -> None:
    (post,) = await _seed_posts(store, actor, 1)
    await view_model.load()
    top = (await view_model.create_comment(post.id, "Top")).value
    await view_model.create_comment(post.id, "Reply", parent_id=top.id)

    result = await view_model.delete_comment(post.id, top.id)

    assert result.notice.message == "Comment deleted"
    assert view_model.cache.comments_for(post.id) == ()
    assert view_model.cache.get_post(post.id).comments_count == 0


@pytest.mark.asyncio
async def test_edit_post_updates_cache(view_model, store, actor) -> None:
    (post,) = await _seed_posts(store, actor, 1)
    await view_model.load()

    result = await view_model.edit_post(post.id, title="Renamed", tags=["calm"])

    assert result.notice.message == "Post updated"
    cached = view_model.cache.get_post(post.id)
    assert cached.title == "Renamed"
    assert cached.tags == ["calm"]


@pytest.mark.asyncio
async def test_uncached_records_of_others_are_protected(store, actor, other_actor) -> None:
    (post,) = await _seed_posts(store, actor, 1)
    comment = await store.create_comment(post.id, CommentCreate(content="Mine"), actor)
    view_model = ForumViewModel(store, other_actor)

    edited = await view_model.edit_post(post.id, title="Hijacked")
    deleted = await view_model.delete_post(post.id)
    removed = await view_model.delete_comment(post.id, comment.id)

    for result in (edited, deleted, removed):
        assert not result.ok
        assert isinstance(result.error, PermissionDeniedError)
    assert removed.notice.message == "You can only delete your own comments"
    stored = await store.get_post(post.id)
    assert stored.title == post.title
    assert stored.comments_count == 1


@pytest.mark.asyncio
async def test_slow_database_times_out(store, actor, db_session, mocker) -> None:
    await _seed_posts(store, actor, 1)
    release = threading.Event()
    scalars = db_session.scalars

    def slow_scalars(*args, **kwargs):
        release.wait(timeout=5)
        return scalars(*args, **kwargs)

    mocker.patch.object(db_session, "scalars", side_effect=slow_scalars)
    view_model = ForumViewModel(store, actor, timeout=0.05)

    result = await view_model.load()

    assert not result.ok
    assert isinstance(result.error, StoreTimeoutError)
    assert result.notice.message == "Failed to load posts"

    # The abandoned query still finishes before the session is used again.
    release.set()
    assert len(await store.list_posts()) == 1
