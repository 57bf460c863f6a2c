# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from wellness_forum.api.v1.dependencies import get_change_feed_dep
from wellness_forum.core.security import create_access_token
from wellness_forum.db.session import Base
from wellness_forum.db.session import get_db as app_get_session
from wellness_forum.forum.actor import Actor
from wellness_forum.main import app as fastapi_app
from wellness_forum.schemas.comment import Comment
from wellness_forum.schemas.post import Post
from wellness_forum.store.base import ChangeFeed
from wellness_forum.store.sql import SqlForumStore

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

_RECORD_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def feed() -> ChangeFeed:
    """A change feed private to one test."""
    return ChangeFeed()


@pytest.fixture(autouse=True)
def override_dependencies(app: FastAPI, db_session: Session, feed: ChangeFeed) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_change_feed_dep] = lambda: feed
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_change_feed_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def store(db_session: Session, feed: ChangeFeed) -> SqlForumStore:
    """SQL store bound to the per-test session and feed."""
    return SqlForumStore(db_session, feed)


@pytest.fixture()
def actor() -> Actor:
    return Actor(user_id="user-alice", display_name="Alice")


@pytest.fixture()
def other_actor() -> Actor:
    return Actor(user_id="user-bob", display_name="Bob")


@pytest.fixture()
def auth_token(actor: Actor) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(actor.user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_token(other_actor: Actor) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    token = create_access_token(other_actor.user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_post() -> Callable[..., Post]:
    """Build ``Post`` entities without touching the database.

    ``minutes`` offsets ``created_at`` from a fixed base time.
    """

    def _make(minutes: int = 0, **overrides: Any) -> Post:
        number = next(_RECORD_COUNTER)
        created = BASE_TIME + timedelta(minutes=minutes)
        data: dict[str, Any] = {
            "id": f"post-{number:04d}",
            "user_id": "user-alice",
            "title": f"Post {number}",
            "content": "Body text",
            "is_anonymous": False,
            "likes_count": 0,
            "comments_count": 0,
            "tags": [],
            "created_at": created,
            "updated_at": created,
        }
        data.update(overrides)
        return Post.model_validate(data)

    return _make


@pytest.fixture()
def make_comment() -> Callable[..., Comment]:
    """Build ``Comment`` entities without touching the database."""

    def _make(post_id: str, minutes: int = 0, **overrides: Any) -> Comment:
        number = next(_RECORD_COUNTER)
        data: dict[str, Any] = {
            "id": f"comment-{number:04d}",
            "post_id": post_id,
            "parent_id": None,
            "user_id": "user-alice",
            "content": f"Comment {number}",
            "created_at": BASE_TIME + timedelta(minutes=minutes),
        }
        data.update(overrides)
        return Comment.model_validate(data)

    return _make
