"""Shared API dependencies for authentication and store access."""

from typing import Annotated, NoReturn

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from wellness_forum.core.security import InvalidTokenError, decode_access_token
from wellness_forum.db.session import get_db
from wellness_forum.forum.actor import Actor
from wellness_forum.forum.errors import (
    ForumError,
    ForumValidationError,
    NotAuthenticatedError,
    PermissionDeniedError,
    RecordNotFoundError,
    StoreTimeoutError,
)
from wellness_forum.store.base import ChangeFeed, get_change_feed
from wellness_forum.store.sql import SqlForumStore

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_change_feed_dep() -> ChangeFeed:
    """Return the process-wide change feed."""
    return get_change_feed()


ChangeFeedDep = Annotated[ChangeFeed, Depends(get_change_feed_dep)]


def get_store(db: SessionDep, feed: ChangeFeedDep) -> SqlForumStore:
    """Build a store bound to the request's database session."""
    return SqlForumStore(db, feed)


StoreDep = Annotated[SqlForumStore, Depends(get_store)]


def _actor_from_token(token: str) -> Actor:
    try:
        return Actor(user_id=decode_access_token(token))
    except InvalidTokenError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err


def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
) -> Actor:
    """Get the acting user from the bearer token.

    Raises:
        HTTPException: If the token is invalid or expired
    """
    return _actor_from_token(credentials.credentials)


def get_optional_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
) -> Actor | None:
    """Like ``get_current_actor`` but anonymous requests yield ``None``."""
    if credentials is None:
        return None
    return _actor_from_token(credentials.credentials)


# Type aliases for actor dependencies
CurrentActorDep = Annotated[Actor, Depends(get_current_actor)]
OptionalActorDep = Annotated[Actor | None, Depends(get_optional_actor)]


def raise_for_forum_error(err: ForumError) -> NoReturn:
    """Translate a forum error into the matching HTTP error."""
    if isinstance(err, RecordNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(err, ForumValidationError):
        code = status.HTTP_422_UNPROCESSABLE_CONTENT
    elif isinstance(err, PermissionDeniedError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(err, NotAuthenticatedError):
        code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(err, StoreTimeoutError):
        code = status.HTTP_504_GATEWAY_TIMEOUT
    else:
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    raise HTTPException(status_code=code, detail=str(err)) from err
