"""Error taxonomy for forum operations.

Each failure path maps onto one of these classes; the view-model turns them
into notices and the HTTP layer into status codes.
"""

from __future__ import annotations


class ForumError(Exception):
    """Base class for all forum failures."""


class NotAuthenticatedError(ForumError):
    """The action needs an actor and none was supplied."""


class PermissionDeniedError(ForumError):
    """The actor does not own the record it is trying to change."""


class ForumValidationError(ForumError, ValueError):
    """Input was rejected before reaching the store."""


class StoreError(ForumError):
    """A call to the backing store failed."""


class StoreTimeoutError(StoreError):
    """A call to the backing store did not finish in time."""


class RecordNotFoundError(StoreError):
    """The referenced post or comment does not exist."""


class ReplyDepthError(ForumValidationError):
    """A reply must target a top-level comment on the same post."""
