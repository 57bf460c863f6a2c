"""Forum view-model: filtering, threading and cache reconciliation."""

from .actor import Actor
from .cache import ForumCache
from .pipeline import FilterMode, PostPage, SortMode, build_page, page_window
from .threads import build_comment_tree, flatten_tree
from .view_model import ActionResult, ForumViewModel, Notice

__all__ = [
    "Actor",
    "ForumCache",
    "FilterMode", "PostPage", "SortMode", "build_page", "page_window",
    "build_comment_tree", "flatten_tree",
    "ActionResult", "ForumViewModel", "Notice",
]
