"""Explicit identity of whoever is acting on the forum."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Actor:
    """The signed-in user on whose behalf an operation runs."""

    user_id: str
    display_name: str | None = None

    def owns(self, record: object) -> bool:
        """Return True when ``record`` was authored by this actor."""
        return getattr(record, "user_id", None) == self.user_id
