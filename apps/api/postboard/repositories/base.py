"""Storage collaborator interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from postboard.schemas.post import PostKind


class StoreUnavailableError(Exception):
    """Raised by a store when its backing storage cannot serve the call."""


@dataclass(slots=True)
class PostRecord:
    id: str
    kind: PostKind
    title: str
    body: str
    created_at: datetime
    updated_at: datetime | None = None


@dataclass(slots=True)
class UserRecord:
    id: str
    name: str
    email: str
    password_hash: str
    created_at: datetime


class PostStore(ABC):
    """Persistence for both post kinds.

    Each method is one atomic operation; missing identifiers are reported as
    ``None``/``False`` rather than raised.
    """

    @abstractmethod
    def create_post(self, kind: PostKind, *, title: str, body: str) -> PostRecord:
        """Persist a new post and return it with its assigned identifier."""

    @abstractmethod
    def get_post(self, kind: PostKind, post_id: str) -> PostRecord | None:
        """Return the post or ``None``."""

    @abstractmethod
    def update_post(
        self,
        kind: PostKind,
        post_id: str,
        *,
        title: str | None = None,
        body: str | None = None,
    ) -> PostRecord | None:
        """Apply the supplied attributes and return the updated post or ``None``."""

    @abstractmethod
    def delete_post(self, kind: PostKind, post_id: str) -> bool:
        """Remove the post; ``False`` when it did not exist."""

    @abstractmethod
    def list_posts(self, kind: PostKind) -> list[PostRecord]:
        """Return every post of a kind in creation order."""


class UserStore(ABC):
    @abstractmethod
    def create_user(self, *, name: str, email: str, password_hash: str) -> UserRecord:
        """Persist a user."""

    @abstractmethod
    def get_user(self, user_id: str) -> UserRecord | None:
        """Return the user or ``None``."""

    @abstractmethod
    def find_user_by_email(self, email: str) -> UserRecord | None:
        """Case-insensitive email lookup."""


__all__ = ["PostRecord", "PostStore", "StoreUnavailableError", "UserRecord", "UserStore"]
