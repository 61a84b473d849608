"""In-memory repositories used by the API scaffold and tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import uuid4

from postboard.repositories.base import (
    PostRecord,
    PostStore,
    StoreUnavailableError,
    UserRecord,
    UserStore,
)
from postboard.schemas.post import PostKind


def _empty_post_tables() -> dict[PostKind, dict[str, PostRecord]]:
    return {kind: {} for kind in PostKind}


@dataclass(slots=True)
class InMemoryStore(PostStore, UserStore):
    """Simple, deterministic persistence layer for scaffolding and tests."""

    posts: dict[PostKind, dict[str, PostRecord]] = field(default_factory=_empty_post_tables)
    users: dict[str, UserRecord] = field(default_factory=dict)
    post_write_count: int = 0
    post_call_count: int = 0
    unavailable_message: str | None = None
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def _begin_post_call(self) -> None:
        self.post_call_count += 1
        if self.unavailable_message is not None:
            raise StoreUnavailableError(self.unavailable_message)

    def create_post(self, kind: PostKind, *, title: str, body: str) -> PostRecord:
        with self._lock:
            self._begin_post_call()
            post = PostRecord(
                id=str(uuid4()),
                kind=kind,
                title=title,
                body=body,
                created_at=datetime.now(UTC),
            )
            self.posts[kind][post.id] = post
            self.post_write_count += 1
            return replace(post)

    def get_post(self, kind: PostKind, post_id: str) -> PostRecord | None:
        with self._lock:
            self._begin_post_call()
            post = self.posts[kind].get(post_id)
            return replace(post) if post is not None else None

    def update_post(
        self,
        kind: PostKind,
        post_id: str,
        *,
        title: str | None = None,
        body: str | None = None,
    ) -> PostRecord | None:
        with self._lock:
            self._begin_post_call()
            post = self.posts[kind].get(post_id)
            if post is None:
                return None
            if title is not None:
                post.title = title
            if body is not None:
                post.body = body
            post.updated_at = datetime.now(UTC)
            self.post_write_count += 1
            return replace(post)

    def delete_post(self, kind: PostKind, post_id: str) -> bool:
        with self._lock:
            self._begin_post_call()
            removed = self.posts[kind].pop(post_id, None)
            if removed is None:
                return False
            self.post_write_count += 1
            return True

    def list_posts(self, kind: PostKind) -> list[PostRecord]:
        with self._lock:
            self._begin_post_call()
            return [replace(post) for post in self.posts[kind].values()]

    def create_user(self, *, name: str, email: str, password_hash: str) -> UserRecord:
        with self._lock:
            user = UserRecord(
                id=str(uuid4()),
                name=name,
                email=email.strip().lower(),
                password_hash=password_hash,
                created_at=datetime.now(UTC),
            )
            self.users[user.id] = user
            return user

    def get_user(self, user_id: str) -> UserRecord | None:
        with self._lock:
            return self.users.get(user_id)

    def find_user_by_email(self, email: str) -> UserRecord | None:
        normalized = email.strip().lower()
        with self._lock:
            for user in self.users.values():
                if user.email == normalized:
                    return user
        return None
