"""Post resource schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PostKind(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"

    @property
    def resource_type(self) -> str:
        return f"{self.value}-posts"


class PostOperation(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"


POST_ATTRIBUTE_NAMES: frozenset[str] = frozenset({"title", "body"})


class PostAttributes(BaseModel):
    title: str
    body: str
    created_at: datetime
    updated_at: datetime | None = None


class PostResourceInput(BaseModel):
    """The ``data`` member of an incoming create/update document."""

    model_config = ConfigDict(extra="forbid")

    type: str | None = None
    id: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)


class PostDocumentInput(BaseModel):
    data: PostResourceInput
