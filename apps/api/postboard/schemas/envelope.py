"""Resource envelope schemas and formatting helpers.

Success responses follow a JSON:API-like layout with a ``data`` member holding
one resource object, a list of them, or a bare resource identifier. Error
responses carry an ``errors`` list whose entries always include a stable,
machine-readable ``code``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel

from postboard.schemas.post import PostAttributes, PostKind


class ResponseStatus(str, Enum):
    OK = "ok"
    CREATED = "created"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"

    @classmethod
    def from_status_code(cls, status_code: int) -> "ResponseStatus":
        if status_code >= 500:
            return cls.SERVER_ERROR
        return _STATUS_BY_CODE.get(status_code, cls.BAD_REQUEST)


_STATUS_BY_CODE: dict[int, ResponseStatus] = {
    200: ResponseStatus.OK,
    201: ResponseStatus.CREATED,
    400: ResponseStatus.BAD_REQUEST,
    401: ResponseStatus.UNAUTHORIZED,
    403: ResponseStatus.FORBIDDEN,
    404: ResponseStatus.NOT_FOUND,
}


class ResourceIdentifier(BaseModel):
    type: str
    id: str


class ResourceObject(ResourceIdentifier):
    attributes: PostAttributes


class ResourceEnvelope(BaseModel):
    data: ResourceObject | ResourceIdentifier


class CollectionMeta(BaseModel):
    count: int


class CollectionEnvelope(BaseModel):
    data: list[ResourceObject]
    meta: CollectionMeta


class ErrorObject(BaseModel):
    status: str
    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorEnvelope(BaseModel):
    errors: list[ErrorObject]


def to_resource_object(kind: PostKind, record: Any) -> ResourceObject:
    return ResourceObject(
        type=kind.resource_type,
        id=record.id,
        attributes=PostAttributes(
            title=record.title,
            body=record.body,
            created_at=record.created_at,
            updated_at=record.updated_at,
        ),
    )


def to_resource_envelope(kind: PostKind, record: Any) -> ResourceEnvelope:
    return ResourceEnvelope(data=to_resource_object(kind, record))


def to_collection_envelope(kind: PostKind, records: Iterable[Any]) -> CollectionEnvelope:
    data = [to_resource_object(kind, record) for record in records]
    return CollectionEnvelope(data=data, meta=CollectionMeta(count=len(data)))


def to_identifier_envelope(kind: PostKind, post_id: str) -> ResourceEnvelope:
    return ResourceEnvelope(data=ResourceIdentifier(type=kind.resource_type, id=post_id))


def to_error_envelope(*errors: ErrorObject) -> ErrorEnvelope:
    return ErrorEnvelope(errors=list(errors))
