"""Post request handling.

``PostRequestHandler.handle`` is the single entry point for post traffic. It
resolves the caller, applies the access policy, validates the payload and
issues exactly one store call, then renders the outcome as an envelope. Every
failure is converted into an error envelope here so transports only have to
serialize the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from postboard.adapters.auth import AuthVerificationError, TokenVerifier
from postboard.core.logging_safety import safe_log_identifier
from postboard.domain.access_policy import ensure_authorized
from postboard.errors import ApiError, NotFoundError, StoreError, ValidationError
from postboard.repositories.base import PostStore, StoreUnavailableError
from postboard.schemas.auth import AuthPrincipal
from postboard.schemas.envelope import (
    ResponseStatus,
    to_collection_envelope,
    to_identifier_envelope,
    to_resource_envelope,
)
from postboard.schemas.post import POST_ATTRIBUTE_NAMES, PostDocumentInput, PostKind, PostOperation

logger = logging.getLogger(__name__)

_KINDS_BY_TAG: dict[str, PostKind] = {}
for _kind in PostKind:
    _KINDS_BY_TAG[_kind.value] = _kind
    _KINDS_BY_TAG[_kind.resource_type] = _kind
    _KINDS_BY_TAG[_kind.resource_type.replace("-", "_")] = _kind

_OPERATIONS_NEEDING_ID = frozenset({PostOperation.READ, PostOperation.UPDATE, PostOperation.DELETE})


@dataclass(frozen=True, slots=True)
class PostRequest:
    kind: PostKind | str
    operation: PostOperation | str
    credential: str | None = None
    payload: Any = None
    post_id: str | None = None
    correlation_id: str | None = None


@dataclass(frozen=True, slots=True)
class PostResponse:
    status_code: int
    envelope: BaseModel

    @property
    def status(self) -> ResponseStatus:
        return ResponseStatus.from_status_code(self.status_code)

    def body(self) -> dict[str, Any]:
        return self.envelope.model_dump(mode="json", exclude_none=True)


@dataclass(frozen=True, slots=True)
class _PostChanges:
    title: str | None = None
    body: str | None = None


def resolve_kind(tag: PostKind | str) -> PostKind:
    if isinstance(tag, PostKind):
        return tag
    kind = _KINDS_BY_TAG.get(str(tag).strip().lower())
    if kind is None:
        raise NotFoundError("Unknown resource type")
    return kind


def resolve_operation(tag: PostOperation | str) -> PostOperation:
    if isinstance(tag, PostOperation):
        return tag
    try:
        return PostOperation(str(tag).strip().lower())
    except ValueError as exc:
        raise ValidationError("Unsupported operation", details={"operation": str(tag)}) from exc


def parse_post_payload(
    payload: Any,
    *,
    kind: PostKind,
    operation: PostOperation,
    post_id: str | None = None,
) -> _PostChanges:
    """Validate a create/update document and extract the attribute changes."""
    if payload is None:
        raise ValidationError("Request body is required")
    try:
        document = PostDocumentInput.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Request body must be a resource document",
            details={"errors": [".".join(str(part) for part in error["loc"]) for error in exc.errors()]},
        ) from exc

    data = document.data
    if data.type is not None and data.type != kind.resource_type:
        raise ValidationError(
            "Resource type does not match endpoint",
            details={"expected": kind.resource_type, "received": data.type},
        )
    if data.id is not None and (operation is PostOperation.CREATE or data.id != post_id):
        raise ValidationError("Resource id does not match endpoint", details={"received": data.id})

    unknown = sorted(set(data.attributes) - POST_ATTRIBUTE_NAMES)
    if unknown:
        raise ValidationError("Unknown attributes", details={"attributes": unknown})

    invalid = [
        name
        for name in sorted(POST_ATTRIBUTE_NAMES)
        if name in data.attributes and not _is_present_text(data.attributes[name])
    ]
    if operation is PostOperation.CREATE:
        invalid.extend(name for name in sorted(POST_ATTRIBUTE_NAMES) if name not in data.attributes)
    elif not data.attributes:
        raise ValidationError("At least one attribute is required", details={"fields": sorted(POST_ATTRIBUTE_NAMES)})
    if invalid:
        raise ValidationError("Title and body must be non-empty text", details={"fields": sorted(invalid)})

    return _PostChanges(title=data.attributes.get("title"), body=data.attributes.get("body"))


def _is_present_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


class PostRequestHandler:
    def __init__(self, store: PostStore, verifier: TokenVerifier) -> None:
        self._store = store
        self._verifier = verifier
        self._dispatch: dict[PostOperation, Callable[[PostKind, PostRequest], PostResponse]] = {
            PostOperation.CREATE: self._create,
            PostOperation.READ: self._read,
            PostOperation.UPDATE: self._update,
            PostOperation.DELETE: self._delete,
            PostOperation.LIST: self._list,
        }

    def handle(self, request: PostRequest) -> PostResponse:
        safe_correlation_id = safe_log_identifier(request.correlation_id, prefix="cid")
        try:
            kind = resolve_kind(request.kind)
            operation = resolve_operation(request.operation)
            principal, rejection_reason = self._resolve_principal(request.credential)
            try:
                ensure_authorized(kind, operation, principal, rejection_reason=rejection_reason)
            except ApiError as exc:
                logger.warning(
                    "posts.denied correlation_id=%s kind=%s operation=%s reason=%s",
                    safe_correlation_id,
                    kind.value,
                    operation.value,
                    (exc.payload.details or {}).get("reason"),
                )
                raise
            if operation in _OPERATIONS_NEEDING_ID and not request.post_id:
                raise ValidationError("Resource id is required")

            response = self._dispatch[operation](kind, request)
        except StoreUnavailableError as exc:
            logger.error(
                "store.unavailable correlation_id=%s error=%s",
                safe_correlation_id,
                exc,
            )
            return self._error_response(StoreError())
        except ApiError as exc:
            return self._error_response(exc)
        except Exception:
            logger.exception(
                "posts.failed correlation_id=%s kind=%s operation=%s",
                safe_correlation_id,
                request.kind,
                request.operation,
            )
            return self._error_response(ApiError())

        logger.info(
            "posts.handled correlation_id=%s kind=%s operation=%s principal_id=%s status=%s",
            safe_correlation_id,
            kind.value,
            operation.value,
            safe_log_identifier(principal.user_id if principal else None, prefix="pid"),
            response.status.value,
        )
        return response

    def _resolve_principal(self, credential: str | None) -> tuple[AuthPrincipal | None, str | None]:
        # Absence of a credential is not an error; the policy decides.
        if credential is None:
            return None, None
        try:
            return self._verifier.verify_token(credential), None
        except AuthVerificationError as exc:
            logger.warning("auth.rejected reason=%s", exc.reason)
            return None, exc.reason

    def _create(self, kind: PostKind, request: PostRequest) -> PostResponse:
        changes = parse_post_payload(request.payload, kind=kind, operation=PostOperation.CREATE)
        record = self._store.create_post(kind, title=changes.title, body=changes.body)
        return PostResponse(status_code=201, envelope=to_resource_envelope(kind, record))

    def _read(self, kind: PostKind, request: PostRequest) -> PostResponse:
        record = self._store.get_post(kind, request.post_id)
        if record is None:
            raise NotFoundError()
        return PostResponse(status_code=200, envelope=to_resource_envelope(kind, record))

    def _update(self, kind: PostKind, request: PostRequest) -> PostResponse:
        changes = parse_post_payload(
            request.payload,
            kind=kind,
            operation=PostOperation.UPDATE,
            post_id=request.post_id,
        )
        record = self._store.update_post(kind, request.post_id, title=changes.title, body=changes.body)
        if record is None:
            raise NotFoundError()
        return PostResponse(status_code=200, envelope=to_resource_envelope(kind, record))

    def _delete(self, kind: PostKind, request: PostRequest) -> PostResponse:
        if not self._store.delete_post(kind, request.post_id):
            raise NotFoundError()
        return PostResponse(status_code=200, envelope=to_identifier_envelope(kind, request.post_id))

    def _list(self, kind: PostKind, request: PostRequest) -> PostResponse:
        records = self._store.list_posts(kind)
        return PostResponse(status_code=200, envelope=to_collection_envelope(kind, records))

    @staticmethod
    def _error_response(error: ApiError) -> PostResponse:
        return PostResponse(status_code=error.status_code, envelope=error.envelope())


__all__ = ["PostRequest", "PostRequestHandler", "PostResponse", "parse_post_payload", "resolve_kind"]
