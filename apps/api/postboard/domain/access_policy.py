"""Post access rules keyed by resource kind and operation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from postboard.errors import AuthenticationError, AuthorizationError
from postboard.schemas.auth import AuthPrincipal
from postboard.schemas.post import PostKind, PostOperation

AUTHENTICATION_REQUIRED = "authentication_required"


class Requirement(str, Enum):
    ANYONE = "anyone"
    AUTHENTICATED = "authenticated"


_RULES: dict[tuple[PostKind, PostOperation], Requirement] = {
    (PostKind.PUBLIC, PostOperation.READ): Requirement.ANYONE,
    (PostKind.PUBLIC, PostOperation.LIST): Requirement.ANYONE,
    (PostKind.PUBLIC, PostOperation.CREATE): Requirement.AUTHENTICATED,
    (PostKind.PUBLIC, PostOperation.UPDATE): Requirement.AUTHENTICATED,
    (PostKind.PUBLIC, PostOperation.DELETE): Requirement.AUTHENTICATED,
    (PostKind.PRIVATE, PostOperation.READ): Requirement.AUTHENTICATED,
    (PostKind.PRIVATE, PostOperation.LIST): Requirement.AUTHENTICATED,
    (PostKind.PRIVATE, PostOperation.CREATE): Requirement.AUTHENTICATED,
    (PostKind.PRIVATE, PostOperation.UPDATE): Requirement.AUTHENTICATED,
    (PostKind.PRIVATE, PostOperation.DELETE): Requirement.AUTHENTICATED,
}


@dataclass(frozen=True, slots=True)
class AccessDecision:
    allowed: bool
    reason: str | None = None


ALLOWED = AccessDecision(allowed=True)


def requirement_for(kind: PostKind, operation: PostOperation) -> Requirement:
    # Anything missing from the table is treated as the strictest rule.
    return _RULES.get((kind, operation), Requirement.AUTHENTICATED)


def authorize(kind: PostKind, operation: PostOperation, principal: AuthPrincipal | None) -> AccessDecision:
    """Decide whether ``principal`` (possibly anonymous) may run ``operation``."""
    requirement = requirement_for(kind, operation)
    if requirement is Requirement.ANYONE:
        return ALLOWED
    if principal is None:
        return AccessDecision(allowed=False, reason=AUTHENTICATION_REQUIRED)
    return ALLOWED


def ensure_authorized(
    kind: PostKind,
    operation: PostOperation,
    principal: AuthPrincipal | None,
    *,
    rejection_reason: str | None = None,
) -> None:
    """Raise the error matching a denial.

    ``rejection_reason`` is the verifier's reason for discarding a presented
    credential; it replaces the generic reason on authentication denials.
    """
    decision = authorize(kind, operation, principal)
    if decision.allowed:
        return

    if principal is None:
        raise AuthenticationError(
            "Invalid or missing bearer token",
            reason=rejection_reason or decision.reason or AUTHENTICATION_REQUIRED,
        )
    # Unreachable with the current table: it only ever denies anonymous callers.
    raise AuthorizationError(reason=decision.reason or "not_permitted")
