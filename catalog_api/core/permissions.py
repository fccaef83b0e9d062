"""
Role gate: pure allow/deny decisions for an authenticated identity.

The checks never touch the database. Callers that need the target record
(user-directory rules) load it first and pass it in.
"""
from dataclasses import dataclass, field
from typing import Iterable, Union
import logging

from catalog_api.core.exceptions import ForbiddenError, UnauthenticatedError
from catalog_api.models.identity import Identity
from catalog_api.models.user import User, UserRole

logger = logging.getLogger(__name__)

RoleSpec = Union[UserRole, str, Iterable[Union[UserRole, str]]]

# Reasons carried by a denial
INVALID_SESSION = "invalid_session"
INSUFFICIENT_ROLE = "insufficient_role"
SELF_ONLY = "self_only"
ADMIN_HIDDEN = "admin_hidden"
PROTECTED_ADMIN = "protected_admin"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""
    required_roles: tuple[UserRole, ...] = field(default_factory=tuple)

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str, required_roles: tuple = ()) -> "Decision":
        return cls(allowed=False, reason=reason, required_roles=required_roles)


def normalize_roles(roles: RoleSpec) -> tuple[UserRole, ...]:
    """
    Accept a single role or a collection of roles and return an ordered,
    de-duplicated tuple of ``UserRole`` members.

    Raises ``ValueError`` for names that are not valid roles.
    """
    if isinstance(roles, (str, UserRole)):
        roles = [roles]
    normalized: list[UserRole] = []
    for role in roles:
        member = UserRole(role)
        if member not in normalized:
            normalized.append(member)
    return tuple(normalized)


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------

def authorize(identity: Identity, allowed_roles: RoleSpec) -> Decision:
    """Plain set membership of ``identity.role`` in *allowed_roles*."""
    required = normalize_roles(allowed_roles)
    if identity.role is None:
        return Decision.deny(INVALID_SESSION)
    if identity.role not in required:
        return Decision.deny(INSUFFICIENT_ROLE, required)
    return Decision.allow()


def can_access_user(identity: Identity, target: User) -> Decision:
    """
    Read/modify rule for the user directory, layered on top of ``authorize``:

    - auxiliar: only its own record;
    - coordinador: never an admin record;
    - admin: everything.
    """
    if identity.role is None:
        return Decision.deny(INVALID_SESSION)
    if identity.role == UserRole.AUXILIAR and not identity.is_subject(target.id):
        return Decision.deny(SELF_ONLY)
    if identity.role == UserRole.COORDINADOR and target.role == UserRole.ADMIN:
        return Decision.deny(ADMIN_HIDDEN)
    return Decision.allow()


def can_remove_user(identity: Identity, target: User) -> Decision:
    """
    Deactivate/delete rule: admin only, and an admin may not remove a
    different admin account. Its own account and non-admins are fine.
    """
    decision = authorize(identity, UserRole.ADMIN)
    if not decision.allowed:
        return decision
    if target.role == UserRole.ADMIN and not identity.is_subject(target.id):
        return Decision.deny(PROTECTED_ADMIN)
    return Decision.allow()


def can_change_role(identity: Identity, target: User, new_role: UserRole) -> Decision:
    """
    Role changes are admin only. Demoting a different admin is refused, since
    the demoted account could then be removed.
    """
    decision = authorize(identity, UserRole.ADMIN)
    if not decision.allowed:
        return decision
    if (
        target.role == UserRole.ADMIN
        and new_role != UserRole.ADMIN
        and not identity.is_subject(target.id)
    ):
        return Decision.deny(PROTECTED_ADMIN)
    return Decision.allow()


# ---------------------------------------------------------------------------
# Enforcement
# ---------------------------------------------------------------------------

_DENIAL_MESSAGES = {
    SELF_ONLY: "You can only access your own account",
    ADMIN_HIDDEN: "You do not have permission to access admin accounts",
    PROTECTED_ADMIN: "Admins cannot demote, deactivate or delete other admin accounts",
}


def enforce(decision: Decision, identity: Identity) -> None:
    """Raise the exception matching a denial; do nothing when allowed."""
    if decision.allowed:
        return
    if decision.reason == INVALID_SESSION:
        logger.warning("Identity subject=%s carries no valid role", identity.subject_id)
        raise UnauthenticatedError("Token is invalid or has expired")
    if decision.reason == INSUFFICIENT_ROLE:
        role_names = [role.value for role in decision.required_roles]
        logger.warning(
            "Subject=%s with role %s lacks required roles: %s",
            identity.subject_id,
            identity.role.value if identity.role else None,
            ", ".join(role_names),
        )
        raise ForbiddenError(
            f"Your role is '{identity.role.value}' but one of "
            f"{', '.join(role_names)} is required",
            required_roles=role_names,
        )
    logger.warning(
        "Subject=%s denied: %s", identity.subject_id, decision.reason
    )
    raise ForbiddenError(_DENIAL_MESSAGES.get(decision.reason))
