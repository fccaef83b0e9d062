from datetime import datetime

import pytest

from catalog_api.core.exceptions import ForbiddenError, UnauthenticatedError
from catalog_api.core.permissions import (
    ADMIN_HIDDEN,
    INSUFFICIENT_ROLE,
    INVALID_SESSION,
    PROTECTED_ADMIN,
    SELF_ONLY,
    authorize,
    can_change_role,
    can_access_user,
    can_remove_user,
    enforce,
    normalize_roles,
)
from catalog_api.models.identity import Identity
from catalog_api.models.user import User, UserRole


def _user(user_id: int, role: UserRole) -> User:
    now = datetime.now()
    return User(
        id=user_id,
        username=f"user{user_id}",
        email=f"user{user_id}@example.com",
        hashed_password="x",
        role=role,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


def _identity(user_id: int, role) -> Identity:
    return Identity(subject_id=user_id, role=role, email=f"user{user_id}@example.com")


def test_normalize_roles_accepts_single_value_and_dedupes():
    assert normalize_roles("admin") == (UserRole.ADMIN,)
    assert normalize_roles(["coordinador", UserRole.ADMIN, "coordinador"]) == (
        UserRole.COORDINADOR,
        UserRole.ADMIN,
    )
    with pytest.raises(ValueError):
        normalize_roles(["owner"])


def test_authorize_set_membership():
    identity = _identity(1, UserRole.COORDINADOR)
    assert authorize(identity, [UserRole.ADMIN, UserRole.COORDINADOR]).allowed
    decision = authorize(identity, UserRole.ADMIN)
    assert not decision.allowed
    assert decision.reason == INSUFFICIENT_ROLE
    assert decision.required_roles == (UserRole.ADMIN,)


def test_authorize_without_role_is_invalid_session():
    decision = authorize(_identity(1, None), UserRole.ADMIN)
    assert decision.reason == INVALID_SESSION
    with pytest.raises(UnauthenticatedError):
        enforce(decision, _identity(1, None))


def test_auxiliar_only_sees_itself():
    identity = _identity(5, UserRole.AUXILIAR)
    assert can_access_user(identity, _user(5, UserRole.AUXILIAR)).allowed
    assert can_access_user(identity, _user(6, UserRole.AUXILIAR)).reason == SELF_ONLY


def test_coordinador_never_sees_admins():
    identity = _identity(2, UserRole.COORDINADOR)
    assert can_access_user(identity, _user(3, UserRole.AUXILIAR)).allowed
    assert can_access_user(identity, _user(1, UserRole.ADMIN)).reason == ADMIN_HIDDEN


def test_admin_self_protection():
    identity = _identity(1, UserRole.ADMIN)
    assert can_remove_user(identity, _user(1, UserRole.ADMIN)).allowed
    assert can_remove_user(identity, _user(4, UserRole.COORDINADOR)).allowed
    assert can_remove_user(identity, _user(2, UserRole.ADMIN)).reason == PROTECTED_ADMIN


def test_enforce_insufficient_role_lists_required_roles():
    identity = _identity(3, UserRole.AUXILIAR)
    with pytest.raises(ForbiddenError) as exc_info:
        enforce(authorize(identity, [UserRole.ADMIN, UserRole.COORDINADOR]), identity)
    content = exc_info.value.to_content()
    assert content["required_roles"] == ["admin", "coordinador"]
    assert "auxiliar" in content["detail"]


def test_role_change_protects_other_admins():
    identity = _identity(1, UserRole.ADMIN)
    other_admin = _user(2, UserRole.ADMIN)
    assert can_change_role(identity, other_admin, UserRole.AUXILIAR).reason == PROTECTED_ADMIN
    assert can_change_role(identity, other_admin, UserRole.ADMIN).allowed
    assert can_change_role(identity, _user(1, UserRole.ADMIN), UserRole.AUXILIAR).allowed
    assert can_change_role(identity, _user(3, UserRole.AUXILIAR), UserRole.ADMIN).allowed
    decision = can_change_role(_identity(4, UserRole.COORDINADOR), _user(3, UserRole.AUXILIAR), UserRole.COORDINADOR)
    assert decision.reason == INSUFFICIENT_ROLE
