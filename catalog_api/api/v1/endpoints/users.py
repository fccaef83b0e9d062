"""
User management endpoints:
  GET    /users                    – List users visible to the caller
  POST   /users                    – Create a user with any role (Admin)
  GET    /users/{id}               – Get a user (Admin; Coordinador for non-admins; self)
  PUT    /users/{id}               – Update a user (same visibility as GET)
  DELETE /users/{id}               – Deactivate, or remove with ?hardDelete=true (Admin)
  PATCH  /users/{id}/reactivate    – Reactivate a user (Admin)
"""
from fastapi import APIRouter, Depends, Query, status

from catalog_api.core.config import token_config
from catalog_api.core.dependencies import db_dependency, require_admin, require_any_role
from catalog_api.models.identity import Identity
from catalog_api.schemas.user import UserCreate, UserResponse, UserUpdate
from catalog_api.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List users",
)
def list_users(
    include_inactive: bool = Query(False, alias="includeInactive"),
    conn=Depends(db_dependency),
    identity: Identity = Depends(require_any_role),
):
    """
    - **Admins** see every account.
    - **Coordinadores** see every account except admins.
    - **Auxiliares** see only themselves.
    """
    return UserService(conn, token_config).list_users(identity, include_inactive)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user (Admin only)",
)
def create_user(
    data: UserCreate,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    return UserService(conn, token_config).create_user(data)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a specific user",
)
def get_user(
    user_id: int,
    conn=Depends(db_dependency),
    identity: Identity = Depends(require_any_role),
):
    return UserService(conn, token_config).get_user(identity, user_id)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user",
)
def update_user(
    user_id: int,
    data: UserUpdate,
    conn=Depends(db_dependency),
    identity: Identity = Depends(require_any_role),
):
    """
    Only the fields sent are changed. A new password is re-hashed.
    Role and `is_active` can only be changed by admins.
    """
    return UserService(conn, token_config).update_user(identity, user_id, data)


@router.delete(
    "/{user_id}",
    response_model=UserResponse,
    summary="Deactivate or permanently delete a user (Admin only)",
)
def delete_user(
    user_id: int,
    hard_delete: bool = Query(False, alias="hardDelete"),
    conn=Depends(db_dependency),
    identity: Identity = Depends(require_admin),
):
    """
    Default is a soft delete (`is_active=false`). `?hardDelete=true` removes
    the row. Admins may act on themselves or on non-admins, never on another
    admin.
    """
    service = UserService(conn, token_config)
    if hard_delete:
        return service.delete_user(identity, user_id)
    return service.deactivate_user(identity, user_id)


@router.patch(
    "/{user_id}/reactivate",
    response_model=UserResponse,
    summary="Reactivate a user (Admin only)",
)
def reactivate_user(
    user_id: int,
    conn=Depends(db_dependency),
    identity: Identity = Depends(require_admin),
):
    return UserService(conn, token_config).reactivate_user(identity, user_id)
