"""
Authentication endpoints:
  POST /auth/signup   – Register an account and receive an access token
  POST /auth/signin   – Sign in with username or email and password
  GET  /auth/me       – Return the live profile of the authenticated caller
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
import logging

from catalog_api.core.config import token_config
from catalog_api.core.dependencies import (
    db_dependency,
    get_current_identity,
    get_signup_actor,
)
from catalog_api.models.identity import Identity
from catalog_api.schemas.token import AuthResponse
from catalog_api.schemas.user import UserCreate, UserLogin, UserResponse
from catalog_api.services.auth_service import AuthService
from catalog_api.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
def signup(
    data: UserCreate,
    conn=Depends(db_dependency),
    actor: Optional[Identity] = Depends(get_signup_actor),
):
    """
    Create an account and return a 24 h access token.

    - New accounts are `auxiliar` unless `role` says otherwise.
    - `role` may be a string or a one-element list.
    - Requesting `admin` or `coordinador` requires an admin bearer token.
    """
    logger.info("Signup requested for username=%s", data.username)
    service = AuthService(conn, token_config)
    return service.register(data, actor=actor)


@router.post(
    "/signin",
    response_model=AuthResponse,
    summary="Sign in with username or email",
)
def signin(data: UserLogin, conn=Depends(db_dependency)):
    """Exchange valid credentials for an access token."""
    service = AuthService(conn, token_config)
    return service.login(data.login_key, data.password)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current authenticated user's profile",
)
def get_me(
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    """Looks the account up again, so a removed or disabled user gets 404."""
    logger.info("Returning profile for subject=%s", identity.subject_id)
    return UserService(conn, token_config).get_profile(identity)
