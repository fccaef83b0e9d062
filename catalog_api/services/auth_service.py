"""
Authentication service: registration and sign-in, both ending in a freshly
signed access token.
"""
import sqlite3
from typing import Optional
import logging

from catalog_api.core.config import TokenConfig
from catalog_api.core.exceptions import (
    AccountNotFoundError,
    ForbiddenError,
    InvalidCredentialsError,
    ValidationFailureError,
)
from catalog_api.core.security import create_access_token
from catalog_api.models.identity import Identity
from catalog_api.models.user import User, UserRole
from catalog_api.schemas.token import AuthResponse
from catalog_api.schemas.user import UserCreate, UserResponse
from catalog_api.services.user_service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, conn: sqlite3.Connection, config: TokenConfig) -> None:
        logger.trace("Initializing AuthService")
        self._config = config
        self._users = UserService(conn, config)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, data: UserCreate, actor: Optional[Identity] = None) -> AuthResponse:
        """
        Create an account and sign the new user in.

        Anyone may register as ``auxiliar``. Asking for any other role needs an
        admin token on the same request.
        """
        requested = data.requested_role
        if requested not in (None, UserRole.AUXILIAR):
            if actor is None or actor.role != UserRole.ADMIN:
                logger.warning(
                    "Registration for %s requested role %s without admin token",
                    data.username,
                    requested.value,
                )
                raise ForbiddenError(
                    "Only admins can register accounts with elevated roles",
                    required_roles=[UserRole.ADMIN.value],
                )

        user = self._users.create_user(data)
        logger.info("Registration completed for user id=%s", user.id)
        return self._issue(user)

    # ------------------------------------------------------------------
    # Sign-in
    # ------------------------------------------------------------------

    def login(self, login_key: str, password: str) -> AuthResponse:
        """
        Validate credentials and issue an access token.
        Accepts either the username or the email as *login_key*.
        """
        if not login_key:
            raise ValidationFailureError("Username or email is required")

        logger.info("Authenticating '%s'", login_key)
        user = self._users.find_for_login(login_key)

        if user is None or not user.is_active:
            self._users.dummy_verify()
            logger.warning("Login for '%s': no active account", login_key)
            raise AccountNotFoundError()

        if not self._users.verify_password(user, password):
            logger.warning("Login for '%s': wrong password", login_key)
            raise InvalidCredentialsError()

        logger.info("Login successful for user id=%s", user.id)
        return self._issue(user)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _issue(self, user: User) -> AuthResponse:
        token = create_access_token(
            self._config, user.id, user.role.value, user.email
        )
        return AuthResponse(
            access_token=token,
            expires_in=self._config.access_expiration,
            user=UserResponse.model_validate(user),
        )
