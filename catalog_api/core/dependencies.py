"""
FastAPI dependency injection helpers for authentication and authorisation.
"""
from typing import Generator, Optional
import logging

from fastapi import Depends
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from catalog_api.core.config import token_config
from catalog_api.core.exceptions import InvalidTokenError
from catalog_api.core.permissions import authorize, enforce, normalize_roles
from catalog_api.core.security import TokenVerifier, select_token
from catalog_api.db.database import get_db
from catalog_api.models.identity import Identity
from catalog_api.models.user import UserRole

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)
access_token_header = APIKeyHeader(name="x-access-token", auto_error=False)


# ---------------------------------------------------------------------------
# DB dependency
# ---------------------------------------------------------------------------

def db_dependency() -> Generator:
    """Yield a database connection for the duration of a request."""
    logger.trace("Creating database dependency connection")
    with get_db() as conn:
        yield conn


# ---------------------------------------------------------------------------
# Auth dependencies
# ---------------------------------------------------------------------------

def get_token_verifier() -> TokenVerifier:
    return TokenVerifier(token_config)


def _raw_token(
    bearer: Optional[HTTPAuthorizationCredentials],
    header_token: Optional[str],
) -> Optional[str]:
    authorization = f"Bearer {bearer.credentials}" if bearer else None
    return select_token(authorization, header_token)


def get_current_identity(
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    header_token: Optional[str] = Depends(access_token_header),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Identity:
    """
    Verify the caller's token and return its identity.
    Raises 401 when the token is missing, invalid or expired.
    """
    return verifier.verify(_raw_token(bearer, header_token))


def get_optional_identity(
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    header_token: Optional[str] = Depends(access_token_header),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Optional[Identity]:
    """Like ``get_current_identity`` but returns None for anonymous callers."""
    raw_token = _raw_token(bearer, header_token)
    if raw_token is None:
        return None
    return verifier.verify(raw_token)


def get_signup_actor(
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    header_token: Optional[str] = Depends(access_token_header),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Optional[Identity]:
    """
    Identity of whoever is registering an account, if any.

    A stale or broken token counts as anonymous: plain self-registration
    still works, and elevated roles are then refused by the auth service.
    """
    raw_token = _raw_token(bearer, header_token)
    if raw_token is None:
        return None
    try:
        return verifier.verify(raw_token)
    except InvalidTokenError:
        logger.info("Ignoring invalid token on registration request")
        return None


# ---------------------------------------------------------------------------
# Role-based access control
# ---------------------------------------------------------------------------

def require_roles(*roles):
    """
    Factory that returns a dependency which enforces that the caller's
    identity has one of the specified roles. Roles may be passed one by one
    or as a single collection.

    Usage::
        @router.delete("/{category_id}")
        def delete(identity: Identity = Depends(require_roles(UserRole.ADMIN))):
            ...
    """
    if len(roles) == 1 and not isinstance(roles[0], (str, UserRole)):
        roles = tuple(roles[0])
    allowed = normalize_roles(roles)

    def _check(identity: Identity = Depends(get_current_identity)) -> Identity:
        enforce(authorize(identity, allowed), identity)
        logger.info(
            "Subject=%s authorized with role %s",
            identity.subject_id,
            identity.role.value,
        )
        return identity
    return _check


# Convenience shortcuts
require_admin = require_roles(UserRole.ADMIN)
require_editor = require_roles(UserRole.ADMIN, UserRole.COORDINADOR)
require_any_role = require_roles(UserRole.ADMIN, UserRole.COORDINADOR, UserRole.AUXILIAR)
