"""
Security utilities: password hashing and JWT creation/verification.

Everything here is configured by an explicit ``TokenConfig``; nothing reads the
global settings object.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import logging

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from catalog_api.core.config import TokenConfig
from catalog_api.core.exceptions import InvalidTokenError, UnauthenticatedError
from catalog_api.models.identity import Identity
from catalog_api.models.user import UserRole

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

class PasswordHasher:
    """bcrypt hashing with a configurable work factor."""

    def __init__(self, config: TokenConfig) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=config.hash_rounds,
        )

    def hash(self, plain_password: str) -> str:
        """Return the bcrypt hash of *plain_password*."""
        logger.trace("Hashing user password")
        return self._context.hash(plain_password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Return True if *plain_password* matches *hashed_password*."""
        logger.trace("Verifying password hash")
        return self._context.verify(plain_password, hashed_password)

    def dummy_verify(self) -> None:
        """Spend the time of a real verification when there is no hash to check."""
        self._context.dummy_verify()


# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------

def create_access_token(
    config: TokenConfig,
    user_id: int,
    role: str,
    email: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Build and sign an access token carrying ``sub``, ``role`` and ``email``."""
    now = datetime.now(tz=timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(seconds=config.access_expiration)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "role": role,
        "email": email,
        "iat": now,
        "exp": now + expires_delta,
    }
    token = jwt.encode(payload, config.secret, algorithm=config.algorithm)
    logger.info("Issued access token for subject=%s", user_id)
    return token


def select_token(
    authorization: Optional[str], access_token_header: Optional[str]
) -> Optional[str]:
    """
    Pick the raw token from the request headers.

    ``Authorization: Bearer <token>`` wins; the ``x-access-token`` header is
    only consulted when no bearer credential is present.
    """
    if authorization and authorization.lower().startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX):].strip()
        if token:
            return token
    if access_token_header and access_token_header.strip():
        return access_token_header.strip()
    return None


class TokenVerifier:
    """Decodes signed access tokens into an ``Identity``."""

    def __init__(self, config: TokenConfig) -> None:
        self._config = config

    def verify(self, raw_token: Optional[str]) -> Identity:
        """
        Verify *raw_token* and return the identity stored in its claims.

        Raises:
            UnauthenticatedError: no token was supplied.
            InvalidTokenError: bad signature, malformed token, or expired.
        """
        if not raw_token:
            logger.warning("Request carried no access token")
            raise UnauthenticatedError()

        try:
            claims = jwt.decode(
                raw_token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError:
            logger.warning("Expired access token presented")
            raise InvalidTokenError("Token has expired, please sign in again")
        except JWTError:
            logger.warning("Access token failed verification")
            raise InvalidTokenError()

        try:
            subject_id = int(claims["sub"])
        except (TypeError, ValueError):
            logger.warning("Access token subject is not a user id")
            raise InvalidTokenError()

        try:
            role: Optional[UserRole] = UserRole(claims.get("role"))
        except ValueError:
            # Left to the role gate, which reports it as an invalid session.
            role = None

        logger.trace("Verified token for subject=%s", subject_id)
        return Identity(
            subject_id=subject_id,
            role=role,
            email=claims.get("email") or "",
        )
