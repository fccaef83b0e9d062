"""
Domain exceptions for the catalog API.

Services raise these instead of HTTPException; a single handler registered in
``main.py`` turns every ``CatalogError`` into a JSON response carrying its
``status_code`` and ``detail``.
"""
from typing import Any, Iterable, Optional

from fastapi import status


class CatalogError(Exception):
    """Base class for all expected application failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"
    headers: Optional[dict] = None

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_content(self) -> dict[str, Any]:
        return {"detail": self.detail}


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

class UnauthenticatedError(CatalogError):
    """No credential was supplied, or the session carries no usable role."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication token required"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidTokenError(CatalogError):
    """The token signature does not verify or the token has expired."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Token is invalid or has expired"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidCredentialsError(CatalogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Incorrect username or password"
    headers = {"WWW-Authenticate": "Bearer"}


class AccountNotFoundError(InvalidCredentialsError):
    """
    No active account matches the login key.

    Kept as a separate type for logging and tests, but answers exactly like
    ``InvalidCredentialsError`` so callers cannot probe for accounts.
    """


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------

class ForbiddenError(CatalogError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action"

    def __init__(
        self,
        detail: Optional[str] = None,
        required_roles: Iterable[str] = (),
    ) -> None:
        super().__init__(detail)
        self.required_roles = list(required_roles)

    def to_content(self) -> dict[str, Any]:
        content = super().to_content()
        if self.required_roles:
            content["required_roles"] = self.required_roles
        return content


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------

class NotFoundError(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class DuplicateKeyError(CatalogError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "A record with the same unique value already exists"


class DependentRecordsError(CatalogError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The record still has dependent records"


class ReferentialMismatchError(CatalogError):
    """A reference resolves to an existing record under the wrong parent."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Referenced record belongs to a different parent"


class ValidationFailureError(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


# ---------------------------------------------------------------------------
# Internal
# ---------------------------------------------------------------------------

class InternalError(CatalogError):
    """Opaque failure of the persistence layer or another unexpected fault."""


class CascadeInterruptedError(InternalError):
    """A cascading operation stopped part-way; ``summary`` shows its progress."""

    default_detail = "Cascade interrupted before completion"

    def __init__(self, summary, failed_step: str) -> None:
        super().__init__(f"Cascade interrupted at step '{failed_step}'")
        self.summary = summary
        self.failed_step = failed_step

    def to_content(self) -> dict[str, Any]:
        content = super().to_content()
        content["failed_step"] = self.failed_step
        content["progress"] = self.summary.as_dict()
        return content
