"""
Pydantic schemas for User request/response validation.
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional, Union

from catalog_api.models.user import UserRole


def _single_role(value: Optional[list[UserRole]]) -> Optional[list[UserRole]]:
    if value is not None and len(set(value)) > 1:
        raise ValueError("A user can hold exactly one role")
    return value


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class UserCreate(BaseModel):
    """
    Registration payload.

    ``role`` may be sent as a single value or as a list; it is normalized to
    a list here and must name exactly one role.
    """

    model_config = {"str_strip_whitespace": True}

    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_.-]+$")
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    role: Optional[list[UserRole]] = None

    @field_validator("role", mode="before")
    @classmethod
    def wrap_single_role(cls, v: Union[str, list, None]):
        if v is None or isinstance(v, list):
            return v
        return [v]

    @field_validator("role")
    @classmethod
    def only_one_role(cls, v):
        return _single_role(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @property
    def requested_role(self) -> Optional[UserRole]:
        return self.role[0] if self.role else None


class UserUpdate(BaseModel):
    model_config = {"str_strip_whitespace": True}

    username: Optional[str] = Field(None, min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_.-]+$")
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v is not None else v


class UserLogin(BaseModel):
    """Sign-in payload: either ``username`` or ``email`` identifies the account."""

    username: Optional[str] = None
    email: Optional[str] = None
    password: str = Field(..., min_length=1)

    @property
    def login_key(self) -> str:
        return (self.username or self.email or "").strip()


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
