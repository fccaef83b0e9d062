"""
Pydantic schemas for token responses.
"""
from pydantic import BaseModel

from catalog_api.schemas.user import UserResponse


class AuthResponse(BaseModel):
    """Returned after successful registration or sign-in."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
