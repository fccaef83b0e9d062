"""
Identity derived from a verified access token.
"""
from dataclasses import dataclass
from typing import Optional

from catalog_api.models.user import UserRole


@dataclass(frozen=True)
class Identity:
    """Trusted claims of the caller: subject id, role and email."""

    subject_id: int
    role: Optional[UserRole]
    email: str

    def is_subject(self, user_id: int) -> bool:
        return self.subject_id == user_id
