"""
Domain model representing a Category row from the DB.
"""
from dataclasses import dataclass
from datetime import datetime


@dataclass
class Category:
    id: int
    name: str
    description: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        """Log the creation of the Category model instance."""
        import logging

        logger = logging.getLogger(__name__)
        logger.trace("Initialized Category model id=%s", self.id)

    @classmethod
    def from_row(cls, row) -> "Category":
        """Build a Category from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
