"""
Domain model representing a Subcategory row from the DB.
A subcategory always points at exactly one owning category.
"""
from dataclasses import dataclass
from datetime import datetime


@dataclass
class Subcategory:
    id: int
    name: str
    description: str
    category_id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row) -> "Subcategory":
        """Build a Subcategory from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            category_id=row["category_id"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
