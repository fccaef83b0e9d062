"""
Domain model representing a Product row from the DB.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional
import json


@dataclass
class Product:
    id: int
    name: str
    description: str
    price: Decimal
    stock: int
    category_id: int
    subcategory_id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    created_by: Optional[int] = None
    images: list[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row) -> "Product":
        """Build a Product from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            price=Decimal(str(row["price"])),
            stock=row["stock"],
            category_id=row["category_id"],
            subcategory_id=row["subcategory_id"],
            created_by=row["created_by"],
            images=json.loads(row["images"]) if row["images"] else [],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
