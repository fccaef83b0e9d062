"""
Pydantic schemas for deactivate / hard-delete summaries.
"""
from pydantic import BaseModel
from typing import Any


class CascadeSummaryResponse(BaseModel):
    """Outcome of a (possibly cascading) lifecycle operation."""

    kind: str
    id: int
    action: str
    cascade: bool
    record: dict[str, Any]
    subcategories_affected: int = 0
    products_affected: int = 0
    completed_steps: list[str]
