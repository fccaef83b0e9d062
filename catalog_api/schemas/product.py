"""
Pydantic schemas for Product request/response validation.
"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def _to_decimal(v):
    if v is None:
        return v
    return Decimal(str(v))


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class ProductCreate(BaseModel):
    """Payload for creating products."""

    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    stock: int = Field(..., ge=0)
    category_id: int = Field(..., gt=0)
    subcategory_id: int = Field(..., gt=0)
    images: list[str] = Field(default_factory=list)

    @field_validator("price", mode="before")
    @classmethod
    def validate_decimal(cls, v):
        """Normalize price input to a Decimal instance."""
        logger.trace("Validating product price value")
        return _to_decimal(v)


class ProductUpdate(BaseModel):
    """Payload for updating products; only fields sent are changed."""

    model_config = {"str_strip_whitespace": True}

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = Field(None, gt=0)
    subcategory_id: Optional[int] = Field(None, gt=0)
    images: Optional[list[str]] = None

    @field_validator("price", mode="before")
    @classmethod
    def validate_decimal(cls, v):
        return _to_decimal(v)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class ProductResponse(BaseModel):
    """Response model for product data."""

    id: int
    name: str
    description: str
    price: Decimal
    stock: int
    category_id: int
    subcategory_id: int
    created_by: Optional[int] = None
    images: list[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
