"""
Pydantic schemas for Subcategory request/response validation.
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class SubcategoryCreate(BaseModel):
    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    category_id: int = Field(..., gt=0)


class SubcategoryUpdate(BaseModel):
    model_config = {"str_strip_whitespace": True}

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    category_id: Optional[int] = Field(None, gt=0)


class SubcategoryResponse(BaseModel):
    id: int
    name: str
    description: str
    category_id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
