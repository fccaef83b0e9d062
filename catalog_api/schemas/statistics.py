"""
Pydantic schema for catalog totals.
"""
from pydantic import BaseModel


class StatisticsResponse(BaseModel):
    total_users: int
    total_products: int
    total_categories: int
    total_subcategories: int
