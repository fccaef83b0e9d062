"""
Statistics endpoint:
  GET /statistics – Totals of users, products, categories and subcategories
"""
from fastapi import APIRouter, Depends

from catalog_api.core.dependencies import db_dependency, get_current_identity
from catalog_api.models.identity import Identity
from catalog_api.schemas.statistics import StatisticsResponse
from catalog_api.services.statistics_service import StatisticsService

router = APIRouter(prefix="/statistics", tags=["Statistics"])


@router.get("", response_model=StatisticsResponse, summary="Catalog totals")
def get_statistics(
    conn=Depends(db_dependency),
    _: Identity = Depends(get_current_identity),
):
    return StatisticsService(conn).get_statistics()
