"""
Central v1 API router – registers all endpoint sub-routers.
"""
from fastapi import APIRouter
import logging

from catalog_api.api.v1.endpoints import (
    auth,
    categories,
    products,
    statistics,
    subcategories,
    users,
)

logger = logging.getLogger(__name__)

api_router = APIRouter(prefix="/api/v1")

logger.info("Registering v1 API routers")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(categories.router)
api_router.include_router(subcategories.router)
api_router.include_router(products.router)
api_router.include_router(statistics.router)
