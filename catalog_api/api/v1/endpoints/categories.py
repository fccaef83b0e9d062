"""
Category management endpoints:
  POST   /categories                  – Create a category (Admin, Coordinador)
  GET    /categories                  – List categories (public)
  GET    /categories/{id}             – Get a category (public)
  PUT    /categories/{id}             – Update a category (Admin, Coordinador)
  DELETE /categories/{id}             – Deactivate or hard delete, cascading (Admin)
  PATCH  /categories/{id}/reactivate  – Reactivate the category only (Admin)
"""
from fastapi import APIRouter, Depends, Query, status
import logging

from catalog_api.core.dependencies import db_dependency, require_admin, require_editor
from catalog_api.models.identity import Identity
from catalog_api.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from catalog_api.schemas.lifecycle import CascadeSummaryResponse
from catalog_api.services.category_service import CategoryService
from catalog_api.services.lifecycle_service import HierarchyLifecycleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new category",
)
def create_category(
    data: CategoryCreate,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_editor),
):
    """Category names must be unique."""
    logger.info("Creating category %s", data.name)
    return CategoryService(conn).create_category(data)


@router.get(
    "",
    response_model=list[CategoryResponse],
    summary="List categories",
)
def list_categories(
    include_inactive: bool = Query(False, alias="includeInactive"),
    conn=Depends(db_dependency),
):
    """Active categories, newest first. `?includeInactive=true` adds the rest."""
    return CategoryService(conn).list_categories(include_inactive)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Get a specific category",
)
def get_category(category_id: int, conn=Depends(db_dependency)):
    return CategoryService(conn).get_category(category_id)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Update a category",
)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_editor),
):
    logger.info("Updating category id=%s", category_id)
    return CategoryService(conn).update_category(category_id, data)


@router.delete(
    "/{category_id}",
    response_model=CascadeSummaryResponse,
    summary="Deactivate or permanently delete a category",
)
def delete_category(
    category_id: int,
    hard_delete: bool = Query(False, alias="hardDelete"),
    cascade: bool = Query(True),
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    """
    **Soft delete** (default): the category, its subcategories and every
    product filed under it become inactive.

    **Hard delete** (`?hardDelete=true`): products, then subcategories, then
    the category are removed permanently.
    """
    service = HierarchyLifecycleService(conn)
    if hard_delete:
        summary = service.hard_delete_category(category_id, cascade=cascade)
    else:
        summary = service.deactivate_category(category_id, cascade=cascade)
    return summary.as_dict()


@router.patch(
    "/{category_id}/reactivate",
    response_model=CategoryResponse,
    summary="Reactivate a category (descendants stay as they are)",
)
def reactivate_category(
    category_id: int,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    return HierarchyLifecycleService(conn).reactivate_category(category_id)
