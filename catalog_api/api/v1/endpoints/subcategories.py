"""
Subcategory management endpoints:
  POST   /subcategories                  – Create a subcategory (Admin, Coordinador)
  GET    /subcategories                  – List subcategories (public)
  GET    /subcategories/{id}             – Get a subcategory (public)
  PUT    /subcategories/{id}             – Update a subcategory (Admin, Coordinador)
  DELETE /subcategories/{id}             – Deactivate or hard delete, cascading (Admin)
  PATCH  /subcategories/{id}/reactivate  – Reactivate the subcategory only (Admin)
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from catalog_api.core.dependencies import db_dependency, require_admin, require_editor
from catalog_api.models.identity import Identity
from catalog_api.schemas.lifecycle import CascadeSummaryResponse
from catalog_api.schemas.subcategory import (
    SubcategoryCreate,
    SubcategoryResponse,
    SubcategoryUpdate,
)
from catalog_api.services.lifecycle_service import HierarchyLifecycleService
from catalog_api.services.subcategory_service import SubcategoryService

router = APIRouter(prefix="/subcategories", tags=["Subcategories"])


@router.post(
    "",
    response_model=SubcategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new subcategory",
)
def create_subcategory(
    data: SubcategoryCreate,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_editor),
):
    """The parent category must exist."""
    return SubcategoryService(conn).create_subcategory(data)


@router.get(
    "",
    response_model=list[SubcategoryResponse],
    summary="List subcategories",
)
def list_subcategories(
    include_inactive: bool = Query(False, alias="includeInactive"),
    category_id: Optional[int] = Query(None, description="Filter by category ID"),
    conn=Depends(db_dependency),
):
    return SubcategoryService(conn).list_subcategories(include_inactive, category_id)


@router.get(
    "/{subcategory_id}",
    response_model=SubcategoryResponse,
    summary="Get a specific subcategory",
)
def get_subcategory(subcategory_id: int, conn=Depends(db_dependency)):
    return SubcategoryService(conn).get_subcategory(subcategory_id)


@router.put(
    "/{subcategory_id}",
    response_model=SubcategoryResponse,
    summary="Update a subcategory",
)
def update_subcategory(
    subcategory_id: int,
    data: SubcategoryUpdate,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_editor),
):
    """Moving it to another category checks that the category exists."""
    return SubcategoryService(conn).update_subcategory(subcategory_id, data)


@router.delete(
    "/{subcategory_id}",
    response_model=CascadeSummaryResponse,
    summary="Deactivate or permanently delete a subcategory",
)
def delete_subcategory(
    subcategory_id: int,
    hard_delete: bool = Query(False, alias="hardDelete"),
    cascade: bool = Query(True),
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    """Soft delete deactivates its products too; hard delete removes them first."""
    service = HierarchyLifecycleService(conn)
    if hard_delete:
        summary = service.hard_delete_subcategory(subcategory_id, cascade=cascade)
    else:
        summary = service.deactivate_subcategory(subcategory_id, cascade=cascade)
    return summary.as_dict()


@router.patch(
    "/{subcategory_id}/reactivate",
    response_model=SubcategoryResponse,
    summary="Reactivate a subcategory (products stay as they are)",
)
def reactivate_subcategory(
    subcategory_id: int,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    return HierarchyLifecycleService(conn).reactivate_subcategory(subcategory_id)
