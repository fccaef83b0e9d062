"""
Product management endpoints:
  POST   /products                  – Create a product (Admin, Coordinador, Auxiliar)
  GET    /products                  – List products (public)
  GET    /products/{id}             – Get a product (public)
  PUT    /products/{id}             – Update a product (Admin, Coordinador)
  DELETE /products/{id}             – Deactivate or hard delete (Admin)
  PATCH  /products/{id}/reactivate  – Reactivate a product (Admin)
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional
import logging

from catalog_api.core.dependencies import (
    db_dependency,
    get_optional_identity,
    require_admin,
    require_any_role,
    require_editor,
)
from catalog_api.models.identity import Identity
from catalog_api.schemas.lifecycle import CascadeSummaryResponse
from catalog_api.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from catalog_api.services.lifecycle_service import HierarchyLifecycleService
from catalog_api.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
)
def create_product(
    data: ProductCreate,
    conn=Depends(db_dependency),
    identity: Identity = Depends(require_any_role),
):
    """
    The subcategory must exist **and** belong to the given category;
    otherwise nothing is written (404 / 422).
    """
    logger.info("Creating product %s", data.name)
    return ProductService(conn).create_product(data, created_by=identity)


@router.get(
    "",
    response_model=list[ProductResponse],
    summary="List products",
)
def list_products(
    include_inactive: bool = Query(False, alias="includeInactive"),
    category_id: Optional[int] = Query(None, description="Filter by category ID"),
    subcategory_id: Optional[int] = Query(None, description="Filter by subcategory ID"),
    conn=Depends(db_dependency),
    viewer: Optional[Identity] = Depends(get_optional_identity),
):
    """
    Active products, newest first. `?includeInactive=true` adds inactive ones.
    `created_by` is hidden from auxiliar callers.
    """
    return ProductService(conn).list_products(
        include_inactive=include_inactive,
        category_id=category_id,
        subcategory_id=subcategory_id,
        viewer=viewer,
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get a specific product",
)
def get_product(
    product_id: int,
    conn=Depends(db_dependency),
    viewer: Optional[Identity] = Depends(get_optional_identity),
):
    return ProductService(conn).get_product(product_id, viewer=viewer)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
)
def update_product(
    product_id: int,
    data: ProductUpdate,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_editor),
):
    logger.info("Updating product id=%s", product_id)
    return ProductService(conn).update_product(product_id, data)


@router.delete(
    "/{product_id}",
    response_model=CascadeSummaryResponse,
    summary="Deactivate or permanently delete a product",
)
def delete_product(
    product_id: int,
    hard_delete: bool = Query(False, alias="hardDelete"),
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    service = HierarchyLifecycleService(conn)
    if hard_delete:
        return service.hard_delete_product(product_id).as_dict()
    return service.deactivate_product(product_id).as_dict()


@router.patch(
    "/{product_id}/reactivate",
    response_model=ProductResponse,
    summary="Reactivate a product",
)
def reactivate_product(
    product_id: int,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    return HierarchyLifecycleService(conn).reactivate_product(product_id)
