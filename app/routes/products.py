from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.core.responses import paginated_response, success_response
from app.core.supabase import get_supabase_client
from app.core.validators import clamp_pagination
from app.schemas.common import ApiResponse, DeletedData, PaginatedResponse, PaginationMeta
from app.schemas.products import Product, ProductDetail, ProductWrite
from app.services import products_service

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=PaginatedResponse[Product])
def list_products(
    category: str | None = Query(default=None),
    search: str | None = Query(default=None, description="Case-insensitive match on name or description."),
    sort_by: str | None = Query(default=None, alias="sortBy", description="price, name, created_at or stock."),
    order: str | None = Query(default=None, description="asc or desc (default desc)."),
    page: str | None = Query(default=None, description="1-based page; values below 1 become 1."),
    limit: str | None = Query(default=None, description="Page size, clamped to 1-100 (default 10)."),
    client: Any = Depends(get_supabase_client),
) -> JSONResponse:
    page_req = clamp_pagination(page, limit)
    rows, total = products_service.list_products(
        client,
        category=category,
        search=search,
        sort_by=sort_by,
        order=order,
        page=page_req,
    )
    return paginated_response(rows, PaginationMeta(total=total, page=page_req.page, limit=page_req.limit))


@router.post("", status_code=201, response_model=ApiResponse[Product])
def create_product(body: ProductWrite, client: Any = Depends(get_supabase_client)) -> JSONResponse:
    return success_response(products_service.create_product(client, body), 201)


@router.get("/{product_id}", response_model=ApiResponse[ProductDetail])
def get_product(product_id: str, client: Any = Depends(get_supabase_client)) -> JSONResponse:
    return success_response(products_service.get_product(client, product_id))


@router.patch("/{product_id}", response_model=ApiResponse[Product])
def update_product(product_id: str, body: ProductWrite, client: Any = Depends(get_supabase_client)) -> JSONResponse:
    return success_response(products_service.update_product(client, product_id, body))


@router.delete("/{product_id}", response_model=ApiResponse[DeletedData])
def delete_product(product_id: str, client: Any = Depends(get_supabase_client)) -> JSONResponse:
    return success_response(products_service.delete_product(client, product_id))
