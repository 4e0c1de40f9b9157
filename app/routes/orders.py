from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.core.responses import paginated_response, success_response
from app.core.supabase import get_supabase_client
from app.core.validators import clamp_pagination
from app.schemas.common import ApiResponse, DeletedData, PaginatedResponse, PaginationMeta
from app.schemas.orders import Order, OrderCreate, OrderUpdate
from app.services import orders_service

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=PaginatedResponse[Order])
def list_orders(
    status: str | None = Query(default=None),
    user_id: str | None = Query(default=None, alias="userId"),
    sort_by: str | None = Query(default=None, alias="sortBy", description="created_at, total_price (or total), status."),
    order: str | None = Query(default=None),
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    client: Any = Depends(get_supabase_client),
) -> JSONResponse:
    page_req = clamp_pagination(page, limit)
    rows, total = orders_service.list_orders(
        client,
        status=status,
        user_id=user_id,
        sort_by=sort_by,
        order=order,
        page=page_req,
    )
    return paginated_response(rows, PaginationMeta(total=total, page=page_req.page, limit=page_req.limit))


@router.post("", status_code=201, response_model=ApiResponse[Order])
def create_order(body: OrderCreate, client: Any = Depends(get_supabase_client)) -> JSONResponse:
    """Creates the order and its items; a failed item insert removes the order again."""

    return success_response(orders_service.create_order(client, body), 201)


@router.get("/{order_id}", response_model=ApiResponse[Order])
def get_order(order_id: str, client: Any = Depends(get_supabase_client)) -> JSONResponse:
    return success_response(orders_service.get_order(client, order_id))


@router.patch("/{order_id}", response_model=ApiResponse[Order])
def update_order(order_id: str, body: OrderUpdate, client: Any = Depends(get_supabase_client)) -> JSONResponse:
    return success_response(orders_service.update_order_status(client, order_id, body))


@router.delete("/{order_id}", response_model=ApiResponse[DeletedData])
def delete_order(order_id: str, client: Any = Depends(get_supabase_client)) -> JSONResponse:
    return success_response(orders_service.delete_order(client, order_id))
