from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.responses import success_response
from app.core.supabase import get_supabase_client
from app.schemas.common import ApiResponse, DatabaseHealthData, HealthData
from app.services.products_service import count_products

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=ApiResponse[HealthData])
def health() -> JSONResponse:
    return success_response({"ok": True})


@router.get("/db", response_model=ApiResponse[DatabaseHealthData])
def database_health(client: Any = Depends(get_supabase_client)) -> JSONResponse:
    """Round-trips a count query to confirm the store is reachable with the configured key."""

    return success_response({"connected": True, "products": count_products(client)})
