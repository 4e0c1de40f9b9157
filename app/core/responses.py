from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from app.core.errors import ApiError
from app.core.time import utc_now_iso
from app.schemas.common import ApiResponse, PaginatedResponse, PaginationMeta, envelope_dict
from app.settings import get_settings


def success_response(data: Any, status_code: int = 200) -> JSONResponse:
    envelope = ApiResponse[Any](success=True, data=data, timestamp=utc_now_iso())
    return JSONResponse(status_code=status_code, content=envelope_dict(envelope))


def paginated_response(data: list[Any], pagination: PaginationMeta, status_code: int = 200) -> JSONResponse:
    envelope = PaginatedResponse[Any](success=True, data=data, pagination=pagination, timestamp=utc_now_iso())
    return JSONResponse(status_code=status_code, content=envelope_dict(envelope))


def error_response(error: str, status_code: int = 500, details: str | None = None) -> JSONResponse:
    fields: dict[str, Any] = {"success": False, "error": error, "timestamp": utc_now_iso()}
    if details is not None and get_settings().expose_error_details:
        fields["details"] = details
    envelope = ApiResponse[Any](**fields)
    return JSONResponse(status_code=status_code, content=envelope_dict(envelope))


def api_error_response(exc: ApiError) -> JSONResponse:
    return error_response(exc.message, exc.status_code, exc.details)


def validation_error_response(error: str, details: str | None = None) -> JSONResponse:
    return error_response(error, 400, details)


def unauthorized_response(message: str = "Not authenticated") -> JSONResponse:
    return error_response(message, 401)


def forbidden_response(message: str = "Access denied") -> JSONResponse:
    return error_response(message, 403)


def not_found_response(resource: str = "Resource") -> JSONResponse:
    return error_response(f"{resource} not found", 404)


def conflict_response(message: str = "Resource already exists") -> JSONResponse:
    return error_response(message, 409)
