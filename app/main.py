from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.trustedhost import TrustedHostMiddleware

from app.core.errors import ApiError, sanitize_error_message
from app.core.logging import configure_logging
from app.core.middleware import RequestIdMiddleware, RequestLoggingMiddleware, SecurityHeadersMiddleware
from app.core.responses import api_error_response, error_response, validation_error_response
from app.routes import auth, health, orders, products
from app.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

configure_logging(level=settings.log_level)

app = FastAPI(title="Food Store API", version="1.0.0")

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RequestIdMiddleware)

if settings.trusted_hosts:
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.effective_cors_allow_origins,
    allow_credentials=False,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


@app.exception_handler(ApiError)
async def handle_api_error(request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.details)
    return api_error_response(exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request, exc: RequestValidationError):
    return validation_error_response("Request validation failed", _format_validation_errors(exc))


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request, exc: StarletteHTTPException):
    # Unknown routes, wrong methods and other framework-raised HTTP errors.
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(message, exc.status_code)


@app.exception_handler(Exception)
async def handle_unhandled_error(request, exc: Exception):
    # Runs in ServerErrorMiddleware, outside the request-id and header middleware.
    logger.exception("Unhandled error")
    return error_response("Internal server error", 500, sanitize_error_message(exc))


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(products.router)
app.include_router(orders.router)
