from __future__ import annotations

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.settings import get_settings

request_logger = logging.getLogger("app.request")

REQUEST_ID_HEADER = "X-Request-ID"

# Inbound ids are echoed into logs and headers; accept only short opaque tokens.
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, reusing a well-formed inbound `X-Request-ID`."""

    async def dispatch(self, request: Request, call_next):
        inbound = request.headers.get(REQUEST_ID_HEADER) or ""
        request_id = inbound if _REQUEST_ID_RE.match(inbound) else str(uuid.uuid4())
        request.state.request_id = request_id

        response: Response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request; server errors are logged at WARNING."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = response.status_code if response is not None else 500
            level = logging.WARNING if status_code >= 500 else logging.INFO
            request_logger.log(
                level,
                "%s %s -> %s (%.1fms) rid=%s",
                request.method,
                request.url.path,
                status_code,
                duration_ms,
                getattr(request.state, "request_id", None),
            )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Baseline API security headers; values set by a proxy are left alone.

    Auth responses carry sessions, so they are also marked uncacheable.
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        def _set(name: str, value: str) -> None:
            if name not in response.headers:
                response.headers[name] = value

        _set("X-Content-Type-Options", "nosniff")
        _set("Referrer-Policy", "strict-origin-when-cross-origin")
        _set("X-Frame-Options", "DENY")
        _set("Permissions-Policy", "geolocation=(), microphone=(), camera=()")

        if request.url.path.startswith("/api/auth"):
            _set("Cache-Control", "no-store")

        if get_settings().enable_hsts:
            forwarded_proto = (request.headers.get("x-forwarded-proto") or "").split(",")[0].strip().lower()
            if request.url.scheme == "https" or forwarded_proto == "https":
                _set("Strict-Transport-Security", "max-age=31536000; includeSubDomains")

        return response
