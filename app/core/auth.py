from __future__ import annotations

from fastapi import Header


def _extract_bearer(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2:
        return None
    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        return None
    return token


def get_access_token(authorization: str | None = Header(default=None, alias="Authorization")) -> str | None:
    """Supabase access token from `Authorization: Bearer <token>`, if any."""

    return _extract_bearer(authorization)
