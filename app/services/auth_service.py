from __future__ import annotations

import logging
from typing import Any

from postgrest.exceptions import APIError as PostgrestError
from supabase import AuthError

from app.core.errors import ApiError, ErrorKind, unauthorized, validation_error
from app.core.validators import is_valid_email
from app.schemas.auth import Credentials, SignupRequest

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _dump(obj: Any) -> dict[str, Any] | None:
    """GoTrue returns pydantic models; the envelope wants plain JSON."""

    if obj is None:
        return None
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if isinstance(obj, dict):
        return obj
    return dict(vars(obj))


def _auth_message(exc: Exception, default: str) -> str:
    return str(getattr(exc, "message", None) or exc or "") or default


def sign_up(auth_client: Any, client: Any, body: SignupRequest) -> dict[str, Any]:
    """Create the account, then a `user_profiles` row for it.

    The profile insert is best effort; the account exists either way.
    """

    if not body.email or not body.password:
        raise validation_error("Email and password are required")
    if not is_valid_email(body.email):
        raise validation_error("Invalid email format")
    if len(body.password) < MIN_PASSWORD_LENGTH:
        raise validation_error(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    name = body.name or body.email.split("@")[0]

    try:
        resp = auth_client.auth.sign_up(
            {"email": body.email, "password": body.password, "options": {"data": {"name": name}}}
        )
    except AuthError as exc:
        logger.info("Signup rejected for %s: %s", body.email, _auth_message(exc, "signup failed"))
        raise validation_error(_auth_message(exc, "Failed to create account"))

    user = getattr(resp, "user", None)
    if user is not None:
        try:
            client.table("user_profiles").insert([{"id": user.id, "email": user.email, "name": name}]).execute()
        except PostgrestError as exc:
            logger.warning("Profile creation failed for user %s: %s", user.id, exc.message)

    return {
        "user": _dump(user),
        "message": "Account created successfully. Please check your email to confirm.",
    }


def log_in(auth_client: Any, body: Credentials) -> dict[str, Any]:
    if not body.email or not body.password:
        raise validation_error("Email and password are required")

    try:
        resp = auth_client.auth.sign_in_with_password({"email": body.email, "password": body.password})
    except AuthError as exc:
        logger.info("Login rejected for %s", body.email)
        raise unauthorized(_auth_message(exc, "Invalid email or password"))

    return {"user": _dump(getattr(resp, "user", None)), "session": _dump(getattr(resp, "session", None))}


def log_out(auth_client: Any, access_token: str | None) -> dict[str, Any]:
    """Revoke the session behind `access_token`; without a token there is nothing to revoke."""

    if access_token:
        try:
            auth_client.auth.admin.sign_out(access_token)
        except AuthError as exc:
            raise ApiError(ErrorKind.GENERIC, _auth_message(exc, "Failed to logout"))
    return {"message": "Logged out successfully"}


def current_user(auth_client: Any, client: Any, access_token: str | None) -> dict[str, Any]:
    """Resolve the bearer token to its user and merge in the profile row."""

    if not access_token:
        raise unauthorized()

    try:
        resp = auth_client.auth.get_user(access_token)
    except AuthError:
        raise unauthorized()

    user = getattr(resp, "user", None)
    if user is None:
        raise unauthorized()

    profile: dict[str, Any] = {}
    try:
        p_resp = client.table("user_profiles").select("*").eq("id", user.id).limit(1).execute()
        if p_resp.data:
            profile = dict(p_resp.data[0])
    except PostgrestError as exc:
        logger.warning("Profile lookup failed for user %s: %s", user.id, exc.message)

    return {"id": user.id, "email": user.email, **profile}
