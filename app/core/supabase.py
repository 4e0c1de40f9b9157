from __future__ import annotations

import logging
from collections.abc import Callable
from functools import lru_cache
from typing import Any

import httpx
from postgrest.exceptions import APIError as PostgrestError
from supabase import Client, ClientOptions, create_client

from app.core.db_errors import RANGE_NOT_SATISFIABLE, translate_db_error
from app.core.errors import database_error, sanitize_error_message
from app.settings import get_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Return the process-wide Supabase client used for table operations.

    Created lazily on first use and shared read-only by every request.
    """

    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_key)


@lru_cache(maxsize=1)
def get_auth_client() -> Client:
    """Return a client reserved for GoTrue sign-up / sign-in calls.

    Signing in stores the session on the client that made the call; keeping
    those calls off the table client means user sessions never become the
    identity of later table queries.
    """

    settings = get_settings()
    options = ClientOptions(persist_session=False, auto_refresh_token=False)
    return create_client(settings.supabase_url, settings.supabase_key, options=options)


def _run(query: Any, *, context: str, resource: str) -> Any:
    try:
        resp = query.execute()
    except httpx.HTTPError as exc:
        logger.error("Supabase request failed (%s): %s: %s", context, type(exc).__name__, exc)
        raise database_error("Database unavailable", sanitize_error_message(exc)) from exc

    err = getattr(resp, "error", None)
    if err:
        logger.error("Supabase query failed (%s): %s", context, err)
        raise translate_db_error(err, resource=resource)
    return resp


def execute(query: Any, *, context: str, resource: str = "Record") -> Any:
    """Execute a Supabase/PostgREST query, translating storage failures.

    supabase-py raises `postgrest.exceptions.APIError` for failed requests;
    older clients also return an object with `.error`. Both paths end in the
    database-error translator so classification lives in one place. Transport
    failures (timeouts, refused connections) surface as a Database error too.
    """

    try:
        return _run(query, context=context, resource=resource)
    except PostgrestError as exc:
        logger.error("Supabase query failed (%s): code=%s message=%s", context, exc.code, exc.message)
        raise translate_db_error(exc, resource=resource) from exc


def execute_page(query: Any, *, count_query: Callable[[], Any], context: str) -> tuple[list[Any], int]:
    """Execute a ranged `count="exact"` select and return `(rows, total)`.

    PostgREST answers a range that starts past the last row with 416
    (PGRST103); that page is empty, and the total comes from `count_query`.
    """

    try:
        resp = _run(query, context=context, resource="Record")
    except PostgrestError as exc:
        if exc.code != RANGE_NOT_SATISFIABLE:
            logger.error("Supabase query failed (%s): code=%s message=%s", context, exc.code, exc.message)
            raise translate_db_error(exc) from exc
        logger.debug("Requested page is past the end (%s)", context)
        counted = execute(count_query(), context=f"{context}.count")
        return [], int(counted.count or 0)
    return list(resp.data or []), int(resp.count or 0)
