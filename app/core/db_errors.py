from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from app.core.errors import (
    ApiError,
    conflict,
    database_error,
    forbidden,
    generic_error,
    not_found,
)

logger = logging.getLogger(__name__)

# Postgres SQLSTATE / PostgREST codes the storefront distinguishes.
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
UNDEFINED_COLUMN = "42703"
INSUFFICIENT_PRIVILEGE = "42501"
UNDEFINED_TABLE = "42P01"
NO_ROWS_FOUND = "PGRST116"
RANGE_NOT_SATISFIABLE = "PGRST103"


def _field(err: Any, name: str) -> Any:
    if isinstance(err, Mapping):
        return err.get(name)
    return getattr(err, name, None)


def translate_db_error(err: Any, *, resource: str = "Record") -> ApiError:
    """Map a storage-layer error onto the error taxonomy.

    Only a `.single()` fetch that matched no rows is a 404; every other
    unrecognized storage failure is a 500 carrying the raw message as details.
    """

    if err is None:
        return database_error("Unknown database error")

    code = _field(err, "code")
    message = _field(err, "message") or "Database operation failed"
    message = str(message)

    if code == UNIQUE_VIOLATION:
        return conflict("This record already exists")
    if code == FOREIGN_KEY_VIOLATION:
        return generic_error("Related records not found", 400, message)
    if code == UNDEFINED_COLUMN:
        return database_error("Invalid database query", message)
    if code == INSUFFICIENT_PRIVILEGE:
        return forbidden("Permission denied for this operation")
    if code == UNDEFINED_TABLE:
        return database_error("Database table not found", message)
    if code == NO_ROWS_FOUND:
        return not_found(resource)
    return database_error("Database error occurred", message)
