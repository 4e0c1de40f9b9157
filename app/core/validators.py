"""Request validation helpers.

Every function here is total: it returns a verdict and never raises.
Pagination parameters are clamped; domain values are checked by the caller
and rejected with a validation error.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Final

DEFAULT_PAGE: Final[int] = 1
DEFAULT_LIMIT: Final[int] = 10
MAX_LIMIT: Final[int] = 100

SORT_ORDERS: Final[tuple[str, ...]] = ("asc", "desc")

_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
# Permissive local@domain.tld shape; not RFC 5322 complete.
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def missing_required_fields(obj: Mapping[str, Any] | None, names: Iterable[str]) -> list[str]:
    """Names whose value is absent or empty (None, "", [], {})."""

    obj = obj or {}
    missing: list[str] = []
    for name in names:
        value = obj.get(name)
        if value is None or (isinstance(value, (str, list, dict)) and not value):
            missing.append(name)
    return missing


def is_valid_uuid(value: Any) -> bool:
    return isinstance(value, str) and bool(_UUID_RE.fullmatch(value))


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and bool(_EMAIL_RE.fullmatch(value))


def is_non_negative_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


def is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _parse_int(raw: Any, default: int) -> int:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw
    match = re.match(r"^\s*([+-]?\d+)", str(raw))
    if not match:
        return default
    return int(match.group(1))


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def range_end(self) -> int:
        """Inclusive end index for a PostgREST `.range()` call."""

        return self.offset + self.limit - 1


def clamp_pagination(page: Any = None, limit: Any = None) -> PageRequest:
    """page < 1 -> 1; limit clamped into [1, MAX_LIMIT]; unparseable -> defaults."""

    p = max(1, _parse_int(page, DEFAULT_PAGE))
    n = min(MAX_LIMIT, max(1, _parse_int(limit, DEFAULT_LIMIT)))
    return PageRequest(page=p, limit=n)


def normalize_sort_order(order: str | None) -> str:
    return (order or "desc").strip().lower()


def is_valid_sort_order(order: str) -> bool:
    return order in SORT_ORDERS


def is_one_of(value: Any, allowed: Iterable[str]) -> bool:
    return isinstance(value, str) and value in tuple(allowed)
