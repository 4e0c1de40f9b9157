from __future__ import annotations

import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination block; the page counters are derived from total/page/limit."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(ge=0)
    page: int = Field(ge=1)
    limit: int = Field(ge=1, le=100)

    @computed_field(alias="totalPages")  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @computed_field(alias="hasNextPage")  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @computed_field(alias="hasPrevPage")  # type: ignore[prop-decorator]
    @property
    def has_prev_page(self) -> bool:
        return self.page > 1


class ApiResponse(BaseModel, Generic[T]):
    """Standard envelope returned by every endpoint.

    Exactly one of `data` / `error` is present, selected by `success`.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    data: T | None = None
    error: str | None = None
    details: str | None = None
    timestamp: str


class PaginatedResponse(ApiResponse[list[T]], Generic[T]):
    pagination: PaginationMeta


class MessageData(BaseModel):
    message: str


class DeletedData(BaseModel):
    id: str


class HealthData(BaseModel):
    ok: bool


class DatabaseHealthData(BaseModel):
    connected: bool
    products: int


def envelope_dict(response: ApiResponse[Any]) -> dict[str, Any]:
    """Dump an envelope, keeping only the fields that were explicitly set."""

    payload = response.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if isinstance(response, PaginatedResponse):
        payload["pagination"] = response.pagination.model_dump(mode="json", by_alias=True)
    return payload
