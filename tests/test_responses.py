"""
Tests for the response envelope builder and pagination metadata.
"""

import json
from datetime import datetime

import pytest
from pydantic import ValidationError

from app.core.errors import not_found
from app.core.responses import (
    api_error_response,
    conflict_response,
    error_response,
    forbidden_response,
    not_found_response,
    paginated_response,
    success_response,
    unauthorized_response,
    validation_error_response,
)
from app.schemas.common import PaginationMeta


def _body(response) -> dict:
    return json.loads(response.body)


def _parses_as_iso(value: str) -> bool:
    datetime.fromisoformat(value.replace("Z", "+00:00"))
    return True


class TestSuccessEnvelope:
    def test_round_trip_preserves_data(self) -> None:
        data = {"id": "p1", "name": "Soup", "tags": ["hot", "vegan"], "price": 4.5, "meta": {"calories": None}}
        response = success_response(data)
        body = _body(response)

        assert response.status_code == 200
        assert body["success"] is True
        assert body["data"] == data
        assert "error" not in body
        assert _parses_as_iso(body["timestamp"])

    def test_custom_status(self) -> None:
        assert success_response({"ok": True}, 201).status_code == 201

    def test_null_data_is_still_present(self) -> None:
        body = _body(success_response(None))
        assert "data" in body and body["data"] is None


class TestPaginatedEnvelope:
    def test_includes_pagination_block(self) -> None:
        meta = PaginationMeta(total=25, page=1, limit=10)
        body = _body(paginated_response([{"id": 1}], meta))

        assert body["success"] is True
        assert body["data"] == [{"id": 1}]
        assert body["pagination"] == {
            "total": 25,
            "page": 1,
            "limit": 10,
            "totalPages": 3,
            "hasNextPage": True,
            "hasPrevPage": False,
        }


class TestPaginationMeta:
    @pytest.mark.parametrize(
        "total, page, limit, pages, has_next, has_prev",
        [
            (25, 1, 10, 3, True, False),
            (25, 3, 10, 3, False, True),
            (30, 3, 10, 3, False, True),
            (0, 1, 10, 0, False, False),
            (1, 1, 100, 1, False, False),
            (5, 4, 2, 3, False, True),
        ],
    )
    def test_derived_counters(self, total, page, limit, pages, has_next, has_prev) -> None:
        meta = PaginationMeta(total=total, page=page, limit=limit)
        assert meta.total_pages == pages
        assert meta.has_next_page is has_next
        assert meta.has_prev_page is has_prev

    def test_limit_out_of_bounds_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PaginationMeta(total=1, page=1, limit=101)


class TestErrorEnvelope:
    def test_error_shape(self) -> None:
        response = error_response("Database error occurred", 500, "relation does not exist")
        body = _body(response)

        assert response.status_code == 500
        assert body["success"] is False
        assert body["error"] == "Database error occurred"
        assert body["details"] == "relation does not exist"
        assert "data" not in body
        assert _parses_as_iso(body["timestamp"])

    def test_details_omitted_when_absent(self) -> None:
        assert "details" not in _body(error_response("nope", 400))

    @pytest.mark.parametrize(
        "response, status, message",
        [
            (validation_error_response("Invalid email format"), 400, "Invalid email format"),
            (unauthorized_response(), 401, "Not authenticated"),
            (forbidden_response(), 403, "Access denied"),
            (not_found_response("Product"), 404, "Product not found"),
            (conflict_response(), 409, "Resource already exists"),
        ],
    )
    def test_convenience_wrappers(self, response, status, message) -> None:
        assert response.status_code == status
        body = _body(response)
        assert body["success"] is False
        assert body["error"] == message

    def test_from_api_error(self) -> None:
        response = api_error_response(not_found("Order"))
        assert response.status_code == 404
        assert _body(response)["error"] == "Order not found"
