"""
Tests for request validators and pagination clamping.
"""

import pytest

from app.core.validators import (
    clamp_pagination,
    is_non_negative_number,
    is_positive_int,
    is_valid_email,
    is_valid_sort_order,
    is_valid_uuid,
    missing_required_fields,
    normalize_sort_order,
)


class TestUuid:
    @pytest.mark.parametrize(
        "value",
        [
            "550e8400-e29b-41d4-a716-446655440000",
            "550E8400-E29B-41D4-A716-446655440000",
            "00000000-0000-0000-0000-000000000000",
        ],
    )
    def test_accepts_canonical_form(self, value: str) -> None:
        assert is_valid_uuid(value)

    @pytest.mark.parametrize(
        "value",
        [
            "not-a-uuid",
            "",
            "550e8400e29b41d4a716446655440000",
            "550e8400-e29b-41d4-a716-44665544000",
            "550e8400-e29b-41d4-a716-4466554400000",
            "g50e8400-e29b-41d4-a716-446655440000",
            " 550e8400-e29b-41d4-a716-446655440000",
            None,
            123,
        ],
    )
    def test_rejects_everything_else(self, value) -> None:
        assert not is_valid_uuid(value)


class TestEmail:
    @pytest.mark.parametrize("value", ["a@b.com", "first.last+tag@shop.example.co"])
    def test_accepts(self, value: str) -> None:
        assert is_valid_email(value)

    @pytest.mark.parametrize("value", ["a@b", "ab.com", "a b@c.com", "@b.com", "a@.", "", None])
    def test_rejects(self, value) -> None:
        assert not is_valid_email(value)


class TestRequiredFields:
    def test_reports_missing_and_empty(self) -> None:
        obj = {"email": "a@b.com", "password": "", "name": None}
        assert missing_required_fields(obj, ["email", "password", "name", "phone"]) == ["password", "name", "phone"]

    def test_zero_and_false_are_present(self) -> None:
        assert missing_required_fields({"price": 0, "active": False}, ["price", "active"]) == []

    def test_none_object(self) -> None:
        assert missing_required_fields(None, ["id"]) == ["id"]


class TestNumbers:
    def test_non_negative_number(self) -> None:
        assert is_non_negative_number(0)
        assert is_non_negative_number(12.5)
        assert not is_non_negative_number(-0.01)
        assert not is_non_negative_number("5")
        assert not is_non_negative_number(True)
        assert not is_non_negative_number(float("nan"))

    def test_positive_int(self) -> None:
        assert is_positive_int(1)
        assert not is_positive_int(0)
        assert not is_positive_int(2.0)
        assert not is_positive_int(True)


class TestPagination:
    def test_defaults(self) -> None:
        page = clamp_pagination()
        assert (page.page, page.limit, page.offset, page.range_end) == (1, 10, 0, 9)

    @pytest.mark.parametrize(
        "raw_limit, expected",
        [("500", 100), ("0", 1), ("-3", 1), ("25", 25), ("abc", 10), (None, 10)],
    )
    def test_limit_is_clamped(self, raw_limit, expected) -> None:
        assert clamp_pagination(limit=raw_limit).limit == expected

    @pytest.mark.parametrize("raw_page, expected", [("0", 1), ("-2", 1), ("3", 3), ("x", 1), ("2abc", 2)])
    def test_page_floor(self, raw_page, expected) -> None:
        assert clamp_pagination(page=raw_page).page == expected

    def test_offset_and_range(self) -> None:
        page = clamp_pagination(page=3, limit=20)
        assert page.offset == 40
        assert page.range_end == 59


class TestSortOrder:
    def test_normalizes_case_and_default(self) -> None:
        assert normalize_sort_order(None) == "desc"
        assert normalize_sort_order("ASC") == "asc"

    def test_only_asc_desc(self) -> None:
        assert is_valid_sort_order("asc")
        assert is_valid_sort_order("desc")
        assert not is_valid_sort_order("up")
