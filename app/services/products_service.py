from __future__ import annotations

import logging
import re
from typing import Any

from postgrest.exceptions import APIError as PostgrestError

from app.core.errors import not_found, validation_error
from app.core.supabase import execute, execute_page
from app.core.validators import (
    PageRequest,
    is_non_negative_number,
    is_one_of,
    is_valid_sort_order,
    is_valid_uuid,
    normalize_sort_order,
)
from app.schemas.products import PRODUCT_SORT_FIELDS, PRODUCT_WRITABLE_FIELDS, ProductWrite

logger = logging.getLogger(__name__)

# Characters that would break out of a PostgREST `or=(...)` expression.
_FILTER_UNSAFE_RE = re.compile(r"[,()*%\\]")


def _require_product_id(product_id: str) -> None:
    if not is_valid_uuid(product_id):
        raise validation_error("Invalid product ID format")


def _validate_numbers(values: dict[str, Any]) -> None:
    if "price" in values and not is_non_negative_number(values["price"]):
        raise validation_error("Price must be a positive number")
    if "stock" in values and values["stock"] is not None:
        stock = values["stock"]
        if not is_non_negative_number(stock) or int(stock) != stock:
            raise validation_error("Stock must be a non-negative integer")


def list_products(
    client: Any,
    *,
    category: str | None,
    search: str | None,
    sort_by: str | None,
    order: str | None,
    page: PageRequest,
) -> tuple[list[dict[str, Any]], int]:
    """Return one page of products and the total row count for the filters."""

    sort_order = normalize_sort_order(order)
    if not is_valid_sort_order(sort_order):
        raise validation_error('Invalid sort order. Must be "asc" or "desc"')

    sort_field = sort_by or "created_at"
    if not is_one_of(sort_field, PRODUCT_SORT_FIELDS):
        raise validation_error(f"Invalid sort field. Must be one of: {', '.join(PRODUCT_SORT_FIELDS)}")

    term = _FILTER_UNSAFE_RE.sub(" ", search or "").strip()

    def filtered(columns: str) -> Any:
        q = client.table("products").select(columns, count="exact")
        if category:
            q = q.eq("category", category)
        if term:
            q = q.or_(f"name.ilike.%{term}%,description.ilike.%{term}%")
        return q

    q = filtered("*").order(sort_field, desc=sort_order == "desc").range(page.offset, page.range_end)
    return execute_page(q, count_query=lambda: filtered("id").limit(1), context="products.list")


def _ratings_summary(rows: list[dict[str, Any]]) -> dict[str, Any]:
    scores = [float(r["rating"]) for r in rows if isinstance(r, dict) and r.get("rating") is not None]
    average = round(sum(scores) / len(scores), 1) if scores else None
    return {"average": average, "count": len(rows), "reviews": rows}


def get_product(client: Any, product_id: str) -> dict[str, Any]:
    """Fetch one product with its ratings.

    A failed ratings lookup is logged and degrades to empty ratings.
    """

    _require_product_id(product_id)

    resp = execute(
        client.table("products").select("*").eq("id", product_id).single(),
        context="products.get",
        resource="Product",
    )
    product = dict(resp.data or {})

    try:
        r_resp = (
            client.table("product_ratings")
            .select("id, rating, review, user_id, created_at")
            .eq("product_id", product_id)
            .order("created_at", desc=True)
            .execute()
        )
        ratings = [r for r in (r_resp.data or []) if isinstance(r, dict)]
    except PostgrestError as exc:
        logger.warning("Ratings lookup failed for product %s: %s", product_id, exc.message)
        ratings = []

    product["ratings"] = _ratings_summary(ratings)
    return product


def create_product(client: Any, body: ProductWrite) -> dict[str, Any]:
    if not body.name or body.price is None:
        raise validation_error("Missing required fields: name and price")

    values = body.model_dump(exclude_unset=True)
    _validate_numbers(values)

    row = {
        "name": body.name,
        "description": body.description or None,
        "price": body.price,
        "category": body.category or None,
        "stock": body.stock or 0,
        "calories": body.calories,
        "spicy_level": body.spicy_level,
        "image_url": body.image_url or None,
    }
    resp = execute(client.table("products").insert([row]), context="products.create")
    data = resp.data or []
    return data[0] if data else row


def update_product(client: Any, product_id: str, body: ProductWrite) -> dict[str, Any]:
    _require_product_id(product_id)

    values = {k: v for k, v in body.model_dump(exclude_unset=True).items() if k in PRODUCT_WRITABLE_FIELDS}
    if not values:
        raise validation_error("No updateable fields provided")
    if "name" in values and not values["name"]:
        raise validation_error("Name cannot be empty")
    _validate_numbers(values)

    resp = execute(
        client.table("products").update(values).eq("id", product_id),
        context="products.update",
        resource="Product",
    )
    rows = resp.data or []
    if not rows:
        raise not_found("Product")
    return rows[0]


def delete_product(client: Any, product_id: str) -> dict[str, Any]:
    _require_product_id(product_id)

    resp = execute(
        client.table("products").delete().eq("id", product_id),
        context="products.delete",
        resource="Product",
    )
    if not resp.data:
        raise not_found("Product")
    return {"id": product_id}


def count_products(client: Any) -> int:
    resp = execute(client.table("products").select("id", count="exact").limit(1), context="health.db")
    return int(resp.count or 0)
