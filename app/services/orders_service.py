from __future__ import annotations

import logging
from typing import Any

from app.core.errors import database_error, validation_error
from app.core.supabase import execute, execute_page
from app.core.validators import (
    PageRequest,
    is_non_negative_number,
    is_one_of,
    is_positive_int,
    is_valid_sort_order,
    is_valid_uuid,
    missing_required_fields,
    normalize_sort_order,
)
from app.schemas.orders import ORDER_ITEM_FIELDS, ORDER_SORT_COLUMNS, ORDER_STATUSES, OrderCreate, OrderUpdate

logger = logging.getLogger(__name__)

ORDER_LIST_COLUMNS = "id,user_id,total_price,status,created_at,updated_at,order_items(id,product_id,quantity,price)"

ORDER_DETAIL_COLUMNS = (
    "id,user_id,total_price,status,created_at,updated_at,"
    "order_items(id,product_id,quantity,price,products(id,name,description,image_url,category,price))"
)

_INVALID_STATUS = f"Invalid status. Must be one of: {', '.join(ORDER_STATUSES)}"


def _require_order_id(order_id: str) -> None:
    if not is_valid_uuid(order_id):
        raise validation_error("Invalid order ID format")


def _ensure_order_exists(client: Any, order_id: str, *, context: str) -> None:
    execute(
        client.table("orders").select("id").eq("id", order_id).single(),
        context=context,
        resource="Order",
    )


def list_orders(
    client: Any,
    *,
    status: str | None,
    user_id: str | None,
    sort_by: str | None,
    order: str | None,
    page: PageRequest,
) -> tuple[list[dict[str, Any]], int]:
    if status and not is_one_of(status, ORDER_STATUSES):
        raise validation_error(_INVALID_STATUS)
    if user_id and not is_valid_uuid(user_id):
        raise validation_error("Invalid user ID format")

    sort_order = normalize_sort_order(order)
    if not is_valid_sort_order(sort_order):
        raise validation_error('Invalid sort order. Must be "asc" or "desc"')

    sort_key = sort_by or "created_at"
    column = ORDER_SORT_COLUMNS.get(sort_key)
    if column is None:
        raise validation_error(f"Invalid sort field. Must be one of: {', '.join(ORDER_SORT_COLUMNS)}")

    def filtered(columns: str) -> Any:
        q = client.table("orders").select(columns, count="exact")
        if status:
            q = q.eq("status", status)
        if user_id:
            q = q.eq("user_id", user_id)
        return q

    q = filtered(ORDER_LIST_COLUMNS).order(column, desc=sort_order == "desc").range(page.offset, page.range_end)
    return execute_page(q, count_query=lambda: filtered("id").limit(1), context="orders.list")


def _item_problem(item: Any) -> str | None:
    if not isinstance(item, dict):
        return "item must be an object"
    missing = missing_required_fields(item, ORDER_ITEM_FIELDS)
    if missing:
        return f"missing {', '.join(missing)}"
    if not is_valid_uuid(item["product_id"]):
        return "product_id must be a valid UUID"
    if not is_positive_int(item["quantity"]):
        return "quantity must be a positive integer"
    if not is_non_negative_number(item["price"]):
        return "price must be a non-negative number"
    return None


def _validate_new_order(body: OrderCreate) -> list[dict[str, Any]]:
    values = body.model_dump()
    missing = [name for name in ("user_id", "items", "total_price") if values.get(name) is None]
    if missing:
        raise validation_error(f"Missing required fields: {', '.join(missing)}")

    if not is_valid_uuid(body.user_id):
        raise validation_error("Invalid user ID format")
    if not isinstance(body.items, list):
        raise validation_error("Items must be a list")
    if not body.items:
        raise validation_error("Order must contain at least one item")

    for index, item in enumerate(body.items):
        problem = _item_problem(item)
        if problem:
            raise validation_error(f"Invalid order item at index {index}: {problem}")

    if not is_non_negative_number(body.total_price):
        raise validation_error("Total price must be a non-negative number")
    if body.status is not None and not is_one_of(body.status, ORDER_STATUSES):
        raise validation_error(_INVALID_STATUS)

    return [{k: item[k] for k in ORDER_ITEM_FIELDS} for item in body.items]


def get_order(client: Any, order_id: str) -> dict[str, Any]:
    _require_order_id(order_id)
    resp = execute(
        client.table("orders").select(ORDER_DETAIL_COLUMNS).eq("id", order_id).single(),
        context="orders.get",
        resource="Order",
    )
    return dict(resp.data or {})


def create_order(client: Any, body: OrderCreate) -> dict[str, Any]:
    """Insert the order header, then its line items.

    There is no multi-statement transaction: when the item insert fails the
    header just created is deleted again before the error is raised.
    """

    items = _validate_new_order(body)

    header = {
        "user_id": body.user_id,
        "total_price": body.total_price,
        "status": body.status or "pending",
    }
    h_resp = execute(client.table("orders").insert([header]), context="orders.create")
    rows = h_resp.data or []
    if not rows or not rows[0].get("id"):
        raise database_error("Failed to create order")
    order_id = str(rows[0]["id"])

    try:
        execute(
            client.table("order_items").insert([{**item, "order_id": order_id} for item in items]),
            context="orders.create_items",
        )
    except Exception:
        logger.warning("Order item insert failed; removing order %s", order_id)
        try:
            execute(client.table("orders").delete().eq("id", order_id), context="orders.rollback")
        except Exception:
            logger.exception("Compensating delete failed for order %s", order_id)
        raise

    return get_order(client, order_id)


def update_order_status(client: Any, order_id: str, body: OrderUpdate) -> dict[str, Any]:
    _require_order_id(order_id)

    if "status" not in body.model_fields_set:
        raise validation_error('No updateable fields provided. Currently only "status" can be updated')
    if not is_one_of(body.status, ORDER_STATUSES):
        raise validation_error(_INVALID_STATUS)

    _ensure_order_exists(client, order_id, context="orders.update")
    execute(
        client.table("orders").update({"status": body.status}).eq("id", order_id),
        context="orders.update",
        resource="Order",
    )
    return get_order(client, order_id)


def delete_order(client: Any, order_id: str) -> dict[str, Any]:
    _require_order_id(order_id)
    _ensure_order_exists(client, order_id, context="orders.delete")

    # Items first: order_items.order_id references orders.id.
    execute(client.table("order_items").delete().eq("order_id", order_id), context="orders.delete_items")
    execute(client.table("orders").delete().eq("id", order_id), context="orders.delete")
    return {"id": order_id}
