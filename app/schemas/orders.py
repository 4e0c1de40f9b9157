from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

ORDER_STATUSES: Final[tuple[str, ...]] = ("pending", "processing", "shipped", "delivered", "cancelled")

# Query value -> column; `total` is accepted as shorthand for `total_price`.
ORDER_SORT_COLUMNS: Final[dict[str, str]] = {
    "created_at": "created_at",
    "total": "total_price",
    "total_price": "total_price",
    "status": "status",
}

ORDER_ITEM_FIELDS: Final[tuple[str, ...]] = ("product_id", "quantity", "price")


class OrderItemProduct(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    name: str
    description: str | None = None
    image_url: str | None = None
    category: str | None = None
    price: float | None = None


class OrderItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    order_id: str | None = None
    product_id: str
    quantity: int
    price: float
    products: OrderItemProduct | None = None


class Order(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    user_id: str
    total_price: float
    status: str
    created_at: str | None = None
    updated_at: str | None = None
    order_items: list[OrderItem] = Field(default_factory=list)


class OrderCreate(BaseModel):
    """Order body; items are validated one by one by the orders service."""

    model_config = ConfigDict(extra="ignore")

    user_id: Any = None
    items: Any = None
    total_price: Any = None
    status: Any = None


class OrderUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: Any = None
