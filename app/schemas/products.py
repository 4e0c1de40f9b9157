from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

PRODUCT_SORT_FIELDS: Final[tuple[str, ...]] = ("price", "name", "created_at", "stock")

# Columns a client may write; anything else in a PATCH body is ignored.
PRODUCT_WRITABLE_FIELDS: Final[tuple[str, ...]] = (
    "name",
    "description",
    "price",
    "category",
    "stock",
    "calories",
    "spicy_level",
    "image_url",
)


class Product(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    description: str | None = None
    price: float
    image_url: str | None = None
    category: str | None = None
    stock: int = 0
    calories: int | None = None
    spicy_level: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ProductReview(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    rating: float
    review: str | None = None
    user_id: str | None = None
    created_at: str | None = None


class ProductRatings(BaseModel):
    average: float | None = None
    count: int = 0
    reviews: list[ProductReview] = Field(default_factory=list)


class ProductDetail(Product):
    ratings: ProductRatings = Field(default_factory=ProductRatings)


class ProductWrite(BaseModel):
    """Product body for create and update.

    Numeric fields are left loosely typed so range/type problems surface as
    the storefront's own validation messages rather than schema errors.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    description: str | None = None
    price: Any = None
    category: str | None = None
    stock: Any = None
    calories: int | None = None
    spicy_level: str | None = None
    image_url: str | None = None
