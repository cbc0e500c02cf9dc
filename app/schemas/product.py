"""Request/response schemas for product endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models.product import CATEGORY_MAX_LENGTH


class ProductRequest(BaseModel):
    """
    Body for POST and PUT /product.

    Price, stock and description length rules are enforced by ProductService so
    that create and update report the same first violated rule.
    """

    description: str = Field(default="", description="Free-text description (max 500 chars)")
    category: str | None = Field(
        default=None,
        max_length=CATEGORY_MAX_LENGTH,
        description="Optional category used by GET /product/category/{category}",
    )
    price: Decimal = Field(..., description="Unit price, greater than 0")
    stock: int = Field(..., description="Units in stock, 0 or more")


class ProductResponse(BaseModel):
    """Product as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    category: str | None = None
    price: float
    stock: int
    owner_id: int = Field(..., serialization_alias="ownerId")


class ProductStatisticsResponse(BaseModel):
    """Response for GET /product/statistics."""

    total_products: int = Field(..., serialization_alias="totalProducts")
    timestamp: datetime


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
