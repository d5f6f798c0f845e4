"""Catalog Models - Pydantic models for products returned by the store API."""
from decimal import Decimal
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.services.money import to_decimal

ProductId = Union[int, str]


class ProductRating(BaseModel):
    """Average review score and number of reviews."""
    model_config = ConfigDict(frozen=True)

    rate: float = Field(default=0.0, ge=0, le=5)
    count: int = Field(default=0, ge=0)


class Product(BaseModel):
    """Product as served by the catalog. The cart only ever receives a copy."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: ProductId
    title: str
    price: Decimal
    category: str = ""
    image: str = ""
    description: str = ""
    rating: ProductRating = Field(default_factory=ProductRating)

    @field_validator("price", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return to_decimal(v) if isinstance(v, float) else v

    @field_validator("price")
    @classmethod
    def non_negative_price(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("price must be non-negative")
        return v
