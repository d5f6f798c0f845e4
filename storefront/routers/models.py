"""
Router Pydantic Models

Request bodies shared by the HTTP endpoints.
"""
from typing import Union

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AddToCartRequest(BaseModel):
    product_id: Union[int, str]


class UpdateCartItemRequest(BaseModel):
    product_id: Union[int, str]
    quantity: int  # must be >= 1; use DELETE /cart/item to remove
