from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field


class AddCartItemRequest(BaseModel):
    product_id: int = Field(gt=0)
    quantity: int = Field(default=1, gt=0)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(gt=0)


class CartItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    product_name: str | None = None
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    added_at: datetime | None = None


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    total: Decimal
