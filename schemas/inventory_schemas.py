from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class StockCheckItem(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class ValidateCartStockRequest(BaseModel):
    items: list[StockCheckItem]


class OutOfStockProduct(BaseModel):
    product_id: int
    product_name: str
    requested_quantity: int
    available_quantity: int


class DeletedProduct(BaseModel):
    product_id: int
    product_name: str
    quantity: int


class ValidateCartStockResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_valid: bool
    out_of_stock: list[OutOfStockProduct]
    deleted: list[DeletedProduct]


class InventoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    product_name: str | None = None
    quantity: int
    updated_at: datetime | None = None


class InventoryQuantityUpdate(BaseModel):
    quantity: int = Field(ge=0)
    note: str | None = None
