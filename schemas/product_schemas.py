from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from schemas.common import Money


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    price: Money
    unit: str | None = None
    barcode: str | None = None
    initial_quantity: int = Field(default=0, ge=0)


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    price: Decimal
    unit: str | None = None
    barcode: str | None = None
    available_quantity: int = 0


class ProductCountResponse(BaseModel):
    count: int
