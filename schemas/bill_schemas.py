from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict

from models.enums import BillStatus, PaymentMethod


class BillResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    customer_id: int
    total_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    payment_method: PaymentMethod | None = None
    pay_status: BillStatus
    created_at: datetime | None = None
    paid_at: datetime | None = None
    name: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None


class BillStatusUpdate(BaseModel):
    pay_status: BillStatus


class RevenueResponse(BaseModel):
    total_revenue: Decimal
    start: datetime | None = None
    end: datetime | None = None
