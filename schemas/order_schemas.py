from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from models.enums import PaymentMethod, PayStatus, FulfillmentStatus, OrderType, BillStatus, TransactionStatus
from schemas.common import Money, validate_phone_number


class ContactDetails(BaseModel):
    customer_name: str | None = None
    customer_address: str | None = None
    customer_phone: str | None = None
    customer_email: EmailStr | None = None

    @field_validator('customer_phone')
    @classmethod
    def validate_phone(cls, value):
        return validate_phone_number(value)


class CheckoutRequest(ContactDetails):
    """Body of preview and checkout. A promotion may be given by code or by id."""
    promo_code: str | None = None
    promo_id: int | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH

    @field_validator('promo_code')
    @classmethod
    def strip_code(cls, value):
        if value is None:
            return None
        return value.strip() or None


class StaffOrderLine(BaseModel):
    product_id: int
    quantity: int
    price: Money


class StaffOrderRequest(ContactDetails):
    customer_id: int
    promo_id: int | None = None
    items: list[StaffOrderLine] = Field(min_length=1)


class PaymentRequest(BaseModel):
    amount: Money
    payment_method: PaymentMethod

    @model_validator(mode="after")
    def positive_amount(self):
        if self.amount <= 0:
            raise ValueError('Payment amount must be greater than 0')
        return self


class OrderLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: int
    product_name: str | None = None
    quantity: int
    price: Decimal
    subtotal: Decimal


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    amount: Decimal
    payment_method: PaymentMethod
    transaction_status: TransactionStatus
    payment_date: datetime | None = None


class BillSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    total_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    pay_status: BillStatus
    paid_at: datetime | None = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    user_id: int | None = None
    promo_id: int | None = None
    order_date: datetime
    total_amount: Decimal
    discount_amount: Decimal
    amount_due: Decimal
    pay_status: PayStatus
    fulfillment_status: FulfillmentStatus
    order_type: OrderType
    name: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    items: list[OrderLineResponse] = []
    payments: list[PaymentResponse] = []
    bill: BillSummary | None = None


class OrderPreviewResponse(BaseModel):
    customer_id: int
    items: list[OrderLineResponse]
    total_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    promo_id: int | None = None
    promo_code: str | None = None
    payment_method: PaymentMethod
    instant_settlement: bool
