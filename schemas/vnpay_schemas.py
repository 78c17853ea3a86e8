from decimal import Decimal
from pydantic import BaseModel


class VNPayPaymentRequest(BaseModel):
    order_id: int
    order_info: str | None = None
    return_url: str | None = None


class VNPayPaymentResponse(BaseModel):
    success: bool
    payment_url: str | None = None
    message: str


class VNPayCallbackResult(BaseModel):
    success: bool
    message: str
    order_id: str | None = None
    transaction_id: str | None = None
    amount: Decimal | None = None
    response_code: str | None = None
    transaction_status: str | None = None
    pay_date: str | None = None
