from urllib.parse import urlencode
from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from core.config import settings
from middleware.rate_limiter import limiter, PAYMENT_LIMIT
from schemas.vnpay_schemas import VNPayCallbackResult, VNPayPaymentRequest, VNPayPaymentResponse
from services.order_service import OrderService
from services.vnpay_service import VNPayService
from utils.deps import db_dependency, customer_dependency
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    prefix="/api/customer/vnpay",
    tags=["vnpay"]
)


@router.post("/create-payment", response_model=VNPayPaymentResponse)
@limiter.limit(PAYMENT_LIMIT)
async def create_payment(request: Request, body: VNPayPaymentRequest, user: customer_dependency, db: db_dependency):
    order = OrderService.get_order(db, body.order_id, customer_id=user["user_id"])
    client_ip = request.client.host if request.client else "127.0.0.1"

    payment_url = VNPayService.create_payment_url(
        order, client_ip, order_info=body.order_info, return_url=body.return_url
    )
    return {"success": True, "payment_url": payment_url, "message": "Payment URL created"}


@router.get("/callback")
async def payment_callback(request: Request, db: db_dependency):
    """
    Return URL hit by the customer's browser after the gateway.

    Applies the result, then redirects to the frontend's payment result page.
    """
    result = VNPayService.process_callback(db, dict(request.query_params))

    query = urlencode({
        "success": str(result["success"]).lower(),
        "message": result["message"],
        "orderId": result["order_id"] or "",
        "transactionId": result["transaction_id"] or "",
        "amount": result["amount"] if result["amount"] is not None else "",
    })
    return RedirectResponse(f"{settings.FRONTEND_URL}/payment-result?{query}", status_code=302)


@router.get("/verify-payment", response_model=VNPayCallbackResult)
async def verify_payment(request: Request):
    """Signature check of a gateway return, without touching any order."""
    params = dict(request.query_params)
    is_valid = VNPayService.validate_signature(params)
    return {
        "success": is_valid,
        "message": "Signature valid" if is_valid else "Invalid signature",
        "order_id": params.get("vnp_TxnRef"),
        "transaction_id": params.get("vnp_TransactionNo"),
        "response_code": params.get("vnp_ResponseCode"),
        "transaction_status": params.get("vnp_TransactionStatus"),
        "pay_date": params.get("vnp_PayDate"),
    }
