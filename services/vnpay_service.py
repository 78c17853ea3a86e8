import hmac
import hashlib
from datetime import datetime
from decimal import Decimal, InvalidOperation
from urllib.parse import urlencode
from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import OrderNotFound, OrderNotPayable, StoreError
from models.enums import PaymentMethod, PayStatus, TransactionStatus
from models.orders import Order
from services.settlement_service import SettlementService
from utils.logger import get_logger, sanitize_log_data
from utils.money import to_money

logger = get_logger(__name__)


HASH_FIELDS = {"vnp_SecureHash", "vnp_SecureHashType"}

RESPONSE_MESSAGES = {
    "00": "Transaction successful",
    "07": "Amount debited; the transaction is flagged as suspicious",
    "09": "Card or account is not registered for internet banking",
    "10": "Card or account verification failed more than 3 times",
    "11": "Payment window expired, please try again",
    "12": "Card or account is locked",
    "13": "Wrong one-time password",
    "24": "Transaction canceled by the customer",
    "51": "Insufficient balance",
    "65": "Daily transaction limit exceeded",
    "75": "Paying bank is under maintenance",
    "79": "Wrong payment password entered too many times",
}


def response_message(code: str | None) -> str:
    return RESPONSE_MESSAGES.get(code, "Transaction failed")


def sign(params: dict, secret: str) -> str:
    """HMAC-SHA512 over the sorted, url-encoded, non-empty parameters."""
    query = urlencode(sorted((k, v) for k, v in params.items() if v not in (None, "")))
    return hmac.new(secret.encode("utf-8"), query.encode("utf-8"), hashlib.sha512).hexdigest()


class VNPayService:

    @staticmethod
    def create_payment_url(order: Order, ip_address: str, order_info: str | None = None,
                           return_url: str | None = None, now: datetime | None = None) -> str:
        if order.pay_status == PayStatus.PAID:
            raise OrderNotPayable("Order has already been paid", order_id=order.id)
        if order.pay_status == PayStatus.CANCELED:
            raise OrderNotPayable("Order has been canceled", order_id=order.id)

        params = {
            "vnp_Version": "2.1.0",
            "vnp_Command": "pay",
            "vnp_TmnCode": settings.VNPAY_TMN_CODE,
            "vnp_Amount": str(int(to_money(order.amount_due) * 100)),
            "vnp_CreateDate": (now or datetime.now()).strftime("%Y%m%d%H%M%S"),
            "vnp_CurrCode": "VND",
            "vnp_IpAddr": ip_address or "127.0.0.1",
            "vnp_Locale": "vn",
            "vnp_OrderInfo": order_info or f"Payment for order {order.id}",
            "vnp_OrderType": "other",
            "vnp_ReturnUrl": return_url or settings.VNPAY_RETURN_URL,
            "vnp_TxnRef": str(order.id),
        }
        params = {k: v for k, v in params.items() if v}

        query = urlencode(sorted(params.items()))
        secure_hash = sign(params, settings.VNPAY_HASH_SECRET)

        logger.info(
            "VNPay payment URL created",
            extra={"order_id": order.id, "amount": params["vnp_Amount"]}
        )
        return f"{settings.VNPAY_URL}?{query}&vnp_SecureHash={secure_hash}"


    @staticmethod
    def validate_signature(params: dict) -> bool:
        secure_hash = params.get("vnp_SecureHash")
        if not secure_hash:
            return False

        signed = {k: v for k, v in params.items() if k.startswith("vnp_") and k not in HASH_FIELDS}
        expected = sign(signed, settings.VNPAY_HASH_SECRET)
        return hmac.compare_digest(expected.lower(), secure_hash.lower())


    @staticmethod
    def process_callback(db: Session, params: dict) -> dict:
        """
        Handles the gateway's signed return.

        The amount must match what the order owes. A successful response
        settles the order (a repeated callback for an already paid order is a
        no-op). Any other response marks the pending gateway payment failed
        and leaves the order pending.
        """
        logger.info("VNPay callback received", extra={"params": sanitize_log_data(params)})

        response_code = params.get("vnp_ResponseCode")
        transaction_status = params.get("vnp_TransactionStatus")
        txn_ref = params.get("vnp_TxnRef")
        transaction_no = params.get("vnp_TransactionNo")

        try:
            amount = Decimal(params.get("vnp_Amount") or "0") / 100
        except InvalidOperation:
            amount = None

        result = {
            "success": False,
            "message": "Invalid signature",
            "order_id": txn_ref,
            "transaction_id": transaction_no,
            "amount": amount,
            "response_code": response_code,
            "transaction_status": transaction_status,
            "pay_date": params.get("vnp_PayDate"),
        }

        if not VNPayService.validate_signature(params):
            logger.warning("VNPay callback with invalid signature", extra={"order_id": txn_ref})
            return result

        order = db.query(Order).filter(Order.id == int(txn_ref)).first() if (txn_ref or "").isdigit() else None
        if order is None:
            result["message"] = OrderNotFound().detail
            return result

        if amount is None or to_money(amount) != to_money(order.amount_due):
            logger.warning(
                "VNPay callback amount does not match the order",
                extra={"order_id": order.id, "amount": str(amount), "amount_due": str(order.amount_due)}
            )
            result["message"] = "Amount mismatch"
            return result

        try:
            if response_code == "00" and transaction_status == "00":
                method = next(
                    (p.payment_method for p in order.payments if p.transaction_status == TransactionStatus.PENDING),
                    PaymentMethod.CARD,
                )
                SettlementService.settle(db, order, method, transaction_no=transaction_no)
                result["success"] = True
                result["message"] = response_message(response_code)
            else:
                for payment in order.payments:
                    if payment.transaction_status == TransactionStatus.PENDING:
                        payment.transaction_status = TransactionStatus.FAILED
                        payment.transaction_no = transaction_no
                result["message"] = response_message(response_code)
            db.commit()
        except StoreError as exc:
            db.rollback()
            logger.warning(
                "VNPay callback could not be applied",
                extra={"order_id": order.id, "reason": exc.detail}
            )
            result["success"] = False
            result["message"] = exc.detail
            return result
        except Exception:
            db.rollback()
            raise

        logger.info(
            "VNPay callback processed",
            extra={"order_id": order.id, "response_code": response_code, "success": result["success"]}
        )
        return result
