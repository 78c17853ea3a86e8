from datetime import datetime
from sqlalchemy.orm import Session

from core.exceptions import OrderNotPayable
from models.bills import Bill
from models.enums import (
    BillStatus, FulfillmentStatus, PaymentMethod, PayStatus, TransactionStatus,
)
from models.orders import Order
from models.payments import Payment
from services.inventory_service import InventoryService
from utils.logger import get_logger
from utils.money import ZERO, to_money

logger = get_logger(__name__)


class SettlementService:
    """
    The pending -> paid transition of an order.

    Checkout with an instant method, a manual payment that covers the amount
    owed and a successful gateway callback all settle through `settle`.
    Nothing here commits; the caller owns the transaction.
    """

    @staticmethod
    def bill_for(db: Session, order: Order) -> Bill:
        """Returns the order's bill, creating an unpaid one if it has none."""
        if order.bill is not None:
            return order.bill

        bill = Bill(
            order_id=order.id,
            customer_id=order.customer_id,
            total_amount=order.total_amount,
            discount_amount=order.discount_amount,
            final_amount=order.amount_due,
            pay_status=BillStatus.UNPAID,
            name=order.name,
            address=order.address,
            phone=order.phone,
            email=order.email,
        )
        db.add(bill)
        order.bill = bill
        return bill


    @staticmethod
    def settle(db: Session, order: Order, method: PaymentMethod, transaction_no: str | None = None) -> Order:
        if order.pay_status == PayStatus.PAID:
            logger.info("Order already settled", extra={"order_id": order.id})
            return order
        if order.pay_status == PayStatus.CANCELED:
            raise OrderNotPayable("Order has been canceled", order_id=order.id)

        if not order.stock_deducted:
            InventoryService.deduct_order(db, order)

        now = datetime.now()
        order.pay_status = PayStatus.PAID
        order.fulfillment_status = FulfillmentStatus.CONFIRMED

        bill = SettlementService.bill_for(db, order)
        bill.pay_status = BillStatus.PAID
        bill.payment_method = method
        if bill.paid_at is None:
            bill.paid_at = now

        for payment in order.payments:
            if payment.transaction_status == TransactionStatus.PENDING:
                payment.transaction_status = TransactionStatus.SUCCESS
                if transaction_no:
                    payment.transaction_no = transaction_no

        # a paid order is always covered by its successful payments
        collected = sum(
            (to_money(p.amount) for p in order.payments if p.transaction_status == TransactionStatus.SUCCESS),
            ZERO,
        )
        outstanding = to_money(order.amount_due) - collected
        if outstanding > ZERO:
            db.add(Payment(
                order=order,
                amount=outstanding,
                payment_method=method,
                transaction_status=TransactionStatus.SUCCESS,
                transaction_no=transaction_no,
                payment_date=now,
            ))

        db.flush()

        logger.info(
            "Order settled",
            extra={"order_id": order.id, "payment_method": PaymentMethod(method).value, "amount": str(order.amount_due)}
        )
        return order
