from decimal import Decimal
from sqlalchemy.orm import Session

from core.exceptions import OrderNotPayable, PaymentExceedsTotal
from models.enums import PaymentMethod, PayStatus, TransactionStatus, is_instant_settlement
from models.payments import Payment
from services.order_service import OrderService
from services.settlement_service import SettlementService
from utils.logger import get_logger
from utils.money import ZERO, to_money

logger = get_logger(__name__)


class PaymentService:

    @staticmethod
    def amount_paid(order) -> Decimal:
        """Sum of payments that have not failed, including still-pending ones."""
        return to_money(sum(
            (payment.amount for payment in order.payments
             if payment.transaction_status != TransactionStatus.FAILED),
            ZERO,
        ))


    @staticmethod
    def record_payment(db: Session, order_id: int, amount: Decimal, method: PaymentMethod,
                       customer_id: int | None = None):
        """
        Records a (possibly partial) payment against a pending order.

        Cash and e-wallet payments are confirmed on the spot and settle the
        order. Other methods stay pending until the amount owed is covered,
        at which point the order settles too.
        """
        amount = to_money(amount)
        try:
            order = OrderService.get_order(db, order_id, customer_id=customer_id)

            if order.pay_status != PayStatus.PENDING:
                raise OrderNotPayable(
                    f"Order is {order.pay_status.value} and cannot take payments",
                    order_id=order_id,
                )

            amount_due = to_money(order.amount_due)
            paid = PaymentService.amount_paid(order)
            if paid + amount > amount_due:
                raise PaymentExceedsTotal(to_money(amount_due - paid))

            instant = is_instant_settlement(method)
            payment = Payment(
                order=order,
                amount=amount,
                payment_method=method,
                transaction_status=TransactionStatus.SUCCESS if instant else TransactionStatus.PENDING,
            )
            db.add(payment)
            db.flush()

            if instant or paid + amount == amount_due:
                SettlementService.settle(db, order, method)

            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(payment)
        logger.info(
            "Payment recorded",
            extra={
                "order_id": order_id,
                "payment_id": payment.id,
                "amount": str(amount),
                "payment_method": PaymentMethod(method).value,
                "settled": order.pay_status == PayStatus.PAID,
            }
        )
        return payment
