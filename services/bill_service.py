from datetime import datetime
from decimal import Decimal
from sqlalchemy import func
from sqlalchemy.orm import Session

from core.exceptions import BillNotFound, BusinessRuleViolation, DuplicateBill, OwnershipError
from models.bills import Bill
from models.enums import BillStatus, PaymentMethod
from services.order_service import OrderService
from services.settlement_service import SettlementService
from utils.logger import get_logger
from utils.money import ZERO, to_money

logger = get_logger(__name__)


class BillService:

    @staticmethod
    def _check_owner(bill: Bill, customer_id: int | None):
        if customer_id is not None and bill.customer_id != customer_id:
            raise OwnershipError()


    @staticmethod
    def get_bill(db: Session, bill_id: int, customer_id: int | None = None) -> Bill:
        bill = db.query(Bill).filter(Bill.id == bill_id).first()
        if not bill:
            raise BillNotFound()
        BillService._check_owner(bill, customer_id)
        return bill


    @staticmethod
    def get_by_order(db: Session, order_id: int, customer_id: int | None = None) -> Bill:
        bill = db.query(Bill).filter(Bill.order_id == order_id).first()
        if not bill:
            raise BillNotFound()
        BillService._check_owner(bill, customer_id)
        return bill


    @staticmethod
    def list_for_customer(db: Session, customer_id: int, status: BillStatus | None = None):
        query = db.query(Bill).filter(Bill.customer_id == customer_id)
        if status is not None:
            query = query.filter(Bill.pay_status == status)
        return query.order_by(Bill.id.desc()).all()


    @staticmethod
    def create_from_order(db: Session, order_id: int) -> Bill:
        """Staff: issue the bill of an order that has none yet."""
        order = OrderService.get_order(db, order_id)
        if order.bill is not None:
            raise DuplicateBill()

        bill = SettlementService.bill_for(db, order)
        db.commit()
        db.refresh(bill)

        logger.info("Bill created", extra={"bill_id": bill.id, "order_id": order_id})
        return bill


    @staticmethod
    def update_status(db: Session, bill_id: int, status: BillStatus) -> Bill:
        """
        Staff: move a bill to a new status through its order.

        Marking a bill paid settles the order. Cancelling it cancels the order.
        Paid and cancelled bills are final.
        """
        bill = BillService.get_bill(db, bill_id)
        status = BillStatus(status)

        if bill.pay_status == status:
            return bill
        if bill.pay_status == BillStatus.PAID:
            raise BusinessRuleViolation("A paid bill cannot change status", bill_id=bill_id)
        if bill.pay_status == BillStatus.CANCELLED:
            raise BusinessRuleViolation("A cancelled bill cannot change status", bill_id=bill_id)

        if status == BillStatus.CANCELLED:
            OrderService.cancel_order(db, bill.order_id)
        else:
            try:
                SettlementService.settle(db, bill.order, bill.payment_method or PaymentMethod.CASH)
                db.commit()
            except Exception:
                db.rollback()
                raise

        db.refresh(bill)

        logger.info("Bill status updated", extra={"bill_id": bill_id, "pay_status": status.value})
        return bill


    @staticmethod
    def cancel(db: Session, bill_id: int) -> Bill:
        return BillService.update_status(db, bill_id, BillStatus.CANCELLED)


    @staticmethod
    def revenue(db: Session, start: datetime | None = None, end: datetime | None = None) -> Decimal:
        """Sum of final amounts of paid bills, optionally bounded by paid_at."""
        query = db.query(func.coalesce(func.sum(Bill.final_amount), 0)).filter(Bill.pay_status == BillStatus.PAID)
        if start is not None:
            query = query.filter(Bill.paid_at >= start)
        if end is not None:
            query = query.filter(Bill.paid_at <= end)
        return to_money(query.scalar() or ZERO)
