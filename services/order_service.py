from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Session, joinedload, selectinload

from core.config import settings
from core.exceptions import (
    BusinessRuleViolation, CancellationWindowClosed, EmptyCart, InsufficientStock, InvalidOrderLine,
    OrderAlreadyCanceled, OrderNotFound, OwnershipError, PriceMismatch,
    ProductNotFound, ProductUnavailable,
)
from models.bills import Bill
from models.cart_items import CartItem
from models.enums import (
    BillStatus, FulfillmentStatus, OrderType, PayStatus,
    TransactionStatus, is_instant_settlement,
)
from models.order_items import OrderItem
from models.orders import Order
from models.payments import Payment
from models.products import Product
from schemas.order_schemas import CheckoutRequest, StaffOrderRequest
from services.cart_service import CartService
from services.inventory_service import InventoryService
from services.promotion_service import PromotionService
from services.settlement_service import SettlementService
from utils.logger import get_logger
from utils.money import ZERO, to_money

logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderLine:
    product_id: int
    quantity: int
    price: Decimal
    subtotal: Decimal
    product_name: str | None = None


def build_order_items(lines) -> list[OrderLine]:
    """
    Turns (product_id, quantity, price[, product_name]) tuples into order lines.

    The subtotal is always recomputed from quantity and price. The first
    invalid line rejects the whole batch.
    """
    result = []
    for index, line in enumerate(lines):
        product_id, quantity, price = line[0], line[1], line[2]
        product_name = line[3] if len(line) > 3 else None

        if product_id is None or product_id <= 0:
            raise InvalidOrderLine(f"Line {index}: invalid product id", line=index)
        if quantity is None or quantity <= 0:
            raise InvalidOrderLine(f"Line {index}: quantity must be greater than 0", line=index)
        if price is None or Decimal(str(price)) < 0:
            raise InvalidOrderLine(f"Line {index}: price must not be negative", line=index)

        price = to_money(price)
        result.append(OrderLine(
            product_id=product_id,
            quantity=quantity,
            price=price,
            subtotal=to_money(price * quantity),
            product_name=product_name,
        ))
    return result


@dataclass
class OrderDraft:
    customer_id: int
    lines: list
    total_amount: Decimal
    discount_amount: Decimal
    promo_id: int | None
    promo_code: str | None

    @property
    def final_amount(self) -> Decimal:
        return to_money(self.total_amount - self.discount_amount)


class OrderService:

    @staticmethod
    def _load_cart(db: Session, customer_id: int):
        items = CartService.get_items(db, customer_id)
        if not items:
            raise EmptyCart()
        return items


    @staticmethod
    def _check_stock(db: Session, cart_items):
        result = InventoryService.validate_cart_stock(db, cart_items)
        if result.deleted:
            missing = result.deleted[0]
            raise ProductUnavailable(missing["product_id"], missing["product_name"])
        if result.out_of_stock:
            short = result.out_of_stock[0]
            raise InsufficientStock(
                short["product_id"],
                short["product_name"],
                short["requested_quantity"],
                short["available_quantity"],
            )


    @staticmethod
    def _draft(db: Session, customer_id: int, request: CheckoutRequest) -> OrderDraft:
        cart_items = OrderService._load_cart(db, customer_id)
        OrderService._check_stock(db, cart_items)

        # Lines are priced at the current catalog price
        lines = build_order_items([
            (item.product_id, item.quantity, item.product.price, item.product.name)
            for item in cart_items
        ])
        total = to_money(sum((line.subtotal for line in lines), ZERO))

        draft = OrderDraft(
            customer_id=customer_id,
            lines=lines,
            total_amount=total,
            discount_amount=ZERO,
            promo_id=None,
            promo_code=None,
        )

        if request.promo_id is not None or request.promo_code:
            quote = PromotionService.evaluate(db, total, promo_id=request.promo_id, code=request.promo_code)
            draft.discount_amount = quote.discount_amount
            draft.promo_id = quote.promo_id
            draft.promo_code = quote.code

        return draft


    @staticmethod
    def preview(db: Session, customer_id: int, request: CheckoutRequest) -> dict:
        """What checkout would produce. Nothing is written."""
        draft = OrderService._draft(db, customer_id, request)
        return {
            "customer_id": customer_id,
            "items": [asdict(line) for line in draft.lines],
            "total_amount": draft.total_amount,
            "discount_amount": draft.discount_amount,
            "final_amount": draft.final_amount,
            "promo_id": draft.promo_id,
            "promo_code": draft.promo_code,
            "payment_method": request.payment_method,
            "instant_settlement": is_instant_settlement(request.payment_method),
        }


    @staticmethod
    def checkout(db: Session, customer_id: int, request: CheckoutRequest) -> Order:
        """
        Turns the customer's cart into an order.

        Flow:
        1. Load the cart and re-check stock
        2. Price the lines and evaluate the promotion, claiming one usage
        3. Create order, pending payment and unpaid bill
        4. Take the stock out of inventory
        5. Settle immediately for cash / e-wallet
        6. Empty the cart

        All of it commits together or not at all.
        """
        try:
            draft = OrderService._draft(db, customer_id, request)

            if draft.promo_id is not None:
                PromotionService.claim_usage(db, draft.promo_id)

            order = Order(
                customer_id=customer_id,
                promo_id=draft.promo_id,
                total_amount=draft.total_amount,
                discount_amount=draft.discount_amount,
                pay_status=PayStatus.PENDING,
                fulfillment_status=FulfillmentStatus.PENDING,
                order_type=OrderType.ONLINE,
                name=request.customer_name,
                address=request.customer_address,
                phone=request.customer_phone,
                email=request.customer_email,
            )
            order.items = [
                OrderItem(product_id=line.product_id, quantity=line.quantity, price=line.price, subtotal=line.subtotal)
                for line in draft.lines
            ]
            db.add(order)
            db.flush()

            db.add(Payment(
                order=order,
                amount=draft.final_amount,
                payment_method=request.payment_method,
                transaction_status=TransactionStatus.PENDING,
            ))
            SettlementService.bill_for(db, order)
            order.bill.payment_method = request.payment_method

            InventoryService.deduct_order(db, order)

            if is_instant_settlement(request.payment_method):
                SettlementService.settle(db, order, request.payment_method)

            db.query(CartItem).filter(CartItem.customer_id == customer_id).delete(synchronize_session="fetch")

            db.commit()
        except Exception:
            db.rollback()
            logger.warning(
                "Checkout rolled back",
                extra={"customer_id": customer_id, "payment_method": request.payment_method.value},
                exc_info=True,
            )
            raise

        db.refresh(order)
        logger.info(
            "Order placed",
            extra={
                "order_id": order.id,
                "customer_id": customer_id,
                "total_amount": str(order.total_amount),
                "discount_amount": str(order.discount_amount),
                "promo_id": order.promo_id,
                "pay_status": order.pay_status.value,
            }
        )
        return order


    @staticmethod
    def create_staff_order(db: Session, staff_id: int, request: StaffOrderRequest) -> Order:
        """
        Offline order entered by staff from explicit lines.

        Each submitted price must equal the catalog price. No payment, bill or
        stock movement happens until the order is settled.
        """
        try:
            lines = build_order_items([(line.product_id, line.quantity, line.price) for line in request.items])

            for line in lines:
                product = db.query(Product).filter(Product.id == line.product_id).first()
                if not product:
                    raise ProductNotFound(line.product_id)
                if product.is_deleted:
                    raise ProductUnavailable(product.id, product.name)
                if to_money(product.price) != line.price:
                    raise PriceMismatch(
                        f"Price for '{product.name}' does not match the catalog price",
                        product_id=product.id,
                        submitted=str(line.price),
                        catalog=str(to_money(product.price)),
                    )

            total = to_money(sum((line.subtotal for line in lines), ZERO))
            discount = ZERO
            if request.promo_id is not None:
                quote = PromotionService.evaluate(db, total, promo_id=request.promo_id)
                PromotionService.claim_usage(db, quote.promo_id)
                discount = quote.discount_amount

            order = Order(
                customer_id=request.customer_id,
                user_id=staff_id,
                promo_id=request.promo_id,
                total_amount=total,
                discount_amount=discount,
                pay_status=PayStatus.PENDING,
                fulfillment_status=FulfillmentStatus.PENDING,
                order_type=OrderType.OFFLINE,
                name=request.customer_name,
                address=request.customer_address,
                phone=request.customer_phone,
                email=request.customer_email,
            )
            order.items = [
                OrderItem(product_id=line.product_id, quantity=line.quantity, price=line.price, subtotal=line.subtotal)
                for line in lines
            ]
            db.add(order)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(order)
        logger.info(
            "Staff order created",
            extra={"order_id": order.id, "staff_id": staff_id, "customer_id": request.customer_id}
        )
        return order


    @staticmethod
    def _load_options():
        return (
            joinedload(Order.items).joinedload(OrderItem.product),
            selectinload(Order.payments),
            joinedload(Order.bill),
        )


    @staticmethod
    def get_order(db: Session, order_id: int, customer_id: int | None = None) -> Order:
        """Customers only see their own orders; a foreign order raises 403."""
        order = (
            db.query(Order)
            .options(*OrderService._load_options())
            .filter(Order.id == order_id)
            .first()
        )
        if not order:
            raise OrderNotFound()
        if customer_id is not None and order.customer_id != customer_id:
            logger.warning(
                "Order access denied",
                extra={"order_id": order_id, "customer_id": customer_id}
            )
            raise OwnershipError()
        return order


    @staticmethod
    def list_orders(db: Session, customer_id: int | None = None, pay_status: PayStatus | None = None,
                    skip: int = 0, limit: int = 50):
        query = db.query(Order).options(*OrderService._load_options())
        if customer_id is not None:
            query = query.filter(Order.customer_id == customer_id)
        if pay_status is not None:
            query = query.filter(Order.pay_status == pay_status)
        return query.order_by(Order.id.desc()).offset(skip).limit(limit).all()


    @staticmethod
    def cancel_order(db: Session, order_id: int, customer_id: int | None = None,
                     now: datetime | None = None) -> Order:
        """
        Cancels an order and puts its stock back.

        Pending orders can always be canceled. A paid order only on the day
        it was placed, and only by staff.
        """
        try:
            order = OrderService.get_order(db, order_id, customer_id=customer_id)

            if order.pay_status == PayStatus.CANCELED:
                raise OrderAlreadyCanceled()

            if order.pay_status != PayStatus.PENDING:
                if customer_id is not None:
                    raise BusinessRuleViolation("Only pending orders can be canceled", order_id=order_id)
                today = (now or datetime.now()).date()
                if order.order_date.date() != today:
                    raise CancellationWindowClosed()

            if order.stock_deducted:
                InventoryService.restore_order(db, order)

            order.pay_status = PayStatus.CANCELED
            order.fulfillment_status = FulfillmentStatus.CANCELLED

            bill = db.query(Bill).filter(Bill.order_id == order.id).first()
            if bill:
                bill.pay_status = BillStatus.CANCELLED

            for payment in order.payments:
                if payment.transaction_status == TransactionStatus.PENDING:
                    payment.transaction_status = TransactionStatus.FAILED

            if settings.RELEASE_PROMO_ON_CANCEL and order.promo_id is not None:
                PromotionService.release_usage(db, order.promo_id)

            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(order)
        logger.info(
            "Order canceled",
            extra={"order_id": order.id, "canceled_by_customer": customer_id is not None}
        )
        return order
