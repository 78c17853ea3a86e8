from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from sqlalchemy import func
from sqlalchemy.orm import Session

from core.exceptions import (
    Conflict, PromotionNotFound, PromotionInactive, PromotionNotYetValid,
    PromotionExpired, PromotionUsageExceeded, PromotionBelowMinimum,
)
from models.enums import DiscountType, PromotionStatus
from models.orders import Order
from models.promotions import Promotion
from schemas.promotion_schemas import PromotionCreate, PromotionUpdate
from utils.logger import get_logger
from utils.money import percent_of, to_money

logger = get_logger(__name__)


@dataclass(frozen=True)
class PromotionQuote:
    promo_id: int
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    discount_amount: Decimal


def compute_discount(discount_type: DiscountType, discount_value: Decimal, order_total: Decimal) -> Decimal:
    """Discount for `order_total`. A fixed discount never exceeds the total."""
    if DiscountType(discount_type) == DiscountType.PERCENT:
        return percent_of(order_total, discount_value)
    return to_money(min(Decimal(discount_value), Decimal(order_total)))


class PromotionService:

    @staticmethod
    def _find(db: Session, promo_id: int | None = None, code: str | None = None) -> Promotion | None:
        query = db.query(Promotion)
        if promo_id is not None:
            return query.filter(Promotion.id == promo_id).first()
        if code:
            return query.filter(func.upper(Promotion.code) == code.strip().upper()).first()
        return None


    @staticmethod
    def evaluate(db: Session, order_total: Decimal, promo_id: int | None = None,
                 code: str | None = None, today: date | None = None) -> PromotionQuote:
        """
        Checks a promotion against an order total and prices the discount.

        Checks run in a fixed order and the first failure is raised:
        existence, status, validity window, usage limit, minimum order
        amount. Read-only; claiming a usage is a separate step.
        """
        promotion = PromotionService._find(db, promo_id=promo_id, code=code)
        if promotion is None:
            raise PromotionNotFound()

        if promotion.status != PromotionStatus.ACTIVE:
            raise PromotionInactive()

        today = today or date.today()
        if promotion.start_date > today:
            raise PromotionNotYetValid()
        if promotion.end_date < today:
            raise PromotionExpired()

        if promotion.usage_limit <= 0 or promotion.used_count >= promotion.usage_limit:
            raise PromotionUsageExceeded()

        order_total = to_money(order_total)
        if order_total < promotion.min_order_amount:
            raise PromotionBelowMinimum(to_money(promotion.min_order_amount))

        return PromotionQuote(
            promo_id=promotion.id,
            code=promotion.code,
            discount_type=DiscountType(promotion.discount_type),
            discount_value=to_money(promotion.discount_value),
            discount_amount=compute_discount(promotion.discount_type, promotion.discount_value, order_total),
        )


    @staticmethod
    def claim_usage(db: Session, promo_id: int):
        """
        Takes one usage of the promotion. Guarded UPDATE, does not commit.

        Two checkouts racing for the last usage cannot both succeed: the
        loser's update matches no row.
        """
        updated = (
            db.query(Promotion)
            .filter(Promotion.id == promo_id, Promotion.used_count < Promotion.usage_limit)
            .update({Promotion.used_count: Promotion.used_count + 1}, synchronize_session="fetch")
        )
        if updated == 0:
            logger.warning("Promotion usage claim rejected", extra={"promo_id": promo_id})
            raise PromotionUsageExceeded()


    @staticmethod
    def release_usage(db: Session, promo_id: int):
        (
            db.query(Promotion)
            .filter(Promotion.id == promo_id, Promotion.used_count > 0)
            .update({Promotion.used_count: Promotion.used_count - 1}, synchronize_session="fetch")
        )


    @staticmethod
    def apply(db: Session, code: str, total_amount: Decimal) -> dict:
        quote = PromotionService.evaluate(db, total_amount, code=code)
        return {
            "promo_id": quote.promo_id,
            "promo_code": quote.code,
            "discount_type": quote.discount_type,
            "discount_value": quote.discount_value,
            "discount_amount": quote.discount_amount,
            "final_amount": to_money(Decimal(total_amount) - quote.discount_amount),
        }


    # Admin

    @staticmethod
    def list_promotions(db: Session):
        return db.query(Promotion).order_by(Promotion.id.desc()).all()


    @staticmethod
    def get_promotion(db: Session, promo_id: int) -> Promotion:
        promotion = PromotionService._find(db, promo_id=promo_id)
        if promotion is None:
            raise PromotionNotFound()
        return promotion


    @staticmethod
    def _ensure_code_free(db: Session, code: str, exclude_id: int | None = None):
        query = db.query(Promotion).filter(func.upper(Promotion.code) == code.upper())
        if exclude_id is not None:
            query = query.filter(Promotion.id != exclude_id)
        if query.first():
            raise Conflict(f"Promotion code '{code}' already exists", code=code)


    @staticmethod
    def create_promotion(db: Session, request: PromotionCreate) -> Promotion:
        PromotionService._ensure_code_free(db, request.code)

        promotion = Promotion(**request.model_dump(), used_count=0)
        db.add(promotion)
        db.commit()
        db.refresh(promotion)

        logger.info("Promotion created", extra={"promo_id": promotion.id, "code": promotion.code})
        return promotion


    @staticmethod
    def update_promotion(db: Session, promo_id: int, request: PromotionUpdate) -> Promotion:
        promotion = PromotionService.get_promotion(db, promo_id)
        PromotionService._ensure_code_free(db, request.code, exclude_id=promo_id)

        if promotion.used_count > 0:
            if (DiscountType(request.discount_type) != DiscountType(promotion.discount_type)
                    or request.discount_value != to_money(promotion.discount_value)):
                raise Conflict(
                    "Discount type and value cannot change once the promotion has been used",
                    promo_id=promo_id,
                )
        if request.usage_limit < promotion.used_count:
            raise Conflict(
                f"usage_limit cannot be lower than the current usage ({promotion.used_count})",
                promo_id=promo_id,
            )

        for key, value in request.model_dump().items():
            setattr(promotion, key, value)

        db.commit()
        db.refresh(promotion)

        logger.info("Promotion updated", extra={"promo_id": promo_id})
        return promotion


    @staticmethod
    def delete_promotion(db: Session, promo_id: int):
        promotion = PromotionService.get_promotion(db, promo_id)

        referenced = db.query(Order.id).filter(Order.promo_id == promo_id).first()
        if promotion.used_count > 0 or referenced:
            raise Conflict("A promotion that has been used cannot be deleted", promo_id=promo_id)

        db.delete(promotion)
        db.commit()
        logger.info("Promotion deleted", extra={"promo_id": promo_id})
