from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.enums import DiscountType, PromotionStatus
from schemas.common import Money


class PromotionBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    description: str | None = None
    discount_type: DiscountType
    discount_value: Money
    start_date: date
    end_date: date
    min_order_amount: Money = Decimal("0.00")
    usage_limit: int = Field(default=0, ge=0)
    status: PromotionStatus = PromotionStatus.ACTIVE

    @field_validator('code')
    @classmethod
    def normalize_code(cls, value):
        return value.strip().upper()

    @model_validator(mode="after")
    def check_rules(self):
        if self.end_date < self.start_date:
            raise ValueError('end_date must be on or after start_date')
        if self.discount_value <= 0:
            raise ValueError('discount_value must be greater than 0')
        if self.discount_type == DiscountType.PERCENT and not (1 <= self.discount_value <= 100):
            raise ValueError('percent discount_value must be between 1 and 100')
        return self


class PromotionCreate(PromotionBase):
    pass


class PromotionUpdate(PromotionBase):
    pass


class PromotionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    description: str | None = None
    discount_type: DiscountType
    discount_value: Decimal
    start_date: date
    end_date: date
    min_order_amount: Decimal
    usage_limit: int
    used_count: int
    status: PromotionStatus
    created_at: datetime | None = None


class ApplyPromoRequest(BaseModel):
    promo_code: str = Field(min_length=1)
    total_amount: Money


class ApplyPromoResponse(BaseModel):
    promo_id: int
    promo_code: str
    discount_type: DiscountType
    discount_value: Decimal
    discount_amount: Decimal
    final_amount: Decimal
