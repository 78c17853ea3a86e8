from core.database import Base
from sqlalchemy import (Column, Integer, String, Numeric, Date)
from sqlalchemy.orm import relationship
from .enums import DiscountType, PromotionStatus, enum_column
from .mixins import CreatedAtMixin

class Promotion(Base, CreatedAtMixin):
    __tablename__ = "promotions"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #relationships
    orders = relationship("Order", back_populates="promotion")

    code = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(String)
    discount_type = Column(enum_column(DiscountType, "discount_type"), nullable=False)
    discount_value = Column(Numeric(10, 2), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    min_order_amount = Column(Numeric(10, 2), nullable=False, default=0)
    usage_limit = Column(Integer, nullable=False, default=0)
    used_count = Column(Integer, nullable=False, default=0)
    status = Column(enum_column(PromotionStatus, "promotion_status"), nullable=False, default=PromotionStatus.ACTIVE)
