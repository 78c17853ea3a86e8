from core.database import Base
from sqlalchemy import (Column, Integer, String, ForeignKey, Numeric, DateTime)
from sqlalchemy.orm import relationship
from .enums import BillStatus, PaymentMethod, enum_column
from .mixins import CreatedAtMixin

class Bill(Base, CreatedAtMixin):
    __tablename__ = "bills"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    order_id = Column(Integer, ForeignKey("orders.id"), unique=True, nullable=False)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    #relationships
    order = relationship("Order", back_populates="bill")
    customer = relationship("User", back_populates="bills")

    total_amount = Column(Numeric(10, 2), nullable=False)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    final_amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(enum_column(PaymentMethod, "bill_payment_method"))
    pay_status = Column(enum_column(BillStatus, "bill_status"), nullable=False, default=BillStatus.UNPAID)
    paid_at = Column(DateTime, nullable=True)

    name = Column(String)
    address = Column(String)
    phone = Column(String)
    email = Column(String)
