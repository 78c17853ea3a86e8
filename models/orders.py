from core.database import Base
from sqlalchemy.orm import relationship
from datetime import datetime
from sqlalchemy import (Column, Integer, String, Boolean, ForeignKey, Numeric, DateTime)
from .enums import PayStatus, FulfillmentStatus, OrderType, enum_column
from .mixins import UpdatedAtMixin

class Order(Base, UpdatedAtMixin):
    __tablename__ = "orders"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # staff member for offline orders
    promo_id = Column(Integer, ForeignKey("promotions.id"), nullable=True)

    #relationships
    customer = relationship("User", back_populates="orders", foreign_keys=[customer_id])
    staff = relationship("User", foreign_keys=[user_id])
    promotion = relationship("Promotion", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="order", order_by="Payment.id")
    bill = relationship("Bill", back_populates="order", uselist=False)

    order_date = Column(DateTime, default=datetime.now, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)  # before discount
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    pay_status = Column(enum_column(PayStatus, "pay_status"), nullable=False, default=PayStatus.PENDING)
    fulfillment_status = Column(
        enum_column(FulfillmentStatus, "fulfillment_status"), nullable=False, default=FulfillmentStatus.PENDING
    )
    order_type = Column(enum_column(OrderType, "order_type"), nullable=False, default=OrderType.ONLINE)
    # True once the order's quantities have left the inventory
    stock_deducted = Column(Boolean, nullable=False, default=False)

    # Contact / delivery details
    name = Column(String)
    address = Column(String)
    phone = Column(String)
    email = Column(String)

    @property
    def amount_due(self):
        return self.total_amount - (self.discount_amount or 0)
