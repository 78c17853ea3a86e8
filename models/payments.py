from core.database import Base
from sqlalchemy import (Column, Integer, String, ForeignKey, Numeric, DateTime)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .enums import PaymentMethod, TransactionStatus, enum_column

class Payment(Base):
    __tablename__ = "payments"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)

    #relationships
    order = relationship("Order", back_populates="payments")

    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(enum_column(PaymentMethod, "payment_method"), nullable=False)
    transaction_status = Column(
        enum_column(TransactionStatus, "transaction_status"), nullable=False, default=TransactionStatus.PENDING
    )
    transaction_no = Column(String)  # gateway reference
    payment_date = Column(DateTime, default=func.now())
