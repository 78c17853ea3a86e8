from core.database import Base
from sqlalchemy import (Column, Integer, ForeignKey, Numeric, DateTime, UniqueConstraint)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

class CartItem(Base):
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("customer_id", "product_id", name="uq_cart_customer_product"),
    )

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    #relationships
    customer = relationship("User", back_populates="cart_items")
    product = relationship("Product", back_populates="cart_items")

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)  # catalog price when added
    subtotal = Column(Numeric(10, 2), nullable=False)
    added_at = Column(DateTime, default=func.now())

    def set_quantity(self, quantity: int):
        # subtotal is derived, never edited on its own
        self.quantity = quantity
        self.subtotal = quantity * self.unit_price

    @property
    def product_name(self) -> str | None:
        return self.product.name if self.product else None
