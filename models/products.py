from core.database import Base
from sqlalchemy import (Column, Integer, String, Numeric, Boolean)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin, UpdatedAtMixin

class Product(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "products"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #relationships
    inventory = relationship("Inventory", back_populates="product", uselist=False, cascade="all, delete-orphan")
    order_items = relationship("OrderItem", back_populates="product")
    cart_items = relationship("CartItem", back_populates="product")
    inventory_changes = relationship("InventoryChange", back_populates="product")

    name = Column(String, nullable=False)
    description = Column(String)
    price = Column(Numeric(10, 2), nullable=False)
    unit = Column(String)
    barcode = Column(String, unique=True)
    # Soft delete: kept for order history, hidden from the catalog
    is_deleted = Column(Boolean, default=False, nullable=False)

    @property
    def available_quantity(self) -> int:
        return self.inventory.quantity if self.inventory else 0
