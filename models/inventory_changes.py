from core.database import Base
from sqlalchemy import (Column, Integer, String, ForeignKey)
from sqlalchemy.orm import relationship
from .enums import InventoryReason, enum_column
from .mixins import CreatedAtMixin

class InventoryChange(Base, CreatedAtMixin):
    """Append-only trail of every stock movement."""
    __tablename__ = "inventory_changes"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True)

    #relationships
    product = relationship("Product", back_populates="inventory_changes")

    change_amount = Column(Integer, nullable=False)
    reason = Column(enum_column(InventoryReason, "inventory_reason"), nullable=False)
    note = Column(String)
