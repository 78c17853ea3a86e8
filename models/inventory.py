from core.database import Base
from sqlalchemy import (Column, Integer, ForeignKey)
from sqlalchemy.orm import relationship
from .mixins import UpdatedAtMixin

class Inventory(Base, UpdatedAtMixin):
    __tablename__ = "inventory"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    product_id = Column(Integer, ForeignKey("products.id"), unique=True, nullable=False)

    #relationships
    product = relationship("Product", back_populates="inventory")

    quantity = Column(Integer, nullable=False, default=0)

    @property
    def product_name(self) -> str | None:
        return self.product.name if self.product else None
