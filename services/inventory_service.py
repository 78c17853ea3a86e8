from dataclasses import dataclass, field
from sqlalchemy.orm import Session, joinedload

from core.exceptions import InsufficientStock, NotFound, ProductNotFound
from models.enums import InventoryReason
from models.inventory import Inventory
from models.inventory_changes import InventoryChange
from models.products import Product
from models.orders import Order
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class StockValidationResult:
    is_valid: bool = True
    out_of_stock: list = field(default_factory=list)
    deleted: list = field(default_factory=list)


class InventoryService:

    @staticmethod
    def validate_cart_stock(db: Session, items) -> StockValidationResult:
        """
        Advisory stock check for a list of (product_id, quantity) requests.

        A soft-deleted product is reported under `deleted`; a missing
        inventory row or a short quantity under `out_of_stock`. Nothing is
        written, so checkout re-checks inside its own transaction.
        """
        result = StockValidationResult()

        for item in items:
            product_id, quantity = item.product_id, item.quantity
            inventory = (
                db.query(Inventory)
                .options(joinedload(Inventory.product))
                .filter(Inventory.product_id == product_id)
                .first()
            )
            product = inventory.product if inventory else db.get(Product, product_id)

            if product is not None and product.is_deleted:
                result.deleted.append({
                    "product_id": product_id,
                    "product_name": product.name,
                    "quantity": quantity,
                })
                continue

            if inventory is None or inventory.quantity < quantity:
                result.out_of_stock.append({
                    "product_id": product_id,
                    "product_name": product.name if product else "Unknown product",
                    "requested_quantity": quantity,
                    "available_quantity": inventory.quantity if inventory else 0,
                })

        result.is_valid = not result.out_of_stock and not result.deleted
        return result


    @staticmethod
    def deduct(db: Session, product_id: int, quantity: int, order_id: int | None = None, note: str | None = None):
        """
        Take `quantity` units out of stock.

        The decrement is a single guarded UPDATE (quantity >= requested), so
        two concurrent checkouts can never both take the last units. Does
        not commit.
        """
        updated = (
            db.query(Inventory)
            .filter(Inventory.product_id == product_id, Inventory.quantity >= quantity)
            .update({Inventory.quantity: Inventory.quantity - quantity}, synchronize_session="fetch")
        )

        if updated == 0:
            inventory = db.query(Inventory).filter(Inventory.product_id == product_id).first()
            product = db.get(Product, product_id)
            logger.warning(
                "Stock decrement rejected",
                extra={"product_id": product_id, "requested": quantity, "order_id": order_id}
            )
            raise InsufficientStock(
                product_id,
                product.name if product else "Unknown product",
                quantity,
                inventory.quantity if inventory else 0,
            )

        db.add(InventoryChange(
            product_id=product_id,
            order_id=order_id,
            change_amount=quantity,
            reason=InventoryReason.DECREMENT,
            note=note,
        ))


    @staticmethod
    def restore(db: Session, product_id: int, quantity: int, order_id: int | None = None, note: str | None = None):
        """Put `quantity` units back into stock. Does not commit."""
        updated = (
            db.query(Inventory)
            .filter(Inventory.product_id == product_id)
            .update({Inventory.quantity: Inventory.quantity + quantity}, synchronize_session="fetch")
        )
        if updated == 0:
            raise NotFound(f"No inventory record for product {product_id}", product_id=product_id)

        db.add(InventoryChange(
            product_id=product_id,
            order_id=order_id,
            change_amount=quantity,
            reason=InventoryReason.INCREMENT,
            note=note,
        ))


    @staticmethod
    def deduct_order(db: Session, order: Order):
        for item in order.items:
            InventoryService.deduct(db, item.product_id, item.quantity, order_id=order.id, note="order")
        order.stock_deducted = True


    @staticmethod
    def restore_order(db: Session, order: Order):
        for item in order.items:
            InventoryService.restore(db, item.product_id, item.quantity, order_id=order.id, note="order canceled")
        order.stock_deducted = False


    @staticmethod
    def list_inventory(db: Session):
        return (
            db.query(Inventory)
            .options(joinedload(Inventory.product))
            .order_by(Inventory.product_id)
            .all()
        )


    @staticmethod
    def get_by_product(db: Session, product_id: int) -> Inventory:
        inventory = (
            db.query(Inventory)
            .options(joinedload(Inventory.product))
            .filter(Inventory.product_id == product_id)
            .first()
        )
        if not inventory:
            raise NotFound(f"No inventory record for product {product_id}", product_id=product_id)
        return inventory


    @staticmethod
    def set_quantity(db: Session, product_id: int, quantity: int, note: str | None = None) -> Inventory:
        """Staff stock adjustment. The difference is written to the ledger."""
        product = db.get(Product, product_id)
        if not product:
            raise ProductNotFound(product_id)

        inventory = db.query(Inventory).filter(Inventory.product_id == product_id).first()
        if inventory is None:
            inventory = Inventory(product_id=product_id, quantity=0)
            db.add(inventory)
            db.flush()

        delta = quantity - inventory.quantity
        inventory.quantity = quantity

        if delta:
            db.add(InventoryChange(
                product_id=product_id,
                change_amount=abs(delta),
                reason=InventoryReason.INCREMENT if delta > 0 else InventoryReason.DECREMENT,
                note=note or "manual adjustment",
            ))

        db.commit()
        db.refresh(inventory)

        logger.info(
            "Inventory adjusted",
            extra={"product_id": product_id, "quantity": quantity, "delta": delta}
        )
        return inventory
