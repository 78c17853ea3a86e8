from decimal import Decimal
from sqlalchemy.orm import Session, joinedload

from core.exceptions import InvalidQuantity, NotFound, ProductNotFound, ProductUnavailable
from models.cart_items import CartItem
from models.products import Product
from utils.logger import get_logger
from utils.money import ZERO, to_money

logger = get_logger(__name__)


class CartService:
    """A customer's cart is the set of their cart_items rows."""

    @staticmethod
    def get_items(db: Session, customer_id: int):
        return (
            db.query(CartItem)
            .options(joinedload(CartItem.product))
            .filter(CartItem.customer_id == customer_id)
            .order_by(CartItem.id)
            .all()
        )


    @staticmethod
    def total(items) -> Decimal:
        return to_money(sum((item.subtotal for item in items), ZERO))


    @staticmethod
    def add_item(db: Session, customer_id: int, product_id: int, quantity: int = 1) -> CartItem:
        """
        Adds a product to the cart, merging with an existing line.

        The unit price is the catalog price at the time the product is first
        added.
        """
        if quantity <= 0:
            raise InvalidQuantity("Quantity must be greater than 0")

        product = db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise ProductNotFound(product_id)
        if product.is_deleted:
            raise ProductUnavailable(product.id, product.name)

        item = (
            db.query(CartItem)
            .filter(CartItem.customer_id == customer_id, CartItem.product_id == product_id)
            .first()
        )
        if item:
            item.set_quantity(item.quantity + quantity)
        else:
            item = CartItem(customer_id=customer_id, product_id=product_id, unit_price=product.price)
            item.set_quantity(quantity)
            db.add(item)

        db.commit()
        db.refresh(item)

        logger.info(
            "Cart item added",
            extra={"customer_id": customer_id, "product_id": product_id, "quantity": item.quantity}
        )
        return item


    @staticmethod
    def _get_owned_item(db: Session, customer_id: int, item_id: int) -> CartItem:
        item = (
            db.query(CartItem)
            .filter(CartItem.id == item_id, CartItem.customer_id == customer_id)
            .first()
        )
        if not item:
            raise NotFound("Cart item not found", item_id=item_id)
        return item


    @staticmethod
    def update_quantity(db: Session, customer_id: int, item_id: int, quantity: int) -> CartItem:
        if quantity <= 0:
            raise InvalidQuantity("Quantity must be greater than 0")

        item = CartService._get_owned_item(db, customer_id, item_id)
        item.set_quantity(quantity)
        db.commit()
        db.refresh(item)
        return item


    @staticmethod
    def remove_item(db: Session, customer_id: int, item_id: int):
        item = CartService._get_owned_item(db, customer_id, item_id)
        db.delete(item)
        db.commit()


    @staticmethod
    def clear(db: Session, customer_id: int):
        deleted = db.query(CartItem).filter(CartItem.customer_id == customer_id).delete()
        db.commit()
        logger.info("Cart cleared", extra={"customer_id": customer_id, "items": deleted})
