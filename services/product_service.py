from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError

from core.exceptions import Conflict, ProductNotFound
from models.inventory import Inventory
from models.products import Product
from schemas.product_schemas import ProductCreate
from services.cache import ProductCountCache
from utils.logger import get_logger

logger = get_logger(__name__)


class ProductService:

    @staticmethod
    def list_active(db: Session, skip: int = 0, limit: int = 50):
        return (
            db.query(Product)
            .options(joinedload(Product.inventory))
            .filter(Product.is_deleted == False)
            .order_by(Product.id)
            .offset(skip)
            .limit(limit)
            .all()
        )


    @staticmethod
    def count_active(db: Session, cache: ProductCountCache) -> int:
        return cache.get_or_load(
            lambda: db.query(Product).filter(Product.is_deleted == False).count()
        )


    @staticmethod
    def get_product(db: Session, product_id: int) -> Product:
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise ProductNotFound(product_id)
        return product


    @staticmethod
    def create_product(db: Session, request: ProductCreate, cache: ProductCountCache) -> Product:
        """Creates the product together with its inventory row."""
        product = Product(
            name=request.name,
            description=request.description,
            price=request.price,
            unit=request.unit,
            barcode=request.barcode,
        )
        product.inventory = Inventory(quantity=request.initial_quantity)

        db.add(product)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise Conflict("A product with this barcode already exists", barcode=request.barcode)

        db.refresh(product)
        cache.invalidate()

        logger.info(
            "Product created",
            extra={"product_id": product.id, "initial_quantity": request.initial_quantity}
        )
        return product


    @staticmethod
    def soft_delete(db: Session, product_id: int, cache: ProductCountCache):
        product = ProductService.get_product(db, product_id)
        if product.is_deleted:
            return

        product.is_deleted = True
        db.commit()
        cache.invalidate()

        logger.info("Product soft-deleted", extra={"product_id": product_id})
