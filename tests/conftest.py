import os

# Settings are read at import time
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("LOG_DIR", "logs")
os.environ.setdefault("VNPAY_TMN_CODE", "TESTTMN1")
os.environ.setdefault("VNPAY_HASH_SECRET", "test-hash-secret")

import pytest
from datetime import date, timedelta
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from main import app
from core.database import Base
from models.cart_items import CartItem
from models.enums import DiscountType, PromotionStatus
from models.inventory import Inventory
from models.products import Product
from models.promotions import Promotion
from models.users import User
from services.cache import ProductCountCache
from services.token_service import TokenService
from utils.deps import get_db
from utils.hashing import get_password_hash

# SYNC SQLite for testing (matches sync service layer)
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

PASSWORD = "TestPassword123!"


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """
    Creates a fresh, empty database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
async def client(session: Session):
    """
    Yields an HTTP client that talks to the app using the test database.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass  # Session cleanup handled by session fixture

    app.dependency_overrides[get_db] = override_get_db
    app.state.product_count_cache = ProductCountCache(ttl_seconds=300)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


def _make_user(session: Session, email: str, role: str) -> User:
    user = User(
        email=email,
        first_name="Test",
        last_name=role.title(),
        hashed_password=get_password_hash(PASSWORD),
        phone_number="+201111111111",
        address="12 Market Street",
        role=role,
        is_active=True,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def customer(session):
    return _make_user(session, "customer@example.com", "customer")


@pytest.fixture
def other_customer(session):
    return _make_user(session, "other@example.com", "customer")


@pytest.fixture
def staff(session):
    return _make_user(session, "staff@example.com", "staff")


def auth_headers(user: User) -> dict:
    token = TokenService.create_access_token(user.email, user.id, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def staff_headers(staff):
    return auth_headers(staff)


@pytest.fixture
def make_product(session):
    """Factory: product with an inventory row."""
    counter = {"n": 0}

    def _make(name=None, price="10.00", quantity=10, is_deleted=False):
        counter["n"] += 1
        product = Product(
            name=name or f"Product {counter['n']}",
            price=Decimal(price),
            unit="pcs",
            barcode=f"BC{counter['n']:06d}",
            is_deleted=is_deleted,
        )
        product.inventory = Inventory(quantity=quantity)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_promotion(session):
    def _make(code="SAVE10", discount_type=DiscountType.PERCENT, discount_value="10",
              min_order_amount="0", usage_limit=100, used_count=0,
              status=PromotionStatus.ACTIVE, start_date=None, end_date=None):
        promotion = Promotion(
            code=code,
            discount_type=discount_type,
            discount_value=Decimal(discount_value),
            min_order_amount=Decimal(min_order_amount),
            usage_limit=usage_limit,
            used_count=used_count,
            status=status,
            start_date=start_date or date.today() - timedelta(days=1),
            end_date=end_date or date.today() + timedelta(days=30),
        )
        session.add(promotion)
        session.commit()
        session.refresh(promotion)
        return promotion

    return _make


@pytest.fixture
def fill_cart(session):
    """Puts (product, quantity) pairs into a customer's cart."""
    def _fill(user, lines):
        for product, quantity in lines:
            item = CartItem(customer_id=user.id, product_id=product.id, unit_price=product.price)
            item.set_quantity(quantity)
            session.add(item)
        session.commit()

    return _fill
