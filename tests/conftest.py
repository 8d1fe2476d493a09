import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="shopapi-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'shop.db')}"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event

from shopapi.database import Base, SessionLocal, engine
from shopapi.main import app
from shopapi.models import (
    Address,
    CartItem,
    Category,
    Order,
    OrderDetail,
    OrderStatus,
    PaymentMethod,
    Product,
    ShippingMethod,
    User,
)
from shopapi.passwords import hash_password


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    # lifespan is not entered; the schema fixture owns table setup
    return TestClient(app)


# =====================================================
# FACTORIES
# =====================================================

@pytest.fixture
def make_user(db):
    def _make(email="an@example.com", password="secret123", full_name="Nguyen Van An", phone="0901234567"):
        user = User(
            full_name=full_name,
            email=email,
            phone=phone,
            password_hash=hash_password(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_product(db):
    def _make(name="Canon EOS R50", price=10.0, thumbnail_url=None, is_active=True, category=None):
        product = Product(
            name=name,
            price=price,
            thumbnail_url=thumbnail_url,
            is_active=is_active,
            category_id=category.id if category else None,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_category(db):
    def _make(name="Cameras", is_active=True, parent_id=None):
        category = Category(name=name, is_active=is_active, parent_id=parent_id)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture
def make_address(db):
    def _make(user, is_default=False, city="Ha Noi"):
        address = Address(
            user_id=user.id,
            receiver_name=user.full_name,
            phone_number=user.phone or "0900000000",
            street_address="12 Tran Hung Dao",
            city=city,
            is_default=is_default,
        )
        db.add(address)
        db.commit()
        db.refresh(address)
        return address

    return _make


@pytest.fixture
def add_to_cart(db):
    def _add(user, product, quantity=1):
        item = CartItem(user_id=user.id, product_id=product.id, quantity=quantity)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _add


@pytest.fixture
def make_order(db):
    def _make(user, items, status=OrderStatus.pending, order_date=None, total=None):
        """``items`` is a list of ``(product, quantity)`` pairs."""
        order = Order(
            user_id=user.id,
            receiver_name=user.full_name,
            phone_number=user.phone,
            ship_address="12 Tran Hung Dao, Ha Noi",
            total_amount=total if total is not None else sum(p.price * q for p, q in items),
            status=status.value,
        )
        if order_date is not None:
            order.order_date = order_date
        db.add(order)
        db.flush()
        for product, quantity in items:
            db.add(OrderDetail(
                order_id=order.id,
                product_id=product.id,
                quantity=quantity,
                unit_price=product.price,
                total_price=product.price * quantity,
            ))
        db.commit()
        db.refresh(order)
        return order

    return _make


@pytest.fixture
def checkout_options(db):
    payment = PaymentMethod(name="COD")
    shipping = ShippingMethod(name="Giao hàng nhanh", cost=30000.0, estimated_days=2)
    db.add_all([payment, shipping])
    db.commit()
    return payment, shipping
