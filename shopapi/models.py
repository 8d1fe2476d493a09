import enum
from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Float,
    Boolean,
    DateTime,
    JSON,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from shopapi.database import Base


# =========================
# ENUMS
# =========================

class OrderStatus(str, enum.Enum):
    """Member names are the API tokens, values are what gets stored and shown."""
    pending = "Chờ xử lý"
    awaiting_pickup = "Chờ lấy hàng"
    shipping = "Đang giao hàng"
    completed = "Hoàn thành"
    cancelled = "Đã hủy"


class PaymentStatus(str, enum.Enum):
    unpaid = "Chưa thanh toán"
    paid = "Đã thanh toán"


class UserRole(str, enum.Enum):
    customer = "customer"
    admin = "admin"


# =========================
# USER
# =========================

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)

    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    phone = Column(String)
    avatar_url = Column(String)

    password_hash = Column(String, nullable=False)

    role = Column(String, default=UserRole.customer.value, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    addresses = relationship(
        "Address",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    orders = relationship("Order", back_populates="user")


# =========================
# CATALOG
# =========================

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"))
    is_active = Column(Boolean, default=True, nullable=False)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), index=True)

    price = Column(Float, nullable=False)
    thumbnail_url = Column(String)
    short_description = Column(Text)
    description = Column(Text)

    stock = Column(Integer, default=0)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    category = relationship("Category")
    spec = relationship(
        "ProductSpec",
        back_populates="product",
        uselist=False,
        cascade="all, delete-orphan",
    )
    images = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.sort_order",
    )


Index("idx_products_is_active", Product.is_active)


class ProductSpec(Base):
    __tablename__ = "product_specs"

    id = Column(Integer, primary_key=True, autoincrement=True)

    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    sensor_type = Column(String)
    resolution = Column(String)
    details = Column(JSON)

    product = relationship("Product", back_populates="spec")


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True, autoincrement=True)

    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    image_url = Column(String, nullable=False)
    sort_order = Column(Integer, default=0)

    product = relationship("Product", back_populates="images")


# =========================
# ADDRESS
# =========================

class Address(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    receiver_name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    street_address = Column(String, nullable=False)
    city = Column(String, nullable=False)

    is_default = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="addresses")


# =========================
# CART
# =========================

class CartItem(Base):
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )

    quantity = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product")


# =========================
# WISHLIST
# =========================

class WishlistItem(Base):
    __tablename__ = "wishlist"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_wishlist_user_product"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )

    added_date = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product")


# =========================
# CHECKOUT OPTIONS
# =========================

class PaymentMethod(Base):
    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class ShippingMethod(Base):
    __tablename__ = "shipping_methods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    cost = Column(Float, nullable=False, default=0)
    estimated_days = Column(Integer)


class Promotion(Base):
    __tablename__ = "promotions"

    id = Column(Integer, primary_key=True, autoincrement=True)

    code = Column(String, unique=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    discount_percent = Column(Float, default=0)

    start_date = Column(DateTime(timezone=True))
    end_date = Column(DateTime(timezone=True), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


# =========================
# ORDER
# =========================

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    receiver_name = Column(String)
    phone_number = Column(String)
    ship_address = Column(Text)  # snapshot, not a reference to addresses

    order_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    total_amount = Column(Float, nullable=False)

    # Plain string so rows written before status validation still load
    status = Column(String, nullable=False, default=OrderStatus.pending.value, index=True)
    payment_status = Column(String, nullable=False, default=PaymentStatus.unpaid.value)

    payment_method_id = Column(Integer, ForeignKey("payment_methods.id", ondelete="SET NULL"))
    shipping_method_id = Column(Integer, ForeignKey("shipping_methods.id", ondelete="SET NULL"))

    user = relationship("User", back_populates="orders")
    payment_method = relationship("PaymentMethod")
    shipping_method = relationship("ShippingMethod")
    details = relationship(
        "OrderDetail",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderDetail.id",
    )


class OrderDetail(Base):
    __tablename__ = "order_details"

    id = Column(Integer, primary_key=True, autoincrement=True)

    order_id = Column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)   # snapshot at checkout
    total_price = Column(Float, nullable=False)

    order = relationship("Order", back_populates="details")
    product = relationship("Product")


# =========================
# REVIEW
# =========================

class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)

    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order_id = Column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    rating = Column(Integer, nullable=False)
    comment = Column(Text)

    review_date = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User")
