import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from shopapi.config import (
    DATABASE_URL,
    DB_SSLMODE,
    DB_POOL_SIZE,
    DB_MAX_OVERFLOW,
    DB_POOL_TIMEOUT,
    DB_POOL_RECYCLE,
)

logger = logging.getLogger(__name__)


# ======================================================
# DATABASE CONNECTION
# ======================================================

def _connect_args(url: str) -> dict:
    if url.startswith("postgresql"):
        return {"sslmode": DB_SSLMODE, "connect_timeout": 10}
    if url.startswith("sqlite"):
        # dashboard reads fan out to worker threads
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,             # drops stale connections
    pool_size=DB_POOL_SIZE,         # bounded pool shared by every request
    max_overflow=DB_MAX_OVERFLOW,
    pool_timeout=DB_POOL_TIMEOUT,
    pool_recycle=DB_POOL_RECYCLE,
    connect_args=_connect_args(DATABASE_URL),
)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)

Base = declarative_base()


# ======================================================
# DEPENDENCY
# ======================================================

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ======================================================
# TRANSACTIONS
# ======================================================

@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Run a block of writes as one unit of work.

    Commits when the block exits cleanly, rolls back and re-raises on any
    exception, so callers never observe half of a multi-statement write.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def upsert(db: Session, model):
    """
    Dialect-specific INSERT that supports ``on_conflict_do_update`` /
    ``on_conflict_do_nothing``. PostgreSQL in production, SQLite in tests.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upsert is not supported on {dialect}")


# ======================================================
# DATABASE BOOTSTRAP
# ======================================================

DEFAULT_PAYMENT_METHODS = (
    "Thanh toán khi nhận hàng (COD)",
    "Chuyển khoản ngân hàng",
    "Ví điện tử",
)

DEFAULT_SHIPPING_METHODS = (
    ("Giao hàng tiết kiệm", 15000.0, 5),
    ("Giao hàng nhanh", 30000.0, 2),
    ("Hỏa tốc", 60000.0, 1),
)


def init_database(bind=None) -> None:
    """
    Idempotent DB initialization.

    - All tables created via ORM
    - Payment and shipping methods seeded when their tables are empty
    """
    from shopapi.models import PaymentMethod, ShippingMethod

    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    db = Session(bind=bind)
    try:
        if db.query(PaymentMethod).count() == 0:
            db.add_all(PaymentMethod(name=name) for name in DEFAULT_PAYMENT_METHODS)
            logger.info("Seeded %d payment methods", len(DEFAULT_PAYMENT_METHODS))

        if db.query(ShippingMethod).count() == 0:
            db.add_all(
                ShippingMethod(name=name, cost=cost, estimated_days=days)
                for name, cost, days in DEFAULT_SHIPPING_METHODS
            )
            logger.info("Seeded %d shipping methods", len(DEFAULT_SHIPPING_METHODS))

        db.commit()
    finally:
        db.close()

    logger.info("Database verified (tables, seed data)")
