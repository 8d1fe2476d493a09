"""Cart writes. One row per (user, product); repeat adds bump the quantity."""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shopapi.database import atomic, upsert
from shopapi.errors import NotFound, PersistenceError
from shopapi.models import CartItem, Product

logger = logging.getLogger(__name__)


def add_or_increment(db: Session, user_id: int, product_id: int, quantity: int) -> CartItem:
    """
    Insert the (user, product) row or add ``quantity`` to the existing one,
    as a single INSERT ... ON CONFLICT statement so concurrent adds of the
    same product never produce a duplicate row or a lost increment.
    """
    product = db.query(Product.id).filter(
        Product.id == product_id,
        Product.is_active.is_(True),
    ).first()
    if not product:
        raise NotFound("Product not found")

    stmt = upsert(db, CartItem).values(
        user_id=user_id,
        product_id=product_id,
        quantity=quantity,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "product_id"],
        set_={"quantity": CartItem.quantity + stmt.excluded.quantity},
    )

    try:
        with atomic(db):
            db.execute(stmt)
            item = (
                db.query(CartItem)
                .filter(CartItem.user_id == user_id, CartItem.product_id == product_id)
                .one()
            )
    except SQLAlchemyError as e:
        logger.exception("Cart add failed | user_id=%s | product_id=%s", user_id, product_id)
        raise PersistenceError(cause=e) from e

    db.refresh(item)
    return item


def set_quantity(db: Session, cart_item_id: int, quantity: int) -> None:
    try:
        with atomic(db):
            updated = (
                db.query(CartItem)
                .filter(CartItem.id == cart_item_id)
                .update({"quantity": quantity}, synchronize_session=False)
            )
            if not updated:
                raise NotFound("Cart item not found")
    except SQLAlchemyError as e:
        raise PersistenceError(cause=e) from e


def remove_item(db: Session, cart_item_id: int) -> None:
    try:
        with atomic(db):
            deleted = (
                db.query(CartItem)
                .filter(CartItem.id == cart_item_id)
                .delete(synchronize_session=False)
            )
            if not deleted:
                raise NotFound("Cart item not found")
    except SQLAlchemyError as e:
        raise PersistenceError(cause=e) from e
