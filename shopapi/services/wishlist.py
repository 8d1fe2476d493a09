import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shopapi.database import atomic, upsert
from shopapi.errors import PersistenceError
from shopapi.models import WishlistItem

logger = logging.getLogger(__name__)


def toggle(db: Session, user_id: int, product_id: int) -> bool:
    """
    Flip wishlist membership and return the new state (True = now a favorite).

    The delete is attempted first; only when it removed nothing is the pair
    inserted, with ON CONFLICT DO NOTHING covering a concurrent insert.
    """
    try:
        with atomic(db):
            removed = (
                db.query(WishlistItem)
                .filter(
                    WishlistItem.user_id == user_id,
                    WishlistItem.product_id == product_id,
                )
                .delete(synchronize_session=False)
            )
            if removed:
                return False

            stmt = upsert(db, WishlistItem).values(user_id=user_id, product_id=product_id)
            db.execute(stmt.on_conflict_do_nothing(index_elements=["user_id", "product_id"]))
            return True
    except SQLAlchemyError as e:
        logger.exception("Wishlist toggle failed | user_id=%s | product_id=%s", user_id, product_id)
        raise PersistenceError(cause=e) from e


def is_favorite(db: Session, user_id: int, product_id: int) -> bool:
    return (
        db.query(WishlistItem.id)
        .filter(
            WishlistItem.user_id == user_id,
            WishlistItem.product_id == product_id,
        )
        .first()
        is not None
    )
