"""Order placement and status transitions."""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shopapi.database import atomic
from shopapi.errors import InvalidRequest, NotFound, OrderCreationFailed, PersistenceError
from shopapi.models import CartItem, Order, OrderDetail, OrderStatus, PaymentStatus
from shopapi.schemas import CreateOrderPayload

logger = logging.getLogger(__name__)

_DISPLAY_STATUSES = {s.value: s for s in OrderStatus}


def place_order(db: Session, payload: CreateOrderPayload) -> int:
    """
    Persist an order from a cart snapshot and empty the user's cart.

    Header, line items and cart clearing commit together or not at all.
    Line totals are ``quantity * price`` as submitted; nothing is re-priced
    and stock is not checked.

    Returns:
        The new order id.

    Raises:
        InvalidRequest: If the item list is empty.
        OrderCreationFailed: If any statement fails; nothing is persisted.
    """
    if not payload.items:
        raise InvalidRequest("Cart is empty")

    try:
        with atomic(db):
            order = Order(
                user_id=payload.user_id,
                receiver_name=payload.receiver_name,
                phone_number=payload.phone_number,
                ship_address=payload.ship_address,
                total_amount=payload.total_amount,
                status=OrderStatus.pending.value,
                payment_status=PaymentStatus.unpaid.value,
                payment_method_id=payload.payment_method_id,
                shipping_method_id=payload.shipping_method_id,
            )
            db.add(order)
            db.flush()
            order_id = order.id

            db.add_all(
                OrderDetail(
                    order_id=order_id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.price,
                    total_price=round(item.quantity * item.price, 2),
                )
                for item in payload.items
            )
            db.flush()

            db.query(CartItem).filter(
                CartItem.user_id == payload.user_id
            ).delete(synchronize_session=False)
    except SQLAlchemyError as e:
        logger.exception(
            "Order creation rolled back | user_id=%s | items=%d",
            payload.user_id,
            len(payload.items),
        )
        raise OrderCreationFailed(cause=e) from e

    logger.info(
        "Order created | order_id=%s | user_id=%s | items=%d",
        order_id,
        payload.user_id,
        len(payload.items),
    )
    return order_id


def resolve_status(value: str) -> OrderStatus:
    """Map an API token (``shipping``) or a display string to an OrderStatus."""
    token = value.strip()
    if token in OrderStatus.__members__:
        return OrderStatus[token]
    if token in _DISPLAY_STATUSES:
        return _DISPLAY_STATUSES[token]
    raise InvalidRequest(f"Invalid order status: {value}")


def update_status(
    db: Session,
    order_id: int,
    status: str,
    cancel_reason: Optional[str] = None,
) -> OrderStatus:
    new_status = resolve_status(status)

    try:
        with atomic(db):
            updated = (
                db.query(Order)
                .filter(Order.id == order_id)
                .update({"status": new_status.value}, synchronize_session=False)
            )
            if not updated:
                raise NotFound("Order not found")
    except SQLAlchemyError as e:
        raise PersistenceError(cause=e) from e

    logger.info("Order status changed | order_id=%s | status=%s", order_id, new_status.name)
    if new_status is OrderStatus.cancelled and cancel_reason:
        logger.info("Order cancelled | order_id=%s | reason=%s", order_id, cancel_reason)

    return new_status
