from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload, selectinload

from shopapi.database import get_db
from shopapi.errors import NotFound
from shopapi.models import Order, OrderDetail
from shopapi.responses import envelope
from shopapi.schemas import CreateOrderPayload, OrderStatusPayload
from shopapi.services import orders as order_service

router = APIRouter(prefix="/orders", tags=["orders"])


# =====================================================
# HELPERS
# =====================================================

def _serialize_order_summary(o: Order) -> dict:
    first = o.details[0] if o.details else None
    return {
        "order_id":       o.id,
        "order_date":     o.order_date,
        "total_amount":   o.total_amount,
        "order_status":   o.status,
        # first line item stands in for the whole order in the history list
        "product_name":   first.product.name if first and first.product else None,
        "thumbnail_url":  first.product.thumbnail_url if first and first.product else None,
        "total_quantity": sum(d.quantity for d in o.details),
    }


def _serialize_order_detail(o: Order) -> dict:
    return {
        "order_info": {
            "order_id":        o.id,
            "order_date":      o.order_date,
            "order_status":    o.status,
            "payment_status":  o.payment_status,
            "total_amount":    o.total_amount,
            "ship_address":    o.ship_address,
            "receiver_name":   o.receiver_name,
            "phone_number":    o.phone_number,
            "payment_method":  o.payment_method.name if o.payment_method else None,
            "shipping_method": o.shipping_method.name if o.shipping_method else None,
        },
        "order_items": [
            {
                "order_detail_id": d.id,
                "product_id":      d.product_id,
                "product_name":    d.product.name if d.product else None,
                "thumbnail_url":   d.product.thumbnail_url if d.product else None,
                "quantity":        d.quantity,
                "unit_price":      d.unit_price,
                "total_price":     d.total_price,
            }
            for d in o.details
        ],
    }


# =====================================================
# USER: CREATE ORDER
# =====================================================

@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(payload: CreateOrderPayload, db: Session = Depends(get_db)):
    """
    Checkout: writes the order header and its line items and empties the
    user's cart, all in one transaction.
    """
    order_id = order_service.place_order(db, payload)
    return envelope(data={"order_id": order_id}, message="Order placed")


# =====================================================
# USER: ORDER HISTORY
# =====================================================

@router.get("/user/{user_id}")
def list_user_orders(user_id: int, db: Session = Depends(get_db)):
    orders = (
        db.query(Order)
        .options(selectinload(Order.details).joinedload(OrderDetail.product))
        .filter(Order.user_id == user_id)
        .order_by(Order.id.desc())
        .all()
    )

    return envelope(data=[_serialize_order_summary(o) for o in orders])


# =====================================================
# USER: ORDER DETAIL
# =====================================================

@router.get("/detail/{order_id}")
def get_order(order_id: int, db: Session = Depends(get_db)):
    order = (
        db.query(Order)
        .options(
            joinedload(Order.payment_method),
            joinedload(Order.shipping_method),
            selectinload(Order.details).joinedload(OrderDetail.product),
        )
        .filter(Order.id == order_id)
        .first()
    )

    if not order:
        raise NotFound("Order not found")

    return envelope(data=_serialize_order_detail(order))


# =====================================================
# ADMIN: STATUS TRANSITION
# =====================================================

@router.put("/{order_id}/status")
def update_order_status(
    order_id: int,
    payload: OrderStatusPayload,
    db: Session = Depends(get_db),
):
    new_status = order_service.update_status(
        db,
        order_id,
        payload.status,
        cancel_reason=payload.cancel_reason,
    )

    return envelope(
        data={"order_id": order_id, "status": new_status.value},
        message=f"Order status updated to: {new_status.value}",
    )
