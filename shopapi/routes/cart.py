from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from shopapi.database import get_db
from shopapi.models import CartItem
from shopapi.responses import envelope
from shopapi.schemas import AddToCartPayload, UpdateCartItemPayload
from shopapi.services import cart as cart_service

router = APIRouter(prefix="/cart", tags=["cart"])


# =====================================================
# USER: GET CART
# =====================================================
@router.get("/{user_id}", status_code=status.HTTP_200_OK)
def get_cart(user_id: int, db: Session = Depends(get_db)):
    items = (
        db.query(CartItem)
        .options(joinedload(CartItem.product))
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.id)
        .all()
    )

    return envelope(data=[
        {
            "cart_item_id":  item.id,
            "product_id":    item.product_id,
            "quantity":      item.quantity,
            "product_name":  item.product.name,
            "price":         item.product.price,
            "thumbnail_url": item.product.thumbnail_url,
        }
        for item in items
    ])


# =====================================================
# USER: ADD TO CART
# =====================================================
@router.post("/add", status_code=status.HTTP_200_OK)
def add_to_cart(payload: AddToCartPayload, db: Session = Depends(get_db)):
    item = cart_service.add_or_increment(
        db,
        user_id=payload.user_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
    )

    return envelope(
        data={"cart_item_id": item.id, "quantity": item.quantity},
        message="Cart updated",
    )


# =====================================================
# USER: UPDATE CART ITEM
# =====================================================
@router.put("/update", status_code=status.HTTP_200_OK)
def update_cart_item(payload: UpdateCartItemPayload, db: Session = Depends(get_db)):
    cart_service.set_quantity(db, payload.cart_item_id, payload.quantity)
    return envelope(message="Quantity updated")


# =====================================================
# USER: REMOVE CART ITEM
# =====================================================
@router.delete("/remove/{cart_item_id}", status_code=status.HTTP_200_OK)
def remove_cart_item(cart_item_id: int, db: Session = Depends(get_db)):
    cart_service.remove_item(db, cart_item_id)
    return envelope(message="Item removed")
