from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from shopapi.database import get_db
from shopapi.models import WishlistItem
from shopapi.responses import envelope
from shopapi.schemas import WishlistTogglePayload
from shopapi.services import wishlist as wishlist_service

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


# =====================================================
# USER: TOGGLE
# =====================================================
@router.post("/toggle", status_code=status.HTTP_200_OK)
def toggle_wishlist(payload: WishlistTogglePayload, db: Session = Depends(get_db)):
    favorite = wishlist_service.toggle(db, payload.user_id, payload.product_id)

    return envelope(
        data={"is_favorite": favorite},
        message="Added to wishlist" if favorite else "Removed from wishlist",
    )


# =====================================================
# USER: CHECK
# =====================================================
@router.get("/check/{user_id}/{product_id}", status_code=status.HTTP_200_OK)
def check_wishlist(user_id: int, product_id: int, db: Session = Depends(get_db)):
    return envelope(data={
        "is_favorite": wishlist_service.is_favorite(db, user_id, product_id),
    })


# =====================================================
# USER: GET WISHLIST
# =====================================================
@router.get("/{user_id}", status_code=status.HTTP_200_OK)
def get_wishlist(user_id: int, db: Session = Depends(get_db)):
    items = (
        db.query(WishlistItem)
        .options(joinedload(WishlistItem.product))
        .filter(WishlistItem.user_id == user_id)
        .order_by(WishlistItem.added_date.desc(), WishlistItem.id.desc())
        .all()
    )

    return envelope(data=[
        {
            "wishlist_id":   item.id,
            "product_id":    item.product_id,
            "product_name":  item.product.name,
            "price":         item.product.price,
            "thumbnail_url": item.product.thumbnail_url,
            "added_date":    item.added_date,
        }
        for item in items
    ])
