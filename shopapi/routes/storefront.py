from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from shopapi.database import get_db
from shopapi.models import Promotion, ShippingMethod
from shopapi.responses import envelope

router = APIRouter(tags=["storefront"])


# =====================================================
# PUBLIC: PROMOTIONS
# =====================================================

@router.get("/promotions", status_code=status.HTTP_200_OK)
def list_promotions(db: Session = Depends(get_db)):
    """Active promotions that have not ended yet, newest first."""
    promotions = (
        db.query(Promotion)
        .filter(Promotion.is_active.is_(True), Promotion.end_date >= func.now())
        .order_by(Promotion.id.desc())
        .all()
    )

    return envelope(data=[
        {
            "promotion_id":     p.id,
            "code":             p.code,
            "title":            p.title,
            "description":      p.description,
            "discount_percent": p.discount_percent,
            "start_date":       p.start_date,
            "end_date":         p.end_date,
        }
        for p in promotions
    ])


# =====================================================
# PUBLIC: SHIPPING METHODS
# =====================================================

@router.get("/shipping-methods", status_code=status.HTTP_200_OK)
def list_shipping_methods(db: Session = Depends(get_db)):
    methods = (
        db.query(ShippingMethod)
        .order_by(ShippingMethod.cost.asc(), ShippingMethod.id.asc())
        .all()
    )

    return envelope(data=[
        {
            "shipping_method_id": m.id,
            "method_name":        m.name,
            "cost":               m.cost,
            "estimated_days":     m.estimated_days,
        }
        for m in methods
    ])
