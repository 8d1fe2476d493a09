from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload

from shopapi.config import PLACEHOLDER_THUMBNAIL_URL
from shopapi.database import get_db
from shopapi.errors import NotFound
from shopapi.models import Category, Order, OrderDetail, Product, ProductSpec, Review, User
from shopapi.responses import envelope
from shopapi.schemas import RequestBody

router = APIRouter(tags=["products"])


# =====================================================
# Pydantic Schemas
# =====================================================

class ReviewCreate(RequestBody):
    user_id: int
    order_id: int
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


# =====================================================
# HELPERS
# =====================================================

def thumbnail_or_placeholder(url: Optional[str]) -> str:
    return url or PLACEHOLDER_THUMBNAIL_URL


def _serialize_product_summary(p: Product, sensor_type: Optional[str]) -> dict:
    return {
        "product_id":        p.id,
        "product_name":      p.name,
        "category_id":       p.category_id,
        "price":             p.price,
        "thumbnail_url":     thumbnail_or_placeholder(p.thumbnail_url),
        "short_description": p.short_description,
        "sensor_type":       sensor_type,
    }


# =====================================================
# PUBLIC: PRODUCT LIST
# =====================================================

@router.get("/products", status_code=status.HTTP_200_OK)
def list_products(db: Session = Depends(get_db)):
    """Active products, with a placeholder when no thumbnail was uploaded."""
    rows = (
        db.query(Product, ProductSpec.sensor_type)
        .outerjoin(ProductSpec, ProductSpec.product_id == Product.id)
        .filter(Product.is_active.is_(True))
        .order_by(Product.id)
        .all()
    )

    return envelope(
        data=[_serialize_product_summary(p, sensor_type) for p, sensor_type in rows],
        message="Products loaded",
    )


# =====================================================
# PUBLIC: CATEGORIES
# =====================================================

@router.get("/categories", status_code=status.HTTP_200_OK)
def list_categories(db: Session = Depends(get_db)):
    categories = (
        db.query(Category)
        .filter(Category.is_active.is_(True))
        .order_by(Category.id)
        .all()
    )

    return envelope(data=[
        {"category_id": c.id, "category_name": c.name, "parent_id": c.parent_id}
        for c in categories
    ])


# =====================================================
# PUBLIC: PRODUCT DETAIL
# =====================================================

@router.get("/products/{product_id}", status_code=status.HTTP_200_OK)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = (
        db.query(Product)
        .options(joinedload(Product.spec), selectinload(Product.images))
        .filter(Product.id == product_id)
        .first()
    )

    if not product:
        raise NotFound("Product not found")

    spec = product.spec
    return envelope(data={
        "product_id":        product.id,
        "product_name":      product.name,
        "category_id":       product.category_id,
        "price":             product.price,
        "thumbnail_url":     thumbnail_or_placeholder(product.thumbnail_url),
        "short_description": product.short_description,
        "description":       product.description,
        "stock":             product.stock,
        "is_active":         product.is_active,
        "specs": {
            "sensor_type": spec.sensor_type,
            "resolution":  spec.resolution,
            "details":     spec.details or {},
        } if spec else None,
        "gallery": [img.image_url for img in product.images],
    })


# =====================================================
# PUBLIC: PRODUCT REVIEWS
# =====================================================

@router.get("/products/{product_id}/reviews", status_code=status.HTTP_200_OK)
def list_reviews(product_id: int, db: Session = Depends(get_db)):
    """Reviews of this product left on orders that actually contained it."""
    reviews = (
        db.query(Review, User.full_name)
        .join(User, User.id == Review.user_id)
        .filter(
            Review.product_id == product_id,
            Review.order_id.in_(
                select(OrderDetail.order_id).where(OrderDetail.product_id == product_id)
            ),
        )
        .order_by(Review.review_date.desc(), Review.id.desc())
        .all()
    )

    return envelope(data=[
        {
            "review_id":   r.id,
            "rating":      r.rating,
            "comment":     r.comment,
            "review_date": r.review_date,
            "user_name":   user_name,
        }
        for r, user_name in reviews
    ])


# =====================================================
# USER: ADD REVIEW
# =====================================================

@router.post("/products/{product_id}/reviews", status_code=status.HTTP_201_CREATED)
def create_review(
    product_id: int,
    payload: ReviewCreate,
    db: Session = Depends(get_db),
):
    product = db.query(Product.id).filter(Product.id == product_id).first()
    if not product:
        raise NotFound("Product not found")

    # the order must be the reviewer's and must contain this product
    order = (
        db.query(Order.id)
        .join(OrderDetail, OrderDetail.order_id == Order.id)
        .filter(
            Order.id == payload.order_id,
            Order.user_id == payload.user_id,
            OrderDetail.product_id == product_id,
        )
        .first()
    )
    if not order:
        raise NotFound("Order not found")

    review = Review(
        product_id=product_id,
        user_id=payload.user_id,
        order_id=payload.order_id,
        rating=payload.rating,
        comment=payload.comment,
    )

    db.add(review)
    db.commit()
    db.refresh(review)

    return envelope(
        data={"review_id": review.id},
        message="Review added",
    )
