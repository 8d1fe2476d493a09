import asyncio

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func
from sqlalchemy.orm import Session

from shopapi.database import get_db
from shopapi.models import Order, OrderStatus, User
from shopapi.responses import envelope

router = APIRouter(prefix="/admin", tags=["admin"])


# ─────────────────────────────────────────────
# DASHBOARD
# ─────────────────────────────────────────────

def _daily_revenue(bind) -> float:
    with Session(bind=bind) as db:
        total = db.query(func.sum(Order.total_amount)).filter(
            Order.order_date >= func.current_date(),
            Order.status != OrderStatus.cancelled.value,
        ).scalar()
    return round(total or 0, 2)


def _pending_count(bind) -> int:
    with Session(bind=bind) as db:
        return db.query(Order).filter(Order.status == OrderStatus.pending.value).count()


def _completed_today_count(bind) -> int:
    with Session(bind=bind) as db:
        return db.query(Order).filter(
            Order.status == OrderStatus.completed.value,
            Order.order_date >= func.current_date(),
        ).count()


@router.get("/dashboard-stats")
async def dashboard_stats(db: Session = Depends(get_db)):
    """Today's revenue, open orders and today's completions, read in parallel."""
    bind = db.get_bind()
    revenue, pending, completed = await asyncio.gather(
        run_in_threadpool(_daily_revenue, bind),
        run_in_threadpool(_pending_count, bind),
        run_in_threadpool(_completed_today_count, bind),
    )

    return envelope(data={
        "daily_revenue":          revenue,
        "pending_orders":         pending,
        "completed_orders_today": completed,
    })


# ─────────────────────────────────────────────
# ORDERS
# ─────────────────────────────────────────────

@router.get("/orders")
def list_all_orders(db: Session = Depends(get_db)):
    rows = (
        db.query(Order, User.full_name)
        .outerjoin(User, User.id == Order.user_id)
        .order_by(Order.order_date.desc(), Order.id.desc())
        .all()
    )

    return envelope(data=[
        {
            "order_id":      o.id,
            "order_date":    o.order_date,
            "total_amount":  o.total_amount,
            "status":        o.status,
            "receiver_name": o.receiver_name,
            "full_name":     full_name,
        }
        for o, full_name in rows
    ])
