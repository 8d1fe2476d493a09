from fastapi import APIRouter
from sqlalchemy import text

from shopapi.config import API_VERSION
from shopapi.database import engine
from shopapi.responses import envelope

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    """Liveness plus a round trip to the database."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

    return envelope(data={"status": "healthy", "version": API_VERSION})


@router.get("/ping")
def ping():
    return envelope(data={"ping": "pong"})
