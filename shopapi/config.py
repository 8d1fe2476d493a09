"""Configuration settings, read from the environment."""
import os
from typing import List
from urllib.parse import quote_plus


# =====================================================
# DATABASE
# =====================================================

DB_HOST = os.getenv("DB_HOST", "localhost")
DB_USER = os.getenv("DB_USER", "shop")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_NAME = os.getenv("DB_NAME", "shop")
DB_PORT = int(os.getenv("DB_PORT", "5432"))
DB_SSLMODE = os.getenv("DB_SSLMODE", "prefer")


def build_database_url() -> str:
    """DATABASE_URL wins; otherwise assemble one from the DB_* parts."""
    url = os.getenv("DATABASE_URL")
    if url:
        # Hosted Postgres providers still hand out the legacy scheme
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    return (
        f"postgresql+psycopg2://{quote_plus(DB_USER)}:{quote_plus(DB_PASSWORD)}"
        f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    )


DATABASE_URL = build_database_url()

DB_POOL_SIZE = 10
DB_MAX_OVERFLOW = 0
DB_POOL_TIMEOUT = 30
DB_POOL_RECYCLE = 300


# =====================================================
# HTTP SERVER
# =====================================================

PORT = int(os.getenv("PORT", "3000"))

CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# =====================================================
# APPLICATION
# =====================================================

API_TITLE = "Mobile Shop API"
API_VERSION = "1.0.0"

PLACEHOLDER_THUMBNAIL_URL = "https://via.placeholder.com/300x300.png?text=No+Image"
