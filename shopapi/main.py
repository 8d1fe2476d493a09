"""Application entry point: app factory, routers and envelope error handlers."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shopapi.config import API_TITLE, API_VERSION, CORS_ORIGINS
from shopapi.database import init_database
from shopapi.logging_config import configure_logging
from shopapi.responses import error_envelope
from shopapi.routes import (
    addresses,
    admin,
    auth,
    cart,
    health,
    orders,
    products,
    storefront,
    wishlist,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application...")
    init_database()
    logger.info("Application startup complete")

    yield

    logger.info("Application shutdown complete")


# =====================================================
# ERROR HANDLERS
# =====================================================

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [
        ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        for err in exc.errors()
    ]
    message = "Invalid request"
    if fields:
        message = f"Invalid request: {', '.join(f for f in fields if f)}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(message),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error | %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope("Server error"),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error | %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope("Server error"),
    )


# =====================================================
# APP
# =====================================================

def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title=API_TITLE, version=API_VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # ── Health ─────────────────────────────────────────────────────────
    app.include_router(health.router)

    # ── Storefront ─────────────────────────────────────────────────────
    app.include_router(products.router,   prefix="/api")
    app.include_router(storefront.router, prefix="/api")
    app.include_router(auth.router,       prefix="/api")

    # ── Customer ───────────────────────────────────────────────────────
    app.include_router(addresses.router,  prefix="/api")
    app.include_router(cart.router,       prefix="/api")
    app.include_router(wishlist.router,   prefix="/api")
    app.include_router(orders.router,     prefix="/api")

    # ── Admin ──────────────────────────────────────────────────────────
    app.include_router(admin.router,      prefix="/api")

    return app


app = create_app()
