"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from drg_explorer.config import settings
from drg_explorer.database import StoreClient, get_store
from drg_explorer.errors import InvalidFilterError, StoreUnavailableError
from drg_explorer.routes import filters, records

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.log_level) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the record store once for the life of the process."""
    configure_logging()

    # Fails startup if the SQLite file is missing or the store is unreachable
    store = StoreClient.from_url(
        settings.database_url,
        require_existing=True,
        echo=settings.debug,
    )
    try:
        await store.verify()
    except StoreUnavailableError:
        await store.dispose()
        logger.error("Record store unavailable at %s", settings.database_url)
        raise
    app.state.store = store
    logger.info("Record store ready")

    yield  # Application runs here

    await store.dispose()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


app = FastAPI(
    title="DRG Explorer",
    description="Medicare inpatient charges and payments by geography and DRG",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# Error payloads: every failure is {"error": message}
# =============================================================================


@app.exception_handler(InvalidFilterError)
async def invalid_filter_handler(request: Request, exc: InvalidFilterError) -> JSONResponse:
    return _error(str(exc), status.HTTP_400_BAD_REQUEST)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
    return _error("; ".join(messages) or "Invalid request", status.HTTP_400_BAD_REQUEST)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(str(exc.detail), exc.status_code)


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.error("Store unavailable: %s", exc)
    return _error(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s", request.url.path)
    message = str(exc.orig) if getattr(exc, "orig", None) is not None else str(exc)
    return _error(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _error(str(exc) or "Unexpected error", status.HTTP_500_INTERNAL_SERVER_ERROR)


# Security headers middleware (applied to all responses)
app.add_middleware(SecurityHeadersMiddleware)

# CORS middleware for frontend
# Parse comma-separated origins from config
_cors_origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["Content-Type"],
)

# Include API routers
app.include_router(filters.router, prefix="/api")
app.include_router(records.router, prefix="/api")


@app.get("/health")
async def health_check(store: StoreClient = Depends(get_store)) -> dict:
    """Health check endpoint; fails with 500 if the store does not answer."""
    await store.verify()
    return {"status": "healthy"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API info."""
    return {
        "name": "DRG Explorer API",
        "version": "0.1.0",
        "docs": "/docs",
    }
