"""FastAPI application entry point.

Garment PLM service: garments, material composition, attribute
compatibility and supplier workflow over one relational store.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from plm import __version__
from plm.api.routes import (
    attributes_router,
    garments_router,
    health_router,
    materials_router,
    suppliers_router,
)
from plm.config import settings
from plm.core.errors import ErrorKind, PLMError
from plm.infra.database import Database
from plm.infra.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from plm.schemas import ErrorResponse

# Setup logging first
setup_logging()
logger = get_logger(__name__)

ERROR_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.DOMAIN_RULE: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.IN_USE: 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Startup:
    - Build the database handle unless one was injected (tests do this)
    - Verify database connection

    Shutdown:
    - Dispose the handle this lifespan created
    """
    logger.info("PLM service starting", environment=settings.environment)

    owned = getattr(app.state, "db", None) is None
    if owned:
        app.state.db = Database.from_settings(settings)

    db_ok = await app.state.db.verify_connection()
    if not db_ok:
        logger.warning("Database connection failed - will retry on first request")

    yield

    logger.info("PLM service shutting down")
    if owned:
        await app.state.db.dispose()
        app.state.db = None
    logger.info("Cleanup complete")


def _error_response(status_code: int, error: str, error_type: str, detail: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, error_type=error_type, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def create_app() -> FastAPI:
    app = FastAPI(
        title="Garment PLM",
        description="Product lifecycle management core for apparel",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment == "dev" else None,
        redoc_url=None,
    )
    app.state.db = None

    # CORS middleware (mainly for local development)
    if settings.environment == "dev":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Bind a request id to all logs and record each request's outcome."""
        request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
        bind_request_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        start = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers["X-Request-Id"] = request_id
            logger.info(
                "Request handled",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 1),
            )
            return response
        finally:
            clear_request_context()

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(PLMError)
    async def plm_error_handler(request: Request, exc: PLMError) -> JSONResponse:
        """Typed failures become 4xx responses carrying the offending values."""
        status_code = ERROR_STATUS.get(exc.kind, 400)
        logger.info(
            "Request rejected",
            path=request.url.path,
            error_type=exc.kind.value,
            error=exc.message,
        )
        body = exc.to_dict()
        body.pop("kind")
        body.pop("message")
        return _error_response(status_code, exc.message, exc.kind.value, body or None)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"loc": [str(part) for part in error["loc"]], "msg": error["msg"]}
            for error in exc.errors()
        ]
        return _error_response(400, "Invalid request", ErrorKind.VALIDATION.value, {"errors": errors})

    @app.exception_handler(PoolTimeoutError)
    async def pool_timeout_handler(request: Request, exc: PoolTimeoutError) -> JSONResponse:
        logger.error("Database pool exhausted", path=request.url.path)
        return _error_response(503, "Database busy, retry later", "unavailable")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            exc_info=True,
        )
        return _error_response(500, "Internal server error", type(exc).__name__)

    # =========================================================================
    # Include Routers
    # =========================================================================

    app.include_router(health_router, tags=["Health"])
    app.include_router(garments_router, prefix="/garments", tags=["Garments"])
    app.include_router(materials_router, prefix="/materials", tags=["Materials"])
    app.include_router(attributes_router, prefix="/attributes", tags=["Attributes"])
    app.include_router(suppliers_router, prefix="/suppliers", tags=["Suppliers"])

    @app.get("/")
    async def root() -> dict:
        """Root endpoint - basic service info."""
        return {
            "service": "Garment PLM",
            "version": __version__,
            "environment": settings.environment,
        }

    return app


app = create_app()
