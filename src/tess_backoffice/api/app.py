"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tess_backoffice.api.routes import (
    auth_router,
    employees_router,
    health_router,
    inventory_router,
    production_router,
    reports_router,
    salaries_router,
    sales_router,
)
from tess_backoffice.clock import Clock, SystemClock
from tess_backoffice.config import Settings, get_settings
from tess_backoffice.database import create_record_store, dispose_db
from tess_backoffice.services import (
    InvalidTransitionError,
    RecordLockedError,
    RecordNotFoundError,
    UserService,
    ValidationFailedError,
)
from tess_backoffice.store import ConcurrentWriteError, RecordStore, StorageError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    owns_store = app.state.store is None
    if owns_store:
        app.state.store = create_record_store(app.state.settings.database_url)
    UserService(app.state.store, app.state.clock, app.state.settings).seed_defaults()
    yield
    # Shutdown
    if owns_store:
        dispose_db()
        app.state.store = None


def _error(status_code: int, detail: str, code: str, errors: list[str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": code, "errors": errors or []},
    )


def create_app(
    store: RecordStore | None = None,
    clock: Clock | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Without a store, the SQL record store for ``DATABASE_URL`` is opened on
    startup.
    """
    app = FastAPI(
        title="Tess Back Office API",
        description="Inventory, point-of-sale, production and payroll",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.clock = clock or SystemClock()
    app.state.settings = settings or get_settings()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(ValidationFailedError)
    async def validation_failed_handler(
        request: Request, exc: ValidationFailedError
    ) -> JSONResponse:
        return _error(
            422, str(exc), "VALIDATION_FAILED", exc.errors
        )

    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc), "NOT_FOUND")

    @app.exception_handler(RecordLockedError)
    async def locked_handler(request: Request, exc: RecordLockedError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc), "RECORD_LOCKED")

    @app.exception_handler(InvalidTransitionError)
    async def transition_handler(
        request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc), "INVALID_TRANSITION")

    @app.exception_handler(ConcurrentWriteError)
    async def concurrent_write_handler(
        request: Request, exc: ConcurrentWriteError
    ) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc), "CONCURRENT_WRITE")

    @app.exception_handler(StorageError)
    async def storage_handler(request: Request, exc: StorageError) -> JSONResponse:
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Record store unavailable", "STORAGE_ERROR")

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred",
            "INTERNAL_ERROR",
        )

    # Include routers
    app.include_router(health_router)
    for router in (
        auth_router,
        employees_router,
        production_router,
        inventory_router,
        sales_router,
        salaries_router,
        reports_router,
    ):
        app.include_router(router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
