"""Main entrypoint and application factory for the Personal Finance Tracker API.

This module builds the FastAPI application, configures logging, owns the database handle
for the lifetime of the app, and exposes the Scalar API reference endpoint for interactive
OpenAPI documentation. It also includes the main entrypoint for running the app with Uvicorn.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from scalar_fastapi import get_scalar_api_reference

from finance_tracker.api import register_exception_handlers, router
from finance_tracker.core.db import Database
from finance_tracker.core.settings import Settings, get_settings
from finance_tracker.core.utils import LOG_DATEFMT, LOG_FORMAT, get_logger


# --- Logging Setup ---
def setup_logging(settings: Settings) -> None:
    """Configure the project logger level and, when configured, a persistent log file."""
    logger = get_logger()
    logger.setLevel(settings.log_level.upper())
    # Add file handler for persistent logs (not colorized)
    if settings.log_file and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        logger.addHandler(file_handler)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Release the transaction store connections when the application stops."""
    yield
    app.state.database.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application for the given settings."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        title="Personal Finance Tracker API",
        description="""
    The Personal Finance Tracker API records income and expense transactions.

    **Endpoints:**
    - `GET /api/transactions`: List all transactions, most recent first.
    - `POST /api/transactions`: Create a transaction.
    - `PUT /api/transactions`: Replace a transaction identified by `id`.
    - `DELETE /api/transactions`: Delete a transaction identified by `id`.
    - `GET /health`: Health check endpoint.
    - `GET /scalar`: Interactive Scalar OpenAPI documentation.
    """,
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.database = Database(settings)
    register_exception_handlers(app)
    app.include_router(router)

    @app.get("/scalar", include_in_schema=False)
    async def scalar_docs() -> HTMLResponse:
        """Return Scalar API reference."""
        return get_scalar_api_reference(openapi_url=app.openapi_url, title=app.title)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port, reload=True)
