"""Exception handlers that render every failure as ``{"error": message}``."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from finance_tracker.core.errors import FinanceTrackerError
from finance_tracker.core.settings import TRANSACTIONS_PATH
from finance_tracker.core.utils import get_logger

logger = get_logger("finance-tracker.api")

ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE")
HTTP_405_METHOD_NOT_ALLOWED = 405
HTTP_500_INTERNAL_SERVER_ERROR = 500


async def handle_tracker_error(request: Request, exc: FinanceTrackerError) -> JSONResponse:
    """Map domain errors onto their status code."""
    if exc.status_code < HTTP_500_INTERNAL_SERVER_ERROR:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Unparseable or mistyped request bodies are validation failures."""
    errors = exc.errors()
    detail = errors[0].get("msg", "invalid value") if errors else "invalid value"
    logger.warning(f"{request.method} {request.url.path} rejected body: {errors}")
    return JSONResponse({"error": f"Invalid request body: {detail}"}, status_code=400)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors in the same shape; 405 lists the supported methods."""
    if exc.status_code == HTTP_405_METHOD_NOT_ALLOWED and request.url.path == TRANSACTIONS_PATH:
        return JSONResponse(
            {"error": f"Method {request.method} not allowed"},
            status_code=HTTP_405_METHOD_NOT_ALLOWED,
            headers={"Allow": ", ".join(ALLOWED_METHODS)},
        )
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: never leak internals to the client."""
    logger.exception(f"Unhandled error in {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse({"error": "Internal server error"}, status_code=HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the tracker's exception handlers on an application."""
    app.add_exception_handler(FinanceTrackerError, handle_tracker_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
