"""Map validation and database failures onto JSON error responses.

Every error body has the shape ``{"detail": "<message>"}``.
"""
import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)

VALUE_ERROR_PREFIX = "Value error, "


def format_validation_errors(errors) -> str:
    messages = []
    for error in errors:
        msg = error.get("msg", "Invalid value")
        if msg.startswith(VALUE_ERROR_PREFIX):
            messages.append(msg[len(VALUE_ERROR_PREFIX):])
            continue
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(messages) or "Invalid input"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": format_validation_errors(exc.errors())},
    )


async def pool_timeout_handler(request: Request, exc: PoolTimeoutError):
    logger.error(f"Timed out waiting for a database connection on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service temporarily unavailable, please retry"},
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PoolTimeoutError, pool_timeout_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
