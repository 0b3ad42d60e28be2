"""Ledger exception to HTTP response mapping."""

import asyncio
import logging
from typing import Awaitable, TypeVar

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wagerboard.exceptions import (
    DanglingReferenceError,
    InvalidStateTransitionError,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from wagerboard.schemas import ErrorResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_CODES = {
    ValidationError: 422,
    NotFoundError: 404,
    InvalidStateTransitionError: 409,
    DanglingReferenceError: 409,
}

# Documented error bodies for routers; request-body validation keeps FastAPI's own 422 schema
ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Unknown id"},
    409: {"model": ErrorResponse, "description": "Invalid state transition or dangling reference"},
    504: {"model": ErrorResponse, "description": "Deadline exceeded"},
}


class DeadlineExceeded(Exception):
    """Ledger call outlived the request deadline."""


async def with_deadline(request: Request, operation: Awaitable[T]) -> T:
    """
    Run a ledger call under the configured request deadline.

    Expiry cancels the call, which rolls back its transaction.
    """
    timeout = request.app.state.settings.request_timeout_seconds
    try:
        return await asyncio.wait_for(operation, timeout=timeout)
    except asyncio.TimeoutError:
        raise DeadlineExceeded(f"Operation exceeded {timeout}s deadline")


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    status_code = STATUS_CODES.get(type(exc), 400)
    logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.kind}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind, "message": exc.message},
    )


async def deadline_error_handler(request: Request, exc: DeadlineExceeded) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} timed out: {exc}")
    return JSONResponse(
        status_code=504,
        content={"error": "deadline_exceeded", "message": str(exc)},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(DeadlineExceeded, deadline_error_handler)
