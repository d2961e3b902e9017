# app/core/errors.py
"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to and a client-safe detail.
`register_error_handlers` installs the FastAPI handlers that render them
with the same `{"detail": ...}` body FastAPI uses for HTTPException.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PayoutError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal Server Error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthorized(PayoutError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authorized"


class Forbidden(PayoutError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFound(PayoutError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class InvalidState(PayoutError):
    """Transition predicate not satisfied, e.g. the request was already decided."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Request already decided"


class InternalError(PayoutError):
    pass


async def payout_error_handler(request: Request, exc: PayoutError):
    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": InternalError.default_detail},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PayoutError, payout_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
