"""
Error interception and exception handlers.

The ErrorInterceptor is the outermost wrapper of every request pipeline: any
failure that escapes a stage or handler becomes a sanitized 500 response and
one error-level log record.
"""

import logging
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..models import RejectionKind, RequestContext

logger = logging.getLogger("catalog.errors")


def server_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": RejectionKind.SERVER_ERROR.default_message},
    )


class ErrorInterceptor:
    """Converts unexpected failures into a fixed-shape 500 response."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def handle(self, context: RequestContext, exc: Exception) -> JSONResponse:
        self.log.error(
            f"Unhandled failure: {exc}",
            exc_info=exc,
            extra={
                "path": context.path,
                "method": context.method,
                "error_type": type(exc).__name__,
                "error_message": str(exc),
            },
        )
        return server_error_response()


# ===========================================
# Exception Handlers
# ===========================================


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for failures raised outside a request pipeline.
    """
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=exc,
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc),
        },
    )
    return server_error_response()


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException (unknown routes, unsupported methods).
    """
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = RejectionKind.NOT_FOUND.default_message
    else:
        message = exc.detail
    return JSONResponse(
        status_code=exc.status_code, content={"message": message}, headers=exc.headers
    )
