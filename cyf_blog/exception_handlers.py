"""
Exception handlers producing the API's error envelope.

Client errors (HTTPException) keep their status; request validation errors
are reported as 400; anything else is logged with an error id and becomes 500.
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cyf_blog.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(request: Request, status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    body = ErrorResponse(
        code=status_code,
        message=message,
        path=request.url.path,
        timestamp=datetime.now(timezone.utc),
        errors=errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    errors = None if isinstance(exc.detail, str) else exc.detail
    return _error_response(request, exc.status_code, message, errors=errors, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.info(f"Validation failed on {request.method} {request.url.path}: {errors}")
    return _error_response(request, status.HTTP_400_BAD_REQUEST, "Bad Request", errors=errors)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    error_id = id(exc)
    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, f"Internal server error ({error_id})")


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
