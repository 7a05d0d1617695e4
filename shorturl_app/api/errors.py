"""
Exception handlers.

Every failure leaves the service as `{"status": "error", "error": <message>}`
with the status code carried by the exception. Nothing raised while handling
a request is allowed to take the process down.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shorturl_app.exceptions import BackendFault, ShortURLError
from shorturl_app.schemas.url import ErrorResponse

logger = logging.getLogger("shorturl")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump()
    )


async def handle_service_error(request: Request, exc: ShortURLError) -> JSONResponse:
    if isinstance(exc, BackendFault):
        logger.error(f"Error: {exc.message}")
        return error_response(exc.status_code, "storage backend error")

    logger.info(f"Error: {exc.message}")
    return error_response(exc.status_code, exc.message)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.info(f"Error: {exc.detail}")
    return error_response(exc.status_code, str(exc.detail))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside the logging middleware, so the access line is written here
    logger.exception(f"Error: {exc}")
    logger.error(f"{request.method} {request.url.path} - 500")
    return error_response(500, "internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShortURLError, handle_service_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
