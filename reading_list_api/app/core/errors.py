"""
Exception handlers producing the service's error body.

Every error response carries ``{"error": <message>}``:

* HTTP errors raised by handlers keep their status and detail.  A
  request matching no route, whether by path or by method, is a 404
  with a generic message.
* Request bodies that cannot be parsed are client errors (400).
* Anything else is logged and reported as a 500 with the exception
  message.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "the requested resource does not exist on this server"
INVALID_BODY_MESSAGE = "Request body is missing or is not a valid JSON object"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    status_code, message = exc.status_code, exc.detail
    # Starlette raises a bare "Not Found" when no path matches and 405
    # when the path exists for other methods.
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED or (
        status_code == status.HTTP_404_NOT_FOUND and message == "Not Found"
    ):
        status_code, message = status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE
    headers = getattr(exc, "headers", None)
    if headers and status_code != exc.status_code:
        headers = {k: v for k, v in headers.items() if k.lower() != "allow"}
    return JSONResponse(
        status_code=status_code,
        content={"error": message},
        headers=headers or None,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected request body for %s %s: %s", request.method, request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error for %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
