"""
Errors raised by route handlers and the handlers that render them.

Every error body is a JSON object with a single ``message`` field.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class MissingResourceError(Exception):
    """No live record for the requested identifier."""

    def __init__(self, resource: str, resource_id: int):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} not found")


class InvalidAmountError(ValueError):
    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"invalid amount: {raw!r}")


class MissingExtensionError(Exception):
    def __init__(self, extension_type: type):
        self.extension_type = extension_type
        super().__init__(f"Missing request extension: {extension_type.__name__}")


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


async def missing_resource_handler(request: Request, exc: MissingResourceError) -> JSONResponse:
    logger.info("%s %s -> 404 (%s)", request.method, request.url.path, exc)
    return _message(404, str(exc))


async def invalid_amount_handler(request: Request, exc: InvalidAmountError) -> JSONResponse:
    return _message(400, str(exc))


async def missing_extension_handler(request: Request, exc: MissingExtensionError) -> JSONResponse:
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return _message(500, str(exc))


async def backing_store_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Backing store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return _message(503, "backing store unavailable")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MissingResourceError, missing_resource_handler)
    app.add_exception_handler(InvalidAmountError, invalid_amount_handler)
    app.add_exception_handler(MissingExtensionError, missing_extension_handler)
    app.add_exception_handler(SQLAlchemyError, backing_store_handler)
