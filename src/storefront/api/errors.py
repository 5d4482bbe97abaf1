"""Map domain exceptions to JSON error responses.

Every error body has the same shape::

    {"success": false, "error": "<code>", "messages": {"<field>": ["..."]}}
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from storefront.errors import Forbidden, NotFound, StorefrontError

logger = structlog.get_logger(__name__)


def error_response(status_code: int, code: str, messages: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": code, "messages": messages},
    )


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    logger.info("request_rejected", path=request.url.path, error=exc.code, messages=exc.messages)
    return error_response(400, exc.code, exc.messages)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return error_response(400, "validation_error", exc.messages)


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    messages = exc.messages if isinstance(exc, NotFound) else {"_entity": [str(exc)]}
    return error_response(404, NotFound.code, messages)


async def forbidden_handler(request: Request, exc: Forbidden) -> JSONResponse:
    logger.warning("request_forbidden", path=request.url.path, message=exc.message)
    return error_response(403, exc.code, exc.messages)


def install_error_handlers(app: FastAPI) -> None:
    """Register Protean's default handlers, then the storefront's on top."""
    register_exception_handlers(app)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(Forbidden, forbidden_handler)
