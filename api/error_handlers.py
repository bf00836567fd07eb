# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: error_handlers.py
# -----------------------------------------------------------------------------
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.responses import error_response, not_found_response
from services.EmbeddingErrors import EmbedAPIError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Every failure leaves the API as {"error": message}; unmatched routes
    (including a known path with the wrong method) are a plain-text 404.
    """

    @app.exception_handler(EmbedAPIError)
    async def embed_api_error_handler(request: Request, exc: EmbedAPIError):
        logger.warning(
            "%s %s -> %d %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
        return error_response(exc.message, exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            logger.info("%s %s -> 404 (no route)", request.method, request.url.path)
            return not_found_response()
        return error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("%s %s -> 400 validation: %s", request.method, request.url.path, exc.errors())
        return error_response("Invalid request", 400)
