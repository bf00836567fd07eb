# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-14
# Description: main.py
# -----------------------------------------------------------------------------
import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request

from api.error_handlers import register_exception_handlers
from api.responses import apply_cors_headers, error_response, preflight_response
from api.routers import embed, search

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Deferred so tests that override dependencies never build the real container
    from api.AppContainer import get_app_container

    try:
        container = get_app_container()
        ok = container.store.test_connection()
        logger.info("Vector store '%s' reachable=%s", container.cfg.vector_backend, ok)
    except Exception as e:
        logger.error("Startup wiring failed; requests will retry it: %s", e)
    yield


app = FastAPI(title="Embed API", redirect_slashes=False, lifespan=lifespan)
register_exception_handlers(app)
app.include_router(embed.router)
app.include_router(search.router)


@app.middleware("http")
async def cors_middleware(request: Request, call_next: Callable):
    # Preflight is answered for any path without routing or validation
    if request.method == "OPTIONS":
        return preflight_response()

    try:
        response = await call_next(request)
    except Exception as e:
        logger.exception("%s %s -> 500 unhandled: %s", request.method, request.url.path, e)
        response = error_response("Internal server error", 500)

    return apply_cors_headers(response)
