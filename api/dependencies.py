# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-14
# Description: dependencies.py
# -----------------------------------------------------------------------------
from typing import Optional

from fastapi import Depends, Header, Request

from api.AppContainer import get_app_container
from api.schemas.embed import CreateEmbeddingRequest, parse_create_request
from api.schemas.search import SearchRequest, parse_search_request
from config.Config import Config
from services.EmbeddingErrors import UnauthorizedError
from services.EmbeddingService import EmbeddingService

BEARER_PREFIX = "Bearer "


def get_cfg() -> Config:
    # use the singleton config from the container
    return get_app_container().cfg


def get_embedding_service() -> EmbeddingService:
    # use the singleton service from the container
    return get_app_container().embedding_service


def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    """
    The caller's bearer token is forwarded to the embedding provider as its API key.
    """
    value = (authorization or "").strip()
    token = value[len(BEARER_PREFIX):].strip() if value.startswith(BEARER_PREFIX) else ""
    if not token:
        raise UnauthorizedError("Missing Authorization header")
    return token


async def get_create_request(request: Request) -> CreateEmbeddingRequest:
    return parse_create_request(await request.body())


async def get_search_request(
        request: Request,
        cfg: Config = Depends(get_cfg),
) -> SearchRequest:
    return parse_search_request(
        await request.body(),
        default_top_k=cfg.default_top_k,
        max_top_k=cfg.max_top_k,
    )
