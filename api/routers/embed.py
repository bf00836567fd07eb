# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: embed.py
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_bearer_token, get_create_request, get_embedding_service
from api.responses import PrettyJSONResponse
from api.schemas.embed import (
    CreateEmbeddingRequest,
    CreateEmbeddingResponse,
    DeleteEmbeddingResponse,
    ErrorResponse,
    GetEmbeddingResponse,
)
from services.EmbeddingService import EmbeddingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/embed", tags=["embeddings"])


def _path_id(embedding_id: str) -> str:
    # Only the first non-empty segment after /embed/ names the record
    segments = [s.strip() for s in (embedding_id or "").split("/")]
    return next((s for s in segments if s), "")


@router.post(
    "",
    response_model=CreateEmbeddingResponse,
    response_class=PrettyJSONResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def post_embed(
        api_key: str = Depends(get_bearer_token),
        req: CreateEmbeddingRequest = Depends(get_create_request),
        svc: EmbeddingService = Depends(get_embedding_service),
) -> PrettyJSONResponse:
    logger.info("POST /embed (start) text_len=%d metadata_keys=%d", len(req.text), len(req.metadata or {}))
    out = svc.create(api_key=api_key, text=req.text, metadata=req.metadata)
    logger.info("POST /embed (done) id='%s'", out["id"])
    return PrettyJSONResponse(out)


@router.get(
    "/{embedding_id:path}",
    response_model=GetEmbeddingResponse,
    response_class=PrettyJSONResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def get_embedding(
        embedding_id: str,
        svc: EmbeddingService = Depends(get_embedding_service),
) -> PrettyJSONResponse:
    embedding_id = _path_id(embedding_id)
    logger.info("GET /embed/{id} (start) id='%s'", embedding_id)
    out = svc.get(embedding_id)
    logger.info("GET /embed/{id} (done) id='%s' dimensions=%d", embedding_id, len(out["embedding"]))
    return PrettyJSONResponse(out)


@router.delete(
    "/{embedding_id:path}",
    response_model=DeleteEmbeddingResponse,
    response_class=PrettyJSONResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def delete_embedding(
        embedding_id: str,
        svc: EmbeddingService = Depends(get_embedding_service),
) -> PrettyJSONResponse:
    embedding_id = _path_id(embedding_id)
    logger.info("DELETE /embed/{id} (start) id='%s'", embedding_id)
    out = svc.delete(embedding_id)
    logger.info("DELETE /embed/{id} (done) id='%s'", embedding_id)
    return PrettyJSONResponse(out)
