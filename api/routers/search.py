# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: search router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_bearer_token, get_embedding_service, get_search_request
from api.responses import PrettyJSONResponse
from api.schemas.embed import ErrorResponse
from api.schemas.search import SearchRequest, SearchResponse
from services.EmbeddingService import EmbeddingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.post(
    "",
    response_model=SearchResponse,
    response_class=PrettyJSONResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def post_search(
        api_key: str = Depends(get_bearer_token),
        req: SearchRequest = Depends(get_search_request),
        svc: EmbeddingService = Depends(get_embedding_service),
) -> PrettyJSONResponse:
    logger.info(
        "POST /search (start) query_len=%d top_k=%d filter=%s",
        len(req.query),
        req.top_k,
        req.filter,
    )
    out = svc.search(
        api_key=api_key,
        query=req.query,
        top_k=req.top_k,
        filter=req.filter,
        include_values=req.include_values,
        include_metadata=req.include_metadata,
        return_similarity_scores=req.return_similarity_scores,
    )
    logger.info("POST /search (done) total=%d", out["total"])
    return PrettyJSONResponse(out)
