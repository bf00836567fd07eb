# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: search.py
# -----------------------------------------------------------------------------
from typing import Optional, Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from api.schemas.embed import request_error_message
from services.EmbeddingErrors import BadRequestError

QUERY_FIELD_ERROR = "Missing or invalid query field"


class SearchRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    query: str = Field(..., min_length=1, strict=True)
    top_k: Optional[int] = Field(None, alias="topK", ge=1, strict=True)
    filter: Optional[Dict[str, Any]] = None
    include_values: bool = Field(False, alias="includeValues", strict=True)
    include_metadata: bool = Field(True, alias="includeMetadata", strict=True)
    return_similarity_scores: bool = Field(True, alias="returnSimilarityScores", strict=True)


class SearchHit(BaseModel):
    id: str
    score: Optional[float] = None
    text: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    values: Optional[List[float]] = None


class SearchResponse(BaseModel):
    query: str
    results: List[SearchHit]
    total: int


def parse_search_request(raw: bytes, default_top_k: int, max_top_k: int) -> SearchRequest:
    try:
        req = SearchRequest.model_validate_json(raw or b"")
    except ValidationError as e:
        raise BadRequestError(request_error_message(e, "query", QUERY_FIELD_ERROR)) from e

    if req.top_k is None:
        req.top_k = default_top_k
    elif req.top_k > max_top_k:
        raise BadRequestError("Invalid topK field")
    return req
