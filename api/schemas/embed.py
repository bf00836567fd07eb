# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: embed.py
# -----------------------------------------------------------------------------
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from services.EmbeddingErrors import BadRequestError

TEXT_FIELD_ERROR = "Missing or invalid text field"


def is_finite_json(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, dict):
        return all(is_finite_json(v) for v in value.values())
    if isinstance(value, list):
        return all(is_finite_json(v) for v in value)
    return True


class CreateEmbeddingRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str = Field(..., min_length=1, strict=True)
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("metadata")
    @classmethod
    def metadata_must_be_json_safe(cls, v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        # NaN / Infinity parse but can never be written back out as JSON
        if v is not None and not is_finite_json(v):
            raise ValueError("metadata contains a non-finite number")
        return v


class CreateEmbeddingResponse(BaseModel):
    id: str
    message: str
    metadata: Dict[str, Any]


class GetEmbeddingResponse(BaseModel):
    id: str
    text: str
    embedding: List[float]
    timestamp: str
    metadata: Dict[str, Any]


class DeleteEmbeddingResponse(BaseModel):
    message: str
    id: str


class ErrorResponse(BaseModel):
    error: str


def request_error_message(e: ValidationError, required_field: str, required_message: str) -> str:
    """
    Map the first failing field to its client-facing message. Body-level
    failures (unparseable JSON, not an object) count as the required field
    missing.
    """
    errors = e.errors()
    loc = errors[0].get("loc") if errors else ()
    if not loc or loc[0] == required_field:
        return required_message
    return f"Invalid {loc[0]} field"


def parse_create_request(raw: bytes) -> CreateEmbeddingRequest:
    try:
        return CreateEmbeddingRequest.model_validate_json(raw or b"")
    except ValidationError as e:
        raise BadRequestError(request_error_message(e, "text", TEXT_FIELD_ERROR)) from e
