# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: EmbeddingService
# -----------------------------------------------------------------------------
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from embedding.EmbeddingRecord import EmbeddingRecord, VectorMatch
from embedding.OpenAIEmbedder import OpenAIEmbedder
from services.EmbeddingErrors import (
    BadRequestError,
    EmbeddingProviderError,
    InvalidEmbeddingError,
    NotFoundError,
    ServerError,
    StorageError,
    UpstreamError,
)
from utility.logging_utils import get_class_logger
from vectorstore.EmbeddingVectorStore import EmbeddingVectorStore

ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_id(length: int) -> str:
    """Random base-36 id from the OS CSPRNG; no collision check against the store."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix, e.g. 2026-02-14T10:30:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class EmbeddingService:
    """
    Create / retrieve / search / delete embedding records.
    The embedder and the store are the only collaborators; every failure
    leaves here as an EmbedAPIError subclass.
    """

    embedder: OpenAIEmbedder
    store: EmbeddingVectorStore
    id_length: int = 16
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------
    def create(
            self,
            api_key: str,
            text: str,
            metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            vector = self.embedder.embed_text(text, api_key)
        except EmbeddingProviderError as e:
            raise UpstreamError("Failed to generate embedding", e.status_code) from e
        except InvalidEmbeddingError as e:
            raise ServerError(str(e)) from e

        record_id = generate_id(self.id_length)
        timestamp = utc_timestamp()
        # System fields win over caller keys of the same name
        merged = {**(metadata or {}), "text": text, "timestamp": timestamp}

        record = EmbeddingRecord(
            id=record_id,
            vector=vector,
            text=text,
            timestamp=timestamp,
            metadata=merged,
        )
        try:
            self.store.upsert([record])
        except Exception as e:
            self.logger.exception("Failed to store embedding id='%s': %s", record_id, e)
            raise StorageError("Failed to store embedding") from e

        self.logger.info("Created embedding id='%s' dimensions=%d", record_id, len(vector))
        return {
            "id": record_id,
            "message": "Embedding created successfully",
            "metadata": merged,
        }

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------
    def get(self, embedding_id: str) -> Dict[str, Any]:
        if not embedding_id:
            raise BadRequestError("Missing ID parameter")

        try:
            records = self.store.get_by_ids([embedding_id])
        except Exception as e:
            self.logger.exception("Failed to retrieve embedding id='%s': %s", embedding_id, e)
            raise StorageError("Failed to retrieve embedding") from e

        if not records:
            raise NotFoundError("Embedding not found")

        rec = records[0]
        return {
            "id": rec.id,
            "text": rec.text,
            "embedding": rec.vector,
            "timestamp": rec.timestamp,
            "metadata": rec.metadata,
        }

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def search(
            self,
            api_key: str,
            query: str,
            top_k: int = 5,
            filter: Optional[Dict[str, Any]] = None,
            include_values: bool = False,
            include_metadata: bool = True,
            return_similarity_scores: bool = True,
    ) -> Dict[str, Any]:
        try:
            vector = self.embedder.embed_text(query, api_key)
        except EmbeddingProviderError as e:
            raise UpstreamError(f"OpenAI API failed: {e.body}", e.status_code) from e
        except InvalidEmbeddingError as e:
            raise ServerError(str(e)) from e

        try:
            matches = self.store.query(
                vector,
                top_k=top_k,
                filter=filter,
                return_metadata=True,
                return_values=include_values,
            )
        except Exception as e:
            self.logger.exception("Search failed (top_k=%d, filter=%s): %s", top_k, filter, e)
            raise StorageError(f"Search failed: {e}") from e

        results = self.to_hits(
            matches,
            include_values=include_values,
            include_metadata=include_metadata,
            include_scores=return_similarity_scores,
        )
        self.logger.info("Search returned %d results (top_k=%d)", len(results), top_k)
        return {
            "query": query,
            "results": results,
            "total": len(results),
        }

    @staticmethod
    def to_hits(
            matches: List[VectorMatch],
            include_values: bool = False,
            include_metadata: bool = True,
            include_scores: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Flatten store matches into response hits, keeping the store's ranking.
        Optional keys are omitted rather than sent as null.
        """
        hits: List[Dict[str, Any]] = []
        for m in matches:
            hit: Dict[str, Any] = {"id": m.id}
            if include_scores:
                hit["score"] = m.score
            if m.text is not None:
                hit["text"] = m.text
            if include_metadata and m.metadata is not None:
                hit["metadata"] = m.metadata
            if include_values and m.values is not None:
                hit["values"] = m.values
            hits.append(hit)
        return hits

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------
    def delete(self, embedding_id: str) -> Dict[str, Any]:
        if not embedding_id:
            raise BadRequestError("Missing ID parameter")

        try:
            self.store.delete_by_ids([embedding_id])
        except Exception as e:
            self.logger.exception("Failed to delete embedding id='%s': %s", embedding_id, e)
            raise StorageError("Failed to delete embedding") from e

        self.logger.info("Deleted embedding id='%s'", embedding_id)
        return {"message": "Embedding deleted successfully", "id": embedding_id}
