# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-16
# Updated: 2026-02-14
# Description: ChromaEmbeddingVectorStore
# -----------------------------------------------------------------------------
import base64
import json
from dataclasses import dataclass
from typing import Sequence, Dict, Any, List, Optional, Tuple
from urllib.parse import urlparse

import chromadb
import numpy as np
from chromadb import ClientAPI
from chromadb.api.models import Collection

from config.Config import Config
from embedding.EmbeddingRecord import EmbeddingRecord, VectorMatch
from utility.logging_utils import get_class_logger
from vectorstore.EmbeddingVectorStore import EmbeddingVectorStore

_SCALAR_TYPES = (str, int, float, bool)


def encode_metadata(metadata: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Chroma only stores scalar metadata values. Lists, dicts and nulls are
    stored as JSON strings; the returned key list says which ones.
    """
    encoded: Dict[str, Any] = {}
    json_keys: List[str] = []
    for k, v in metadata.items():
        if isinstance(v, _SCALAR_TYPES):
            encoded[k] = v
        else:
            encoded[k] = json.dumps(v)
            json_keys.append(k)
    return encoded, json_keys


def decode_metadata(metadata: Optional[Dict[str, Any]], json_keys: Sequence[str] = ()) -> Dict[str, Any]:
    if not metadata:
        return {}
    decoded = dict(metadata)
    for k in json_keys:
        if k in decoded:
            decoded[k] = json.loads(decoded[k])
    return decoded


def encode_document(text: str, vector: Sequence[float], json_keys: Sequence[str]) -> str:
    """
    The document slot carries what callers cannot write: the exact float64
    vector (Chroma keeps only a float32 copy for its index) and the list of
    JSON-encoded metadata keys.
    """
    packed = np.asarray(vector, dtype="<f8").tobytes()
    return json.dumps({
        "text": text,
        "vector_f64": base64.b64encode(packed).decode("ascii"),
        "json_keys": list(json_keys),
    })


def decode_document(document: Optional[str]) -> Dict[str, Any]:
    """
    Returns {"text", "vector", "json_keys"}. A document not written by this
    store is taken as plain text with no exact vector.
    """
    if not document:
        return {"text": None, "vector": None, "json_keys": []}
    try:
        envelope = json.loads(document)
    except ValueError:
        envelope = None
    if not isinstance(envelope, dict) or "vector_f64" not in envelope:
        return {"text": document, "vector": None, "json_keys": []}

    raw = base64.b64decode(envelope["vector_f64"])
    return {
        "text": envelope.get("text"),
        "vector": np.frombuffer(raw, dtype="<f8").tolist(),
        "json_keys": envelope.get("json_keys") or [],
    }


def to_chroma_where(filter: Dict[str, Any] | None) -> Dict[str, Any] | None:
    """
    Chroma requires exactly one top-level key; several field conditions are
    combined under $and. Operator syntax is forwarded untouched.
    """
    if not filter:
        return None
    if len(filter) == 1:
        return filter
    return {"$and": [{k: v} for k, v in filter.items()]}


def _as_list(vec: Any) -> List[float]:
    if hasattr(vec, "tolist"):
        vec = vec.tolist()
    return [float(x) for x in vec]


def _first(res: Dict[str, Any], key: str) -> List[Any]:
    # query() returns list-of-lists (one per query vector); numpy arrays are not truth-testable
    outer = res.get(key)
    if outer is None or len(outer) == 0:
        return []
    inner = outer[0]
    return list(inner) if inner is not None else []


@dataclass
class ChromaEmbeddingVectorStore(EmbeddingVectorStore):
    cfg: Config
    collection_name: str = ""
    client: Any = None
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self.collection_name = self.collection_name or self.cfg.vector_collection

        if self.client is None:
            self.client = self._build_client()

        # Cosine space so that 1 - distance is a similarity score
        self.collection: Collection = self.client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine"},
        )
        self.logger.info(
            "Chroma collection ready: '%s' (mode=%s, tenant=%s, db=%s)",
            self.collection_name,
            self.cfg.chroma_mode,
            self.cfg.chroma_tenant,
            self.cfg.chroma_database,
        )

    def _build_client(self) -> ClientAPI:
        mode = self.cfg.chroma_mode
        if mode == "cloud":
            self.logger.info(
                "Initialising Chroma Cloud client "
                f"(tenant={self.cfg.chroma_tenant}, database={self.cfg.chroma_database})"
            )
            return chromadb.CloudClient(
                tenant=self.cfg.chroma_tenant,
                database=self.cfg.chroma_database,
                api_key=self.cfg.chroma_api_key,
            )
        if mode == "http":
            url = urlparse(self.cfg.chroma_endpoint)
            ssl = url.scheme == "https"
            headers = {"x-chroma-token": self.cfg.chroma_api_key} if self.cfg.chroma_api_key else None
            self.logger.info("Initialising Chroma HTTP client (endpoint=%s)", self.cfg.chroma_endpoint)
            return chromadb.HttpClient(
                host=url.hostname or "localhost",
                port=url.port or (443 if ssl else 8000),
                ssl=ssl,
                headers=headers,
            )
        self.logger.info("Initialising Chroma persistent client (path=%s)", self.cfg.chroma_persist_dir)
        return chromadb.PersistentClient(path=self.cfg.chroma_persist_dir)

    def test_connection(self) -> bool:
        """
        Simple health check: can we talk to Chroma and our collection?
        """
        try:
            # count() is cheap and exercises the connection + auth
            _ = self.collection.count()
            return True
        except Exception as e:
            self.logger.error("Chroma connection failed: %s", e)
            return False

    def upsert(self, records: Sequence[EmbeddingRecord]) -> None:
        if not records:
            return

        metadatas: List[Dict[str, Any]] = []
        documents: List[str] = []
        for r in records:
            encoded, json_keys = encode_metadata(r.metadata)
            metadatas.append(encoded)
            documents.append(encode_document(r.text, r.vector, json_keys))

        self.collection.upsert(
            ids=[r.id for r in records],
            embeddings=[list(r.vector) for r in records],
            metadatas=metadatas,
            documents=documents,
        )
        self.logger.info(
            "Upserted %d embeddings into Chroma collection '%s'",
            len(records),
            self.collection_name,
        )

    def get_by_ids(self, ids: Sequence[str]) -> List[EmbeddingRecord]:
        res: Dict[str, Any] = self.collection.get(
            ids=list(ids),
            include=["embeddings", "metadatas", "documents"],
        )

        found_ids = list(res.get("ids") or [])
        embeddings = res.get("embeddings")
        embeddings = [] if embeddings is None else list(embeddings)
        metadatas = list(res.get("metadatas") or [])
        documents = list(res.get("documents") or [])

        records: List[EmbeddingRecord] = []
        for i, rid in enumerate(found_ids):
            doc = decode_document(documents[i] if i < len(documents) else None)
            md = decode_metadata(metadatas[i] if i < len(metadatas) else None, doc["json_keys"])
            text = md.get("text")
            if text is None:
                text = doc["text"]

            vector = doc["vector"]
            if vector is None:
                vector = _as_list(embeddings[i]) if i < len(embeddings) else []

            records.append(EmbeddingRecord(
                id=rid,
                vector=vector,
                text=text or "",
                timestamp=md.get("timestamp", ""),
                metadata=md,
            ))

        self.logger.debug("get_by_ids requested=%d found=%d", len(ids), len(records))
        return records

    def query(
            self,
            vector: Sequence[float],
            top_k: int = 5,
            filter: Dict[str, Any] | None = None,
            return_metadata: bool = True,
            return_values: bool = False,
    ) -> List[VectorMatch]:
        self.logger.info(
            "Querying Chroma collection '%s' (top_k=%d, filter=%s)",
            self.collection_name,
            top_k,
            filter,
        )

        # Documents hold the exact vectors and the JSON-encoded key list
        include = ["distances", "documents"]
        if return_metadata:
            include.append("metadatas")
        if return_values:
            include.append("embeddings")

        query_kwargs: Dict[str, Any] = {
            "query_embeddings": [list(vector)],
            "n_results": top_k,
            "include": include,
        }
        where = to_chroma_where(filter)
        if where is not None:
            self.logger.debug("Applying metadata filter (where=%s)", where)
            query_kwargs["where"] = where

        try:
            res = self.collection.query(**query_kwargs)
        except Exception as e:
            self.logger.error("Error during Chroma query: %s", str(e), exc_info=True)
            raise

        ids = _first(res, "ids")
        distances = _first(res, "distances")
        documents = _first(res, "documents")
        metadatas = _first(res, "metadatas") if return_metadata else []
        values = _first(res, "embeddings") if return_values else []

        # Chroma already ranks by ascending distance; keep its order
        matches: List[VectorMatch] = []
        for i, mid in enumerate(ids):
            dist = distances[i] if i < len(distances) else None
            doc = decode_document(documents[i] if i < len(documents) else None)

            metadata = None
            if i < len(metadatas):
                metadata = decode_metadata(metadatas[i], doc["json_keys"])

            match_values = None
            if return_values:
                match_values = doc["vector"]
                if match_values is None and i < len(values):
                    match_values = _as_list(values[i])

            matches.append(VectorMatch(
                id=mid,
                score=1.0 - float(dist) if dist is not None else 0.0,
                metadata=metadata,
                values=match_values,
            ))

        self.logger.info(
            "Chroma search complete: returned %d results (requested %d)",
            len(matches),
            top_k,
        )
        return matches

    def delete_by_ids(self, ids: Sequence[str]) -> None:
        # Chroma ignores unknown ids, which keeps deletes idempotent
        unique_ids = list(dict.fromkeys(ids))
        self.logger.info(
            "Deleting %d ids from collection '%s'",
            len(unique_ids),
            self.collection_name,
        )
        try:
            self.collection.delete(ids=unique_ids)
        except Exception as e:
            self.logger.error(
                "Failed to delete ids %s from collection '%s': %s",
                unique_ids,
                self.collection_name,
                e,
            )
            raise
