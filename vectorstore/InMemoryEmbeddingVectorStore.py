# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-15
# Description: InMemoryEmbeddingVectorStore
# -----------------------------------------------------------------------------
import json
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np

from embedding.EmbeddingRecord import EmbeddingRecord, VectorMatch
from utility.logging_utils import get_class_logger
from vectorstore.EmbeddingVectorStore import EmbeddingVectorStore


def _compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def check(value: Any, operand: Any) -> bool:
        if value is None:
            return False
        try:
            return op(value, operand)
        except TypeError:
            return False
    return check


FILTER_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "$eq": lambda value, operand: value == operand,
    "$ne": lambda value, operand: value != operand,
    "$in": lambda value, operand: value in operand,
    "$nin": lambda value, operand: value not in operand,
    "$lt": _compare(lambda a, b: a < b),
    "$lte": _compare(lambda a, b: a <= b),
    "$gt": _compare(lambda a, b: a > b),
    "$gte": _compare(lambda a, b: a >= b),
}


def matches_filter(metadata: Dict[str, Any], filter: Dict[str, Any] | None) -> bool:
    """
    Evaluate a metadata filter of the form
      {"field": value}                     -> implicit $eq
      {"field": {"$gte": 1, "$lt": 5}}     -> every operator must hold
    All fields must match. Unknown operators raise ValueError.
    """
    if not filter:
        return True

    for key, condition in filter.items():
        value = metadata.get(key)
        if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
            for op, operand in condition.items():
                check = FILTER_OPERATORS.get(op)
                if check is None:
                    raise ValueError(f"Unsupported filter operator '{op}' on field '{key}'")
                if not check(value, operand):
                    return False
        elif value != condition:
            return False
    return True


@dataclass
class InMemoryEmbeddingVectorStore(EmbeddingVectorStore):
    """
    Process-local key-value backend: each record is a JSON string under its id.
    Similarity search is a brute-force cosine scan. Suited to local runs and tests.
    """

    logger: Any = None
    _kv: Dict[str, str] = field(default_factory=dict, init=False, repr=False)
    _lock: Any = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

    # ------------------------------------------------------------------
    # Key-value primitives
    # ------------------------------------------------------------------
    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._kv[key] = value

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._kv.get(key)

    def _snapshot(self) -> List[EmbeddingRecord]:
        with self._lock:
            values = list(self._kv.values())
        return [self._decode(v) for v in values]

    @staticmethod
    def _encode(record: EmbeddingRecord) -> str:
        return json.dumps({
            "id": record.id,
            "vector": list(record.vector),
            "text": record.text,
            "timestamp": record.timestamp,
            "metadata": record.metadata,
        })

    @staticmethod
    def _decode(value: str) -> EmbeddingRecord:
        data = json.loads(value)
        return EmbeddingRecord(
            id=data["id"],
            vector=data["vector"],
            text=data["text"],
            timestamp=data["timestamp"],
            metadata=data.get("metadata") or {},
        )

    # ------------------------------------------------------------------
    # EmbeddingVectorStore
    # ------------------------------------------------------------------
    def test_connection(self) -> bool:
        return True

    def upsert(self, records: Sequence[EmbeddingRecord]) -> None:
        for record in records:
            self.put(record.id, self._encode(record))
        self.logger.debug("Upserted %d embeddings (total=%d)", len(records), self.count())

    def get_by_ids(self, ids: Sequence[str]) -> List[EmbeddingRecord]:
        out: List[EmbeddingRecord] = []
        for rid in ids:
            value = self.get(rid)
            if value is not None:
                out.append(self._decode(value))
        return out

    def query(
            self,
            vector: Sequence[float],
            top_k: int = 5,
            filter: Dict[str, Any] | None = None,
            return_metadata: bool = True,
            return_values: bool = False,
    ) -> List[VectorMatch]:
        candidates = [r for r in self._snapshot() if matches_filter(r.metadata, filter)]
        if not candidates:
            return []

        q = np.asarray(vector, dtype=np.float64)
        dims = {len(r.vector) for r in candidates}
        if dims != {q.shape[0]}:
            raise ValueError(f"Query vector has {q.shape[0]} dimensions, stored vectors have {sorted(dims)}")

        arr = np.asarray([r.vector for r in candidates], dtype=np.float64)
        norms = np.linalg.norm(arr, axis=1) * np.linalg.norm(q) + 1e-12
        scores = arr @ q / norms

        # Stable sort keeps insertion order among equal scores
        order = np.argsort(-scores, kind="stable")[:top_k]

        matches = [
            VectorMatch(
                id=candidates[i].id,
                score=float(scores[i]),
                metadata=dict(candidates[i].metadata) if return_metadata else None,
                values=list(candidates[i].vector) if return_values else None,
            )
            for i in order
        ]
        self.logger.debug("Query returned %d of %d candidates (top_k=%d)", len(matches), len(candidates), top_k)
        return matches

    def delete_by_ids(self, ids: Sequence[str]) -> None:
        with self._lock:
            for rid in ids:
                self._kv.pop(rid, None)

    def count(self) -> int:
        with self._lock:
            return len(self._kv)
