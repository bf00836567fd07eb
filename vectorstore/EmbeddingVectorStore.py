# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-15
# Updated: 2026-02-14
# Description: EmbeddingVectorStore
# -----------------------------------------------------------------------------

from typing import Protocol, Sequence, Dict, Any, List, runtime_checkable

from embedding.EmbeddingRecord import EmbeddingRecord, VectorMatch


@runtime_checkable
class EmbeddingVectorStore(Protocol):
    def test_connection(self) -> bool:
        ...

    def upsert(self, records: Sequence[EmbeddingRecord]) -> None:
        ...

    def get_by_ids(self, ids: Sequence[str]) -> List[EmbeddingRecord]:
        ...

    def query(
            self,
            vector: Sequence[float],
            top_k: int = 5,
            filter: Dict[str, Any] | None = None,
            return_metadata: bool = True,
            return_values: bool = False,
    ) -> List[VectorMatch]:
        ...

    def delete_by_ids(self, ids: Sequence[str]) -> None:
        ...
