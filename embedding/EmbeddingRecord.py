# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Description: EmbeddingRecord
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class EmbeddingRecord:
    """Stored embedding: vector + original text + creation time + merged metadata."""
    id: str
    vector: List[float]
    text: str
    timestamp: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class VectorMatch:
    """One ranked hit returned by a vector store query, best first."""
    id: str
    score: float
    metadata: Optional[Dict[str, Any]] = None
    values: Optional[List[float]] = None

    @property
    def text(self) -> Optional[str]:
        return self.metadata.get("text") if self.metadata else None
