from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..value_objects.embedding import EmbeddingVector


@dataclass(frozen=True)
class SearchRequest:
    """A free-text lookup against the records stored under one key"""
    key: str
    value: str
    limit: Optional[int] = None

    def __post_init__(self):
        if self.limit is not None and self.limit <= 0:
            raise ValueError("limit must be positive")


@dataclass(frozen=True)
class SaveRequest:
    """A key and the values to embed and store under it"""
    key: str
    values: List[str]


@dataclass(frozen=True)
class VectorRecord:
    """One stored point: identifier, embedding and metadata"""
    id: str
    vector: EmbeddingVector
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ScoredResult:
    """A search hit returned by the vector store, highest score first"""
    id: str
    score: float
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SaveResult:
    """Ids of the records written for one save request"""
    key: str
    ids: List[str]

    @property
    def count(self) -> int:
        return len(self.ids)
