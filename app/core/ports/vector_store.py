from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from ..domain.entities.search import ScoredResult, VectorRecord
from ..domain.value_objects.embedding import EmbeddingVector


class VectorStore(ABC):
    """Port for vector storage and retrieval services"""

    @abstractmethod
    async def ensure_collection(self, collection_name: str, dimensions: int) -> None:
        """
        Create the named collection if it does not exist yet.

        Args:
            collection_name: Collection to create
            dimensions: Vector size the collection will hold
        """
        pass

    @abstractmethod
    async def upsert(self, collection_name: str, records: List[VectorRecord]) -> List[str]:
        """
        Store records in a collection, replacing any with the same id.

        Args:
            collection_name: Target collection
            records: Records with embeddings and metadata

        Returns:
            Ids of the stored records
        """
        pass

    @abstractmethod
    async def search(
            self,
            query_vector: EmbeddingVector,
            collection_name: str,
            limit: Optional[int] = None,
            filters: Optional[Dict[str, Any]] = None
    ) -> List[ScoredResult]:
        """
        Search for the nearest stored vectors.

        Args:
            query_vector: Query embedding vector
            collection_name: Collection to search within
            limit: Number of results to return, store default when None
            filters: Exact-match metadata filters

        Returns:
            Scored results ordered by descending score
        """
        pass

    async def close(self) -> None:
        """Release client resources"""
        pass
