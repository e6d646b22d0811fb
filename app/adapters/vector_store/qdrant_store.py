import logging
import time
from typing import Any, Dict, List, Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models

from ...core.ports.vector_store import VectorStore
from ...core.domain.entities.search import ScoredResult, VectorRecord
from ...core.domain.exceptions import VectorStoreError
from ...core.domain.value_objects.embedding import EmbeddingVector

logger = logging.getLogger(__name__)


class QdrantVectorStoreAdapter(VectorStore):
    """Qdrant implementation of the VectorStore port"""

    def __init__(
            self,
            url: Optional[str] = None,
            api_key: Optional[str] = None,
            location: str = ":memory:",
            default_limit: int = 10,
            timeout: Optional[int] = None,
            client: Optional[AsyncQdrantClient] = None,
    ):
        """
        Args:
            url: Qdrant server URL; takes precedence over `location`.
            api_key: API key for Qdrant Cloud.
            location: ":memory:" or a local path when no URL is given.
            default_limit: Result count when a search gives no limit.
            client: Pre-built client, mainly for tests.
        """
        self.default_limit = default_limit
        if client is not None:
            self._client = client
        elif url:
            self._client = AsyncQdrantClient(url=url, api_key=api_key, timeout=timeout)
        elif location == ":memory:":
            self._client = AsyncQdrantClient(location=":memory:")
        else:
            self._client = AsyncQdrantClient(path=location)

    @staticmethod
    def _build_filter(filters: Optional[Dict[str, Any]]) -> Optional[models.Filter]:
        if not filters:
            return None
        return models.Filter(
            must=[
                models.FieldCondition(key=key, match=models.MatchValue(value=value))
                for key, value in filters.items()
            ]
        )

    @staticmethod
    def _point_id_to_str(point_id: Any) -> str:
        # Qdrant ids are unsigned ints or UUIDs
        if point_id is None:
            return ""
        return str(point_id)

    async def ensure_collection(self, collection_name: str, dimensions: int) -> None:
        try:
            if await self._client.collection_exists(collection_name):
                return
            await self._client.create_collection(
                collection_name=collection_name,
                vectors_config=models.VectorParams(
                    size=dimensions,
                    distance=models.Distance.COSINE,
                ),
            )
            logger.info(f"Created collection {collection_name!r} with {dimensions} dimensions")
        except Exception as e:
            logger.error(f"Failed to ensure collection {collection_name!r}: {e}")
            raise VectorStoreError(f"Vector store error: {str(e)}") from e

    async def upsert(self, collection_name: str, records: List[VectorRecord]) -> List[str]:
        if not records:
            return []
        points = [
            models.PointStruct(
                id=record.id,
                vector=[float(v) for v in record.vector.values],
                payload=dict(record.metadata),
            )
            for record in records
        ]
        try:
            await self._client.upsert(
                collection_name=collection_name,
                points=points,
                wait=True,
            )
        except Exception as e:
            logger.error(f"Upsert into {collection_name!r} failed: {e}")
            raise VectorStoreError(f"Vector store error: {str(e)}") from e
        return [record.id for record in records]

    async def search(
            self,
            query_vector: EmbeddingVector,
            collection_name: str,
            limit: Optional[int] = None,
            filters: Optional[Dict[str, Any]] = None
    ) -> List[ScoredResult]:
        start = time.perf_counter()
        try:
            if not await self._client.collection_exists(collection_name):
                logger.info(f"Collection {collection_name!r} does not exist yet")
                return []
            response = await self._client.query_points(
                collection_name=collection_name,
                query=[float(v) for v in query_vector.values],
                query_filter=self._build_filter(filters),
                limit=limit or self.default_limit,
                with_payload=True,
            )
        except Exception as e:
            logger.error(f"Search in {collection_name!r} failed: {e}")
            raise VectorStoreError(f"Vector store error: {str(e)}") from e

        results = [
            ScoredResult(
                id=self._point_id_to_str(point.id),
                score=float(point.score),
                metadata=dict(point.payload or {}),
            )
            for point in response.points
        ]
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Search in {collection_name!r} took {elapsed_ms:.1f}ms")
        return results

    async def close(self) -> None:
        await self._client.close()
