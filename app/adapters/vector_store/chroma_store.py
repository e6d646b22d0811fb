import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Dict, Any, Union
import chromadb
from chromadb.config import Settings
from ...core.ports.vector_store import VectorStore
from ...core.domain.entities.search import ScoredResult, VectorRecord
from ...core.domain.exceptions import VectorStoreError
from ...core.domain.value_objects.embedding import EmbeddingVector

logger = logging.getLogger(__name__)


class ChromaVectorStoreAdapter(VectorStore):
    """
    Chroma-based implementation of the VectorStore port using the PersistentClient API.
    """

    def __init__(
            self,
            persist_directory: Optional[str] = None,
            default_limit: int = 10,
            client: Optional[Any] = None,
    ):
        """
        Args:
            persist_directory: Path to persist Chroma DB files (local folder).
                An in-memory client is used when None.
            default_limit: Result count when a search gives no limit.
            client: Pre-built Chroma client, mainly for tests.
        """
        # Thread pool executor for wrapping sync calls
        self._executor = ThreadPoolExecutor()
        self.default_limit = default_limit

        if client is not None:
            self._client = client
        elif persist_directory:
            self._client = chromadb.PersistentClient(
                path=persist_directory,
                settings=Settings(anonymized_telemetry=False),
            )
        else:
            self._client = chromadb.EphemeralClient(
                settings=Settings(anonymized_telemetry=False),
            )
        self._collections: Dict[str, Any] = {}

    def _get_collection(self, name: str):
        collection = self._collections.get(name)
        if collection is None:
            collection = self._client.get_or_create_collection(
                name=name,
                configuration={
                    "hnsw": {
                        "space": "cosine",
                        "ef_search": 100,
                        "ef_construction": 100,
                        "max_neighbors": 16,
                    }
                }
            )
            self._collections[name] = collection
        return collection

    def _sanitize_metadata_value(self, value: Any) -> Union[str, int, float, bool]:
        """
        Chroma only accepts str, int, float, bool (no None values).
        """
        if value is None:
            return ""
        elif isinstance(value, (bool, int, float, str)):
            return value
        elif isinstance(value, (list, tuple)):
            items = [str(item) for item in value if item is not None]
            return ",".join(items)
        elif isinstance(value, dict):
            return str({k: self._sanitize_metadata_value(v) for k, v in value.items()})
        else:
            return str(value)

    def _sanitize_metadata(self, metadata: Dict[str, Any]) -> Dict[str, Union[str, int, float, bool]]:
        return {key: self._sanitize_metadata_value(value) for key, value in metadata.items()}

    def _build_chroma_where_filter(self, filters: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Build a Chroma where filter from exact-match filters.
        Chroma requires an explicit $and for more than one condition.
        """
        if not filters:
            return None
        conditions = [{key: value} for key, value in filters.items()]
        if len(conditions) == 1:
            return conditions[0]
        return {"$and": conditions}

    async def _run(self, fn, *args):
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, fn, *args)
        except VectorStoreError:
            raise
        except Exception as e:
            logger.error(f"Chroma operation {fn.__name__} failed: {e}")
            raise VectorStoreError(f"Vector store error: {str(e)}") from e

    async def ensure_collection(self, collection_name: str, dimensions: int) -> None:
        # Chroma infers the dimension from the first add
        await self._run(self._get_collection, collection_name)

    async def upsert(self, collection_name: str, records: List[VectorRecord]) -> List[str]:
        if not records:
            return []
        return await self._run(self._upsert_sync, collection_name, records)

    def _upsert_sync(self, collection_name: str, records: List[VectorRecord]) -> List[str]:
        ids: List[str] = []
        embeddings: List[List[float]] = []
        metadatas: List[Dict[str, Any]] = []
        documents: List[str] = []

        for record in records:
            ids.append(record.id)
            embeddings.append(record.vector.values)
            metadatas.append(self._sanitize_metadata(record.metadata))
            documents.append(str(record.metadata.get("value") or ""))

        self._get_collection(collection_name).upsert(
            ids=ids,
            embeddings=embeddings,
            metadatas=metadatas,
            documents=documents
        )
        return ids

    async def search(
            self,
            query_vector: EmbeddingVector,
            collection_name: str,
            limit: Optional[int] = None,
            filters: Optional[Dict[str, Any]] = None
    ) -> List[ScoredResult]:
        """
        Search for similar records by cosine similarity, with optional metadata filters.
        """
        where = self._build_chroma_where_filter(filters)
        top_k = limit or self.default_limit
        return await self._run(self._search_sync, collection_name, query_vector, where, top_k)

    def _search_sync(
            self,
            collection_name: str,
            query_vector: EmbeddingVector,
            where: Optional[Dict[str, Any]],
            top_k: int,
    ) -> List[ScoredResult]:
        start = time.perf_counter()

        results = self._get_collection(collection_name).query(
            query_embeddings=[query_vector.values],
            n_results=top_k,
            where=where,
            include=['metadatas', 'distances']
        )

        ids_list = results.get("ids") or [[]]
        metadatas_list = results.get("metadatas") or [[]]
        distances_list = results.get("distances") or [[]]

        scored: List[ScoredResult] = []
        for idx, record_id in enumerate(ids_list[0]):
            # Cosine distance -> similarity
            distance = distances_list[0][idx] if distances_list[0] else 0.0
            metadata = metadatas_list[0][idx] if metadatas_list[0] else None
            scored.append(ScoredResult(
                id=str(record_id),
                score=1.0 - distance,
                metadata=dict(metadata or {}),
            ))

        scored.sort(key=lambda r: r.score, reverse=True)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Search in {collection_name!r} took {elapsed_ms:.1f}ms")
        return scored

    async def close(self) -> None:
        self._executor.shutdown(wait=True)
