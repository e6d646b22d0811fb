import logging
import time
from typing import List, Optional

from .query_vector import QueryVectorUseCase
from ..ports.vector_store import VectorStore
from ..domain.entities.search import ScoredResult, SearchRequest

logger = logging.getLogger(__name__)


class SearchValuesUseCase:
    """Use case for semantic search over stored values"""

    def __init__(
        self,
        query_vector_use_case: QueryVectorUseCase,
        vector_store: VectorStore,
        collection_name: str,
        default_limit: Optional[int] = None,
    ):
        self.query_vector_use_case = query_vector_use_case
        self.vector_store = vector_store
        self.collection_name = collection_name
        self.default_limit = default_limit

    async def search(self, request: SearchRequest) -> List[ScoredResult]:
        """
        Search the records stored under `request.key` for values
        semantically close to `request.value`.
        """
        start = time.perf_counter()
        query_vector = await self.query_vector_use_case.build_query_vector(request.value)

        limit = request.limit if request.limit is not None else self.default_limit
        results = await self.vector_store.search(
            query_vector=query_vector,
            collection_name=self.collection_name,
            limit=limit,
            filters={"key": request.key},
        )

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Search key={request.key!r} returned {len(results)} results in {elapsed_ms:.1f}ms"
        )
        return results
