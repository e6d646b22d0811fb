# app/core/use_cases/query_vector.py

import logging
from typing import List

from ..ports.embedding_service import EmbeddingService
from ..ports.keyword_extractor import KeywordExtractor
from ..domain.value_objects.embedding import EmbeddingVector
from ..domain.exceptions import (
    DomainException,
    EmbeddingGenerationError,
    InvalidRequestError,
    KeywordExtractionError,
)
from ..utils.vector_aggregation import DEFAULT_DECAY_RATE, aggregate_vectors, decay_weights

logger = logging.getLogger(__name__)


class QueryVectorUseCase:
    """Builds a single query vector from a raw query"""

    def __init__(
        self,
        keyword_extractor: KeywordExtractor,
        embedding_service: EmbeddingService,
        decay_rate: float = DEFAULT_DECAY_RATE,
    ):
        self.keyword_extractor = keyword_extractor
        self.embedding_service = embedding_service
        self.decay_rate = decay_rate

    async def build_query_vector(self, raw_query: str) -> EmbeddingVector:
        """
        Turn a raw query into one decay-weighted query vector.

        Pipeline:
        1. Extract keywords (falls back to [raw_query])
        2. Embed all keywords in one batched call
        3. Weight vectors by position: decay_rate ** i
        4. Weighted mean of the vectors

        Fails fast: nothing is retried here and no default vector is
        substituted.

        Args:
            raw_query: The user query

        Returns:
            EmbeddingVector for similarity search

        Raises:
            InvalidRequestError: the query is empty or only whitespace
        """
        if not raw_query or not raw_query.strip():
            raise InvalidRequestError("Query value cannot be blank")

        keywords = await self._extract_keywords(raw_query)
        vectors = await self._embed(keywords)

        if len(vectors) != len(keywords):
            logger.warning(
                f"Embedding provider returned {len(vectors)} vectors for {len(keywords)} keywords"
            )

        weights = decay_weights(len(vectors), self.decay_rate)
        values = aggregate_vectors([v.values for v in vectors], weights)

        logger.debug(f"Built query vector from keywords {keywords} with weights {weights}")
        return EmbeddingVector(
            values=values,
            model_name=vectors[0].model_name,
            dimensions=len(values),
        )

    async def _extract_keywords(self, raw_query: str) -> List[str]:
        try:
            keywords = await self.keyword_extractor.extract_keywords(raw_query)
        except DomainException:
            raise
        except Exception as e:
            raise KeywordExtractionError(f"Keyword extraction failed: {str(e)}") from e

        usable = [k for k in (keywords or []) if k and k.strip()]
        if not usable:
            logger.debug("No usable keywords extracted, falling back to the raw query")
            return [raw_query]
        return usable

    async def _embed(self, keywords: List[str]) -> List[EmbeddingVector]:
        try:
            return await self.embedding_service.generate_embeddings_batch(keywords)
        except DomainException:
            raise
        except Exception as e:
            raise EmbeddingGenerationError(f"Error generating embeddings: {str(e)}") from e
