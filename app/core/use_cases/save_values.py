import uuid
from typing import List

from ..ports.embedding_service import EmbeddingService
from ..ports.vector_store import VectorStore
from ..ports.logger import Logger
from ..domain.entities.search import SaveRequest, SaveResult, VectorRecord
from ..domain.exceptions import (
    DomainException,
    EmbeddingGenerationError,
    InvalidRequestError,
)


class SaveValuesUseCase:
    """Use case for embedding values and persisting them under a key"""

    def __init__(
            self,
            embedding_service: EmbeddingService,
            vector_store: VectorStore,
            collection_name: str,
            logger: Logger,
        ):
        self.embedding_service = embedding_service
        self.vector_store = vector_store
        self.collection_name = collection_name
        self.logger = logger

    async def save(self, request: SaveRequest) -> SaveResult:
        """
        Embed every value and store one record per value.
        Each record's metadata holds the key and the original value.
        """
        values = list(request.values)
        if not values:
            raise InvalidRequestError("At least one value is required")
        for index, value in enumerate(values):
            if not value or not value.strip():
                raise InvalidRequestError(f"Value at index {index} is blank")

        try:
            embeddings = await self.embedding_service.generate_embeddings_batch(values)
        except DomainException:
            raise
        except Exception as e:
            raise EmbeddingGenerationError(f"Error generating embeddings: {str(e)}") from e

        if len(embeddings) != len(values):
            raise EmbeddingGenerationError(
                f"Expected {len(values)} embeddings, got {len(embeddings)}"
            )

        await self.vector_store.ensure_collection(
            self.collection_name, embeddings[0].dimensions
        )

        records: List[VectorRecord] = [
            VectorRecord(
                id=str(uuid.uuid4()),
                vector=embedding,
                metadata={"key": request.key, "value": value},
            )
            for value, embedding in zip(values, embeddings)
        ]
        ids = await self.vector_store.upsert(self.collection_name, records)
        result = SaveResult(key=request.key, ids=ids)

        self.logger.info(
            f"Saved {result.count} values under key {request.key!r} "
            f"in collection {self.collection_name!r}"
        )
        return result
