from fastapi import Request, HTTPException, Depends

from ..config import settings

# Adapter classes
from ..adapters.logging.python_logger import PythonLogger

# Port interfaces
from ..core.ports.logger import Logger
from ..core.ports.embedding_service import EmbeddingService
from ..core.ports.keyword_extractor import KeywordExtractor
from ..core.ports.vector_store import VectorStore

# Use-case classes
from ..core.use_cases.query_vector import QueryVectorUseCase
from ..core.use_cases.search_values import SearchValuesUseCase
from ..core.use_cases.save_values import SaveValuesUseCase


# Dependency provider functions
def get_embedding_service(request: Request) -> EmbeddingService:
    embedder = getattr(request.app.state, "embedding_service", None)
    if embedder is None:
        raise HTTPException(status_code=500, detail="EmbeddingService not initialized")
    return embedder


def get_keyword_extractor(request: Request) -> KeywordExtractor:
    extractor = getattr(request.app.state, "keyword_extractor", None)
    if extractor is None:
        raise HTTPException(status_code=500, detail="KeywordExtractor not initialized")
    return extractor


def get_vector_store(request: Request) -> VectorStore:
    vs = getattr(request.app.state, "vector_store", None)
    if vs is None:
        raise HTTPException(status_code=500, detail="VectorStore not initialized")
    return vs


def get_save_logger() -> Logger:
    return PythonLogger("app.core.use_cases.save_values")


def get_query_vector_use_case(
        keyword_extractor: KeywordExtractor = Depends(get_keyword_extractor),
        embedding_service: EmbeddingService = Depends(get_embedding_service),
) -> QueryVectorUseCase:
    return QueryVectorUseCase(
        keyword_extractor=keyword_extractor,
        embedding_service=embedding_service,
        decay_rate=settings.QUERY_DECAY_RATE,
    )


def get_search_values_use_case(
        query_vector_use_case: QueryVectorUseCase = Depends(get_query_vector_use_case),
        vector_store: VectorStore = Depends(get_vector_store),
) -> SearchValuesUseCase:
    return SearchValuesUseCase(
        query_vector_use_case=query_vector_use_case,
        vector_store=vector_store,
        collection_name=settings.COLLECTION_NAME,
        default_limit=settings.DEFAULT_SEARCH_LIMIT,
    )


def get_save_values_use_case(
        embedding_service: EmbeddingService = Depends(get_embedding_service),
        vector_store: VectorStore = Depends(get_vector_store),
        logger: Logger = Depends(get_save_logger),
) -> SaveValuesUseCase:
    return SaveValuesUseCase(
        embedding_service=embedding_service,
        vector_store=vector_store,
        collection_name=settings.COLLECTION_NAME,
        logger=logger,
    )
