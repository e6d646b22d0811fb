import os
import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .infrastructure.logging import setup_logging, RequestLoggingMiddleware

from .config import settings

# Import adapter classes
from .adapters.embedding.ollama_embedding import OllamaEmbeddingService
from .adapters.embedding.openai_embedding import OpenAIEmbeddingService
from .adapters.keyword_extraction.spacy_keyword_extractor import SpacyKeywordExtractor
from .adapters.keyword_extraction.passthrough_keyword_extractor import PassthroughKeywordExtractor
from .adapters.vector_store.chroma_store import ChromaVectorStoreAdapter
from .adapters.vector_store.qdrant_store import QdrantVectorStoreAdapter

from .api.errors import domain_exception_handler
from .core.domain.exceptions import DomainException

# Imports for routers
from .api.routes.search import router as search_router
from .api.routes.save import router as save_router
from .api.routes.health import router as health_router


app = FastAPI(
    title="Semantic Search",
    debug=settings.DEBUG
)

# Setup logging early
setup_logging()
logger = logging.getLogger(__name__)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# CORS (if frontend served separately)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Adjust in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(DomainException, domain_exception_handler)


def build_embedding_service():
    provider = settings.EMBEDDING_PROVIDER.lower()
    if provider == "ollama":
        return OllamaEmbeddingService(
            base_url=str(settings.OLLAMA_EMBEDDING_BASE_URL),
            model_name=settings.OLLAMA_EMBEDDING_MODEL,
            timeout=settings.EMBEDDING_TIMEOUT,
            batch_size=settings.EMBEDDING_BATCH_SIZE,
            concurrency_limit=settings.EMBEDDING_CONCURRENCY,
            max_retries=settings.EMBEDDING_MAX_RETRIES,
            retry_delay=settings.EMBEDDING_RETRY_DELAY,
        )
    if provider == "openai":
        if settings.OPENAI_API_KEY is None:
            raise RuntimeError("OPENAI_API_KEY is required when EMBEDDING_PROVIDER=openai")
        return OpenAIEmbeddingService(
            api_key=settings.OPENAI_API_KEY.get_secret_value(),
            base_url=str(settings.OPENAI_BASE_URL),
            model_name=settings.OPENAI_EMBEDDING_MODEL,
            dimensions=settings.EMBEDDING_DIMENSIONS,
            timeout=settings.EMBEDDING_TIMEOUT,
            batch_size=settings.EMBEDDING_BATCH_SIZE,
            max_retries=settings.EMBEDDING_MAX_RETRIES,
            retry_delay=settings.EMBEDDING_RETRY_DELAY,
        )
    raise RuntimeError(f"Unsupported EMBEDDING_PROVIDER: {settings.EMBEDDING_PROVIDER}")


def build_keyword_extractor():
    if settings.KEYWORD_EXTRACTOR == "spacy":
        return SpacyKeywordExtractor(
            spacy_model=settings.SPACY_MODEL,
            max_terms=settings.KEYWORD_MAX_TERMS,
        )
    if settings.KEYWORD_EXTRACTOR == "none":
        return PassthroughKeywordExtractor()
    raise RuntimeError(f"Unsupported KEYWORD_EXTRACTOR: {settings.KEYWORD_EXTRACTOR}")


def build_vector_store():
    provider = settings.VECTOR_STORE_PROVIDER.lower()
    if provider == "chroma":
        persist_dir = settings.CHROMA_PERSIST_DIR
        if persist_dir:
            os.makedirs(persist_dir, exist_ok=True)
        return ChromaVectorStoreAdapter(
            persist_directory=persist_dir,
            default_limit=settings.DEFAULT_SEARCH_LIMIT,
        )
    if provider == "qdrant":
        return QdrantVectorStoreAdapter(
            url=str(settings.QDRANT_URL).rstrip("/") if settings.QDRANT_URL else None,
            api_key=settings.QDRANT_API_KEY.get_secret_value() if settings.QDRANT_API_KEY else None,
            location=settings.QDRANT_LOCATION,
            default_limit=settings.DEFAULT_SEARCH_LIMIT,
            timeout=settings.QDRANT_TIMEOUT,
        )
    raise RuntimeError(f"Unsupported VECTOR_STORE_PROVIDER: {settings.VECTOR_STORE_PROVIDER}")


# On startup, instantiate and store singleton adapter instances in app.state
@app.on_event("startup")
async def on_startup():
    logger.info("Application startup: instantiating adapters...")

    app.state.embedding_service = build_embedding_service()
    app.state.keyword_extractor = build_keyword_extractor()
    app.state.vector_store = build_vector_store()

    logger.info(
        f"Startup complete: embedding={settings.EMBEDDING_PROVIDER}, "
        f"keywords={settings.KEYWORD_EXTRACTOR}, vector_store={settings.VECTOR_STORE_PROVIDER}"
    )


@app.on_event("shutdown")
async def on_shutdown():
    logger.info("Application shutdown: closing resources...")

    embedding_svc = getattr(app.state, "embedding_service", None)
    if embedding_svc is not None:
        try:
            await embedding_svc.aclose()
            logger.info("Closed embedding_service HTTP client")
        except Exception as e:
            logger.warning(f"Error closing embedding_service client: {e}")

    extractor = getattr(app.state, "keyword_extractor", None)
    if isinstance(extractor, SpacyKeywordExtractor):
        extractor.close()
        logger.info("Closed keyword extractor thread pool")

    vector_store = getattr(app.state, "vector_store", None)
    if vector_store is not None:
        try:
            await vector_store.close()
            logger.info("Closed vector store client")
        except Exception as e:
            logger.warning(f"Error closing vector store: {e}")

    logger.info("Shutdown complete.")


app.include_router(
    health_router,
    prefix="",
    tags=["health"]
)

app.include_router(
    search_router,
    prefix="/search",
    tags=["search"]
)

app.include_router(
    save_router,
    prefix="/save",
    tags=["save"]
)


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT)
