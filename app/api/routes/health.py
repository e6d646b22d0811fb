from fastapi import APIRouter, Depends

from ...api.deps import get_embedding_service
from ...config import settings
from ...core.ports.embedding_service import EmbeddingService

router = APIRouter()


@router.get("/")
async def index():
    return {"message": "Hello, World!"}


@router.get("/health")
async def health(
    embedding_service: EmbeddingService = Depends(get_embedding_service)
):
    return {
        "status": "ok",
        "embedding_provider": settings.EMBEDDING_PROVIDER,
        "embedding_model": embedding_service.get_model_info(),
        "keyword_extractor": settings.KEYWORD_EXTRACTOR,
        "vector_store": settings.VECTOR_STORE_PROVIDER,
        "collection": settings.COLLECTION_NAME,
    }
