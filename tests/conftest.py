"""
Shared pytest fixtures for all tests.

This module provides reusable fixtures for:
- Mock ports (embedding service, keyword extractor, vector store)
- Sample domain entities
- FastAPI TestClient with dependency overrides
"""

from typing import List
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.core.domain.entities.search import ScoredResult
from app.core.domain.value_objects.embedding import EmbeddingVector
from app.core.ports.embedding_service import EmbeddingService
from app.core.ports.keyword_extractor import KeywordExtractor
from app.core.ports.vector_store import VectorStore


# ============================================================================
# SAMPLE DOMAIN ENTITIES
# ============================================================================

def _make_vector(values: List[float], model_name: str = "test-model") -> EmbeddingVector:
    return EmbeddingVector(values=list(values), model_name=model_name, dimensions=len(values))


@pytest.fixture
def make_vector():
    """Factory for EmbeddingVector objects sized to their values."""
    return _make_vector


@pytest.fixture
def sample_embeddings() -> List[EmbeddingVector]:
    """Two orthogonal 3-dimensional embeddings."""
    return [
        _make_vector([1.0, 0.0, 0.0]),
        _make_vector([0.0, 1.0, 0.0]),
    ]


@pytest.fixture
def sample_results() -> List[ScoredResult]:
    """Scored results as a vector store returns them."""
    return [
        ScoredResult(id="3f1c", score=0.91, metadata={"key": "color", "value": "red"}),
        ScoredResult(id="42", score=0.73, metadata={"key": "color", "value": "crimson"}),
    ]


# ============================================================================
# MOCK PORTS
# ============================================================================

@pytest.fixture
def mock_embedding_service(sample_embeddings) -> AsyncMock:
    """Embedding service returning one vector per text, in order."""
    mock = AsyncMock(spec=EmbeddingService)

    async def embed(texts):
        return [sample_embeddings[i % len(sample_embeddings)] for i in range(len(texts))]

    mock.generate_embeddings_batch.side_effect = embed
    mock.get_model_info.return_value = {
        "model_name": "test-model",
        "dimensions": 3,
        "provider": "ollama",
    }
    return mock


@pytest.fixture
def mock_keyword_extractor() -> AsyncMock:
    mock = AsyncMock(spec=KeywordExtractor)
    mock.extract_keywords.return_value = ["shirt", "striped"]
    return mock


@pytest.fixture
def mock_vector_store(sample_results) -> AsyncMock:
    mock = AsyncMock(spec=VectorStore)
    mock.search.return_value = sample_results

    async def upsert(collection_name, records):
        return [record.id for record in records]

    mock.upsert.side_effect = upsert
    return mock


# ============================================================================
# API
# ============================================================================

@pytest.fixture
def api_client(mock_embedding_service, mock_keyword_extractor, mock_vector_store):
    """TestClient with adapters replaced by mocks; startup hooks are not run."""
    from app.main import app
    from app.api import deps

    app.dependency_overrides[deps.get_embedding_service] = lambda: mock_embedding_service
    app.dependency_overrides[deps.get_keyword_extractor] = lambda: mock_keyword_extractor
    app.dependency_overrides[deps.get_vector_store] = lambda: mock_vector_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
