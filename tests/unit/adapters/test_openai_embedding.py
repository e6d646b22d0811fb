"""
Tests for OpenAIEmbeddingService against a mocked HTTP transport.
"""
import json

import httpx
import pytest

from app.adapters.embedding.openai_embedding import OpenAIEmbeddingService
from app.core.domain.exceptions import EmbeddingGenerationError


def make_service(handler, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    kwargs.setdefault("retry_delay", 0.0)
    return OpenAIEmbeddingService(api_key="sk-test", client=client, **kwargs)


class TestOpenAIEmbeddingService:

    @pytest.mark.asyncio
    async def test_request_shape(self):
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["auth"] = request.headers.get("authorization")
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": [{"index": 0, "embedding": [0.1, 0.2]}]})

        service = make_service(handler, dimensions=2)
        await service.generate_embeddings_batch(["red"])

        assert captured["url"] == "https://api.openai.com/v1/embeddings"
        assert captured["auth"] == "Bearer sk-test"
        assert captured["body"] == {"model": "text-embedding-3-small", "input": ["red"], "dimensions": 2}

    @pytest.mark.asyncio
    async def test_results_ordered_by_index(self):
        def handler(request):
            return httpx.Response(200, json={"data": [
                {"index": 1, "embedding": [0.0, 1.0]},
                {"index": 0, "embedding": [1.0, 0.0]},
            ]})

        service = make_service(handler)
        result = await service.generate_embeddings_batch(["shirt", "striped"])

        assert [v.values for v in result] == [[1.0, 0.0], [0.0, 1.0]]

    @pytest.mark.asyncio
    async def test_batches_are_concatenated_in_order(self):
        def handler(request):
            texts = json.loads(request.content)["input"]
            return httpx.Response(200, json={"data": [
                {"index": i, "embedding": [float(len(t))]} for i, t in enumerate(texts)
            ]})

        service = make_service(handler, batch_size=2)
        result = await service.generate_embeddings_batch(["a", "bb", "ccc"])

        assert [v.values for v in result] == [[1.0], [2.0], [3.0]]

    @pytest.mark.asyncio
    async def test_unauthorized_is_not_retried(self):
        calls = {"count": 0}

        def handler(request):
            calls["count"] += 1
            return httpx.Response(401, json={"error": "invalid key"})

        service = make_service(handler)

        with pytest.raises(EmbeddingGenerationError, match="HTTP 401"):
            await service.generate_embeddings_batch(["red"])
        assert calls["count"] == 1

    @pytest.mark.asyncio
    async def test_malformed_response(self):
        def handler(request):
            return httpx.Response(200, json={"data": [{"index": 0}]})

        service = make_service(handler)

        with pytest.raises(EmbeddingGenerationError, match="Malformed"):
            await service.generate_embeddings_batch(["red"])

    def test_api_key_required(self):
        with pytest.raises(ValueError):
            OpenAIEmbeddingService(api_key="")

    def test_model_info(self):
        service = make_service(lambda request: httpx.Response(200), dimensions=256)

        info = service.get_model_info()

        assert info["provider"] == "openai"
        assert info["model_name"] == "text-embedding-3-small"
        assert info["dimensions"] == 256
