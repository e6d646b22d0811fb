import logging
import time
from typing import List, Dict, Any, Optional

import httpx

from .base_embedding import BaseEmbeddingService
from ...core.domain.value_objects.embedding import EmbeddingVector
from ...core.domain.exceptions import EmbeddingGenerationError

logger = logging.getLogger(__name__)


class OpenAIEmbeddingService(BaseEmbeddingService):
    """Embeddings from an OpenAI-compatible /embeddings endpoint"""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model_name: str = "text-embedding-3-small",
        dimensions: Optional[int] = None,
        timeout: int = 60,
        batch_size: int = 64,
        max_retries: int = 3,
        retry_delay: float = 2.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise ValueError("api_key is required for OpenAIEmbeddingService")
        super().__init__(
            model_name=model_name,
            timeout=timeout,
            batch_size=batch_size,
            max_retries=max_retries,
            retry_delay=retry_delay,
            client=client,
        )
        self.base_url = base_url.rstrip('/')
        self.dimensions = dimensions
        self._headers = {"Authorization": f"Bearer {api_key}"}

    def _build_payload(self, batch: List[str]) -> dict:
        payload: Dict[str, Any] = {"model": self.model_name, "input": batch}
        if self.dimensions:
            payload["dimensions"] = self.dimensions
        return payload

    async def _embed_batch(self, batch: List[str]) -> List[List[float]]:
        result = await self._make_request_with_retry(
            f"{self.base_url}/embeddings",
            self._build_payload(batch),
            headers=self._headers,
            text_preview=batch[0],
        )
        data = result.get("data") or []
        if len(data) != len(batch):
            raise EmbeddingGenerationError(
                f"Expected {len(batch)} embeddings in response, got {len(data)}"
            )
        # Each item carries its input position; do not trust list order
        ordered = sorted(data, key=lambda item: item.get("index", 0))
        return [item["embedding"] for item in ordered]

    async def generate_embeddings_batch(self, texts: List[str]) -> List[EmbeddingVector]:
        if not texts:
            return []

        cleaned = self._validate_batch(texts)
        start = time.perf_counter()

        raw: List[List[float]] = []
        try:
            for batch in self._batches(cleaned):
                raw.extend(await self._embed_batch(batch))
        except EmbeddingGenerationError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise EmbeddingGenerationError(f"Malformed embedding response: {str(e)}") from e

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Encoded {len(raw)} texts with {self.model_name} in {elapsed_ms:.1f}ms")
        return [self._to_vector(values) for values in raw]

    def get_model_info(self) -> Dict[str, Any]:
        if self._model_info is None:
            self._model_info = {
                "model_name": self.model_name,
                "dimensions": self.dimensions,
                "provider": "openai",
                "base_url": self.base_url,
                "batch_size": self.batch_size,
            }
        return self._model_info
