import asyncio
import logging
import time
from typing import List, Dict, Any, Optional

import httpx

from .base_embedding import BaseEmbeddingService
from ...core.domain.value_objects.embedding import EmbeddingVector
from ...core.domain.exceptions import EmbeddingGenerationError

logger = logging.getLogger(__name__)


class OllamaEmbeddingService(BaseEmbeddingService):
    """Ollama implementation with retry logic and order-preserving batches"""

    LOCAL_URL_KEYWORDS = ["localhost", "127.0.0.1", "host.docker.internal"]

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model_name: str = "all-minilm",
        timeout: int = 120,
        batch_size: int = 16,
        concurrency_limit: int = 1,
        max_retries: int = 3,
        retry_delay: float = 2.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            model_name=model_name,
            timeout=timeout,
            batch_size=batch_size,
            max_retries=max_retries,
            retry_delay=retry_delay,
            client=client,
        )
        self.base_url = base_url.rstrip('/')
        self.concurrency_limit = max(1, concurrency_limit)

    def _is_local(self) -> bool:
        """Detect if Ollama endpoint is local"""
        base = self.base_url.lower()
        return any(kw in base for kw in self.LOCAL_URL_KEYWORDS)

    def _build_api_url(self) -> str:
        """Return the correct API endpoint"""
        if self._is_local():
            return f"{self.base_url}/api/embed"
        else:
            return f"{self.base_url}/api/embeddings"

    async def _embed_local_batch(self, url: str, batch: List[str]) -> List[List[float]]:
        # /api/embed takes a list input and answers in input order
        result = await self._make_request_with_retry(
            url,
            {"model": self.model_name, "input": batch},
            text_preview=batch[0],
        )
        embeddings = result.get("embeddings")
        if not embeddings or len(embeddings) != len(batch):
            raise EmbeddingGenerationError(
                f"Expected {len(batch)} embeddings in response, "
                f"got {len(embeddings) if embeddings else 0}"
            )
        return embeddings

    async def _embed_remote_text(self, url: str, text: str) -> List[float]:
        # /api/embeddings takes one prompt per request
        result = await self._make_request_with_retry(
            url,
            {"model": self.model_name, "prompt": text},
            text_preview=text,
        )
        embedding = result.get("embedding")
        if not embedding:
            raise EmbeddingGenerationError("No embedding in response")
        return embedding

    async def generate_embeddings_batch(self, texts: List[str]) -> List[EmbeddingVector]:
        """Generate embeddings; result i always belongs to texts[i]"""
        if not texts:
            return []

        cleaned = self._validate_batch(texts)
        url = self._build_api_url()
        semaphore = asyncio.Semaphore(self.concurrency_limit)
        start = time.perf_counter()

        try:
            if self._is_local():
                async def run_batch(batch: List[str]) -> List[List[float]]:
                    async with semaphore:
                        return await self._embed_local_batch(url, batch)

                # gather keeps submission order regardless of completion order
                batch_results = await asyncio.gather(
                    *(run_batch(batch) for batch in self._batches(cleaned))
                )
                raw = [values for batch in batch_results for values in batch]
            else:
                async def run_text(text: str) -> List[float]:
                    async with semaphore:
                        return await self._embed_remote_text(url, text)

                raw = await asyncio.gather(*(run_text(text) for text in cleaned))

        except EmbeddingGenerationError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error in generate_embeddings_batch: {str(e)}")
            raise EmbeddingGenerationError(f"Error generating embeddings: {str(e)}") from e

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Encoded {len(raw)} texts with {self.model_name} in {elapsed_ms:.1f}ms")
        return [self._to_vector(values) for values in raw]

    def get_model_info(self) -> Dict[str, Any]:
        """Return embedding model information"""
        if self._model_info is None:
            dimension_map = {
                "mxbai-embed-large": 1024,
                "nomic-embed-text": 768,
                "all-minilm": 384,
            }

            dimensions = next(
                (dim for model, dim in dimension_map.items() if model in self.model_name),
                1024  # default
            )

            self._model_info = {
                "model_name": self.model_name,
                "dimensions": dimensions,
                "provider": "ollama",
                "base_url": self.base_url,
                "batch_size": self.batch_size,
                "concurrency": self.concurrency_limit
            }
        return self._model_info
