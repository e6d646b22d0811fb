import asyncio
import logging
from abc import ABC
from typing import List, Optional

import httpx

from ...core.ports.embedding_service import EmbeddingService
from ...core.domain.value_objects.embedding import EmbeddingVector
from ...core.domain.exceptions import EmbeddingGenerationError

logger = logging.getLogger(__name__)


class BaseEmbeddingService(EmbeddingService, ABC):
    """Base class for HTTP embedding services with common functionality"""

    def __init__(
        self,
        model_name: str,
        timeout: int = 120,
        batch_size: int = 16,
        max_retries: int = 3,
        retry_delay: float = 2.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.model_name = model_name
        self.timeout = timeout
        self.batch_size = max(1, batch_size)
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self._model_info = None

        if client is None:
            limits = httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0
            )
            client = httpx.AsyncClient(
                timeout=timeout,
                limits=limits,
                follow_redirects=True
            )
        self.client = client

    def _validate_text(self, text: str) -> str:
        """Validate and clean text for embedding"""
        if not text or not text.strip():
            raise EmbeddingGenerationError("Text cannot be empty")

        cleaned = ' '.join(text.split())

        # Most embedding models truncate well before this
        max_length = 8000
        if len(cleaned) > max_length:
            cleaned = cleaned[:max_length]

        return cleaned

    def _validate_batch(self, texts: List[str]) -> List[str]:
        """Validate and clean a batch of texts"""
        return [self._validate_text(text) for text in texts]

    def _batches(self, texts: List[str]) -> List[List[str]]:
        return [texts[i:i + self.batch_size] for i in range(0, len(texts), self.batch_size)]

    def _to_vector(self, values: List[float]) -> EmbeddingVector:
        return EmbeddingVector(
            values=[float(v) for v in values],
            model_name=self.model_name,
            dimensions=len(values)
        )

    async def _make_request_with_retry(
        self,
        url: str,
        payload: dict,
        headers: Optional[dict] = None,
        text_preview: str = "",
    ) -> dict:
        """Make HTTP request with exponential backoff retry"""
        last_error = None

        for attempt in range(self.max_retries):
            try:
                logger.debug(
                    f"Embedding request attempt {attempt + 1}/{self.max_retries} "
                    f"for text: {text_preview[:50]}..."
                )

                response = await self.client.post(url, json=payload, headers=headers)
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                last_error = e
                logger.warning(
                    f"Timeout on attempt {attempt + 1}/{self.max_retries} "
                    f"for text: {text_preview[:50]}..."
                )

            except httpx.HTTPStatusError as e:
                last_error = e
                # Client errors are not retried
                if 400 <= e.response.status_code < 500:
                    logger.error(f"Client error (won't retry): {e.response.status_code} - {e.response.text}")
                    raise EmbeddingGenerationError(
                        f"HTTP {e.response.status_code}: {e.response.text}"
                    )
                logger.warning(
                    f"HTTP error {e.response.status_code} on attempt {attempt + 1}/{self.max_retries}"
                )

            except httpx.RequestError as e:
                last_error = e
                logger.warning(
                    f"Request error on attempt {attempt + 1}/{self.max_retries}: {str(e)}"
                )

            if attempt < self.max_retries - 1:
                delay = self.retry_delay * (2 ** attempt)
                logger.info(f"Waiting {delay}s before retry...")
                await asyncio.sleep(delay)

        error_msg = f"All {self.max_retries} retry attempts failed"
        if last_error:
            error_msg += f": {str(last_error)}"
        logger.error(error_msg)
        raise EmbeddingGenerationError(error_msg)

    async def generate_embedding(self, text: str) -> EmbeddingVector:
        """Generate embedding for single text"""
        embeddings = await self.generate_embeddings_batch([text])
        return embeddings[0]

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
