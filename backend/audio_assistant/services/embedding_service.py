"""Embedding service using the OpenAI embeddings API."""
import time
from typing import List

from openai import AsyncOpenAI

from audio_assistant.exceptions import EmbeddingError
from audio_assistant.utils.logger import logger


class EmbeddingService:
    """Generates embedding vectors for document chunks and questions."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "text-embedding-3-small",
        batch_size: int = 100,
    ):
        """
        Initialize embedding service.

        Args:
            client: Shared AsyncOpenAI client
            model: Embedding model name
            batch_size: Number of texts sent per API request
        """
        self.client = client
        self.model = model
        self.batch_size = max(1, batch_size)

    async def _embed_batch(self, texts: List[str]) -> List[List[float]]:
        try:
            response = await self.client.embeddings.create(model=self.model, input=texts)
        except Exception as e:
            logger.error(f"Embedding request failed: {str(e)}", exc_info=True)
            raise EmbeddingError(f"Failed to generate embeddings: {str(e)}")

        # The API may return items out of order
        data = sorted(response.data, key=lambda item: item.index)
        if len(data) != len(texts):
            raise EmbeddingError("Embedding generation failed: mismatched batch sizes")
        return [list(item.embedding) for item in data]

    async def embed_documents(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for a list of texts in batches.

        Args:
            texts: Texts to embed

        Returns:
            One embedding vector per input text, in input order
        """
        if not texts:
            return []

        start_time = time.time()
        embeddings: List[List[float]] = []
        for i in range(0, len(texts), self.batch_size):
            embeddings.extend(await self._embed_batch(texts[i:i + self.batch_size]))

        logger.info(
            f"Generated {len(embeddings)} embeddings with {self.model}",
            extra={"response_time_ms": (time.time() - start_time) * 1000},
        )
        return embeddings

    async def embed_query(self, text: str) -> List[float]:
        """Generate the embedding for a single question."""
        return (await self._embed_batch([text]))[0]
