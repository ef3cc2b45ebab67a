"""Shared async OpenAI client used by transcription, embedding and completion."""
import os
from typing import Optional

import httpx
from openai import AsyncOpenAI

from audio_assistant.utils.logger import logger


def create_openai_client(
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout: float = 60.0,
) -> AsyncOpenAI:
    """
    Build an AsyncOpenAI client over a dedicated httpx connection pool.

    Args:
        api_key: OpenAI API key (from env if not provided)
        base_url: Optional override for OpenAI-compatible endpoints
        timeout: Request timeout in seconds

    Returns:
        Configured AsyncOpenAI client

    Raises:
        ValueError: If no API key is available
    """
    api_key = api_key or os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ValueError("OPENAI_API_KEY environment variable is required")

    http_client = httpx.AsyncClient(timeout=timeout)
    client = AsyncOpenAI(
        api_key=api_key,
        base_url=base_url or None,
        http_client=http_client,
    )
    logger.info(f"OpenAI client configured (base_url={client.base_url}, timeout={timeout}s)")
    return client
