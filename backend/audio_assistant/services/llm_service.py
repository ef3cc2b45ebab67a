"""LLM service for OpenAI chat completions."""
import time
from typing import Any, Dict, List

from openai import AsyncOpenAI

from audio_assistant.exceptions import LLMError
from audio_assistant.prompts import AnswerPrompt
from audio_assistant.utils.logger import logger


class LLMService:
    """Service for generating answers with an OpenAI chat model."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: int = 512,
    ):
        """
        Initialize LLM service.

        Args:
            client: Shared AsyncOpenAI client
            model: Chat model name
            temperature: Sampling temperature
            max_tokens: Upper bound on generated tokens
        """
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate_answer(self, question: str, chunks: List[dict]) -> Dict[str, Any]:
        """
        Generate an answer from retrieved chunks.

        Args:
            question: User's question
            chunks: Retrieved relevant chunks

        Returns:
            Dictionary with answer, token_usage, and response_time_ms

        Raises:
            LLMError: If the completion request fails or returns no content
        """
        start_time = time.time()
        prompt = AnswerPrompt.build(question, chunks)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": AnswerPrompt.SYSTEM_MESSAGE},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_completion_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error(f"Error calling completion API: {str(e)}", exc_info=True)
            raise LLMError(f"Failed to generate answer: {str(e)}")

        answer = (response.choices[0].message.content or "").strip()
        if not answer:
            raise LLMError("Failed to generate answer: empty completion")

        token_usage = None
        if response.usage is not None:
            token_usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
        response_time_ms = (time.time() - start_time) * 1000

        logger.info(
            "LLM response generated",
            extra={
                "token_usage": token_usage,
                "response_time_ms": response_time_ms,
                "answer_length": len(answer),
            },
        )

        return {
            "answer": answer,
            "token_usage": token_usage,
            "response_time_ms": response_time_ms,
        }
