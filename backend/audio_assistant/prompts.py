"""Prompt templates for question answering over the uploaded document."""
from typing import List


class AnswerPrompt:
    """Prompt template for generating answers from retrieved context."""

    SYSTEM_MESSAGE = (
        "You are a helpful assistant. Answer questions using the context retrieved "
        "from the user's uploaded document."
    )

    TEMPLATE = "Answer the user's question: {input} based on the following context {context}"

    @classmethod
    def format_context(cls, chunks: List[dict]) -> str:
        """Join chunk texts with blank lines, in retrieval order."""
        return "\n\n".join(chunk.get("text", "") for chunk in chunks if chunk.get("text"))

    @classmethod
    def build(cls, question: str, chunks: List[dict]) -> str:
        """
        Build answer generation prompt.

        Args:
            question: User's question
            chunks: Retrieved chunks, best match first

        Returns:
            Formatted prompt string
        """
        return cls.TEMPLATE.format(input=question, context=cls.format_context(chunks))
