"""Question answering over the active document collection."""
from typing import Dict

from fastapi.concurrency import run_in_threadpool

from audio_assistant.exceptions import InvalidQuestionError, NoDocumentsError
from audio_assistant.services.embedding_service import EmbeddingService
from audio_assistant.services.llm_service import LLMService
from audio_assistant.services.vector_store import VectorStore
from audio_assistant.utils.logger import logger
from audio_assistant.utils.tracer import pipeline_span
from audio_assistant.utils.text_cleaner import clean_question


class QAService:
    """Retrieves relevant chunks for a question and asks the LLM to answer from them."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
        llm_service: LLMService,
        top_k: int = 4,
    ):
        """
        Initialize QA service.

        Args:
            embedding_service: Service for generating the question embedding
            vector_store: Store holding the active chunk collection
            llm_service: Service for LLM answer generation
            top_k: Number of chunks passed to the LLM as context
        """
        self.embedding_service = embedding_service
        self.vector_store = vector_store
        self.llm_service = llm_service
        self.top_k = top_k

    async def answer(self, question: str) -> Dict[str, str]:
        """
        Answer a question from the stored document.

        Args:
            question: User's question (typed, or transcribed from audio)

        Returns:
            Dictionary with ``answer`` and the cleaned ``question``

        Raises:
            InvalidQuestionError: If the question is blank
            NoDocumentsError: If no document has been ingested yet
        """
        question = clean_question(question or "")
        if not question:
            raise InvalidQuestionError()

        if not self.vector_store.has_documents():
            raise NoDocumentsError()

        with pipeline_span("question.answer", top_k=self.top_k) as span:
            query_embedding = await self.embedding_service.embed_query(question)
            chunks = await run_in_threadpool(self.vector_store.search, query_embedding, self.top_k)
            if not chunks:
                raise NoDocumentsError()
            span.set_attribute("audio_assistant.chunks_retrieved", len(chunks))

            result = await self.llm_service.generate_answer(question, chunks)
            span.set_attribute("audio_assistant.answer_length", len(result["answer"]))

        logger.info(
            f"Answered question using {len(chunks)} chunks",
            extra={
                "similarity_scores": [c["similarity_score"] for c in chunks],
                "answer_length": len(result["answer"]),
            },
        )
        return {"answer": result["answer"], "question": question}
