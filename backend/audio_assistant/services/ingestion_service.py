"""Document ingestion: extract, chunk, embed and store an uploaded document."""
import os
import time
import uuid
from pathlib import Path

from fastapi.concurrency import run_in_threadpool

from audio_assistant.exceptions import EmbeddingError
from audio_assistant.models.document import Document
from audio_assistant.services.document_processor import DocumentProcessor
from audio_assistant.services.embedding_service import EmbeddingService
from audio_assistant.services.vector_store import VectorStore
from audio_assistant.utils.logger import logger
from audio_assistant.utils.tracer import pipeline_span


class IngestionService:
    """Turns a saved document upload into the active chunk collection."""

    def __init__(
        self,
        document_processor: DocumentProcessor,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
    ):
        self.document_processor = document_processor
        self.embedding_service = embedding_service
        self.vector_store = vector_store

    async def ingest(self, file_path, filename: str) -> Document:
        """
        Ingest a document, replacing any previously stored one.

        The saved file is deleted whether or not ingestion succeeds.

        Args:
            file_path: Path to the saved upload
            filename: Original filename

        Returns:
            The stored Document
        """
        document_id = str(uuid.uuid4())
        start_time = time.time()

        with pipeline_span("document.ingest", document_id=document_id, file_name=filename) as span:
            try:
                document = await run_in_threadpool(
                    self.document_processor.process_document, file_path, document_id, filename
                )

                embeddings = await self.embedding_service.embed_documents(
                    [chunk.text for chunk in document.chunks]
                )
                if len(embeddings) != document.total_chunks:
                    raise EmbeddingError("Embedding generation failed: mismatched batch sizes")

                await run_in_threadpool(self.vector_store.replace, document, embeddings)
            except Exception as e:
                logger.error(f"Document ingestion failed for {filename}: {str(e)}")
                raise
            finally:
                if Path(file_path).exists():
                    os.unlink(file_path)

            span.set_attribute("audio_assistant.total_chunks", document.total_chunks)
            span.set_attribute("audio_assistant.total_pages", document.total_pages)

        logger.info(
            f"Document ingested successfully: {document_id}",
            extra={
                "document_id": document_id,
                "uploaded_filename": filename,
                "total_chunks": document.total_chunks,
                "total_pages": document.total_pages,
                "response_time_ms": (time.time() - start_time) * 1000,
            },
        )
        return document
