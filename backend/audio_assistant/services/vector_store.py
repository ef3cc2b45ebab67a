"""In-memory vector store using Qdrant."""
import uuid
from typing import List, Optional

from qdrant_client import QdrantClient
from qdrant_client.models import Distance, PointStruct, VectorParams

from audio_assistant.models.document import Chunk, Document
from audio_assistant.utils.logger import logger


class VectorStore:
    """
    Process-lifetime store holding the chunks of exactly one document.

    Every call to ``replace`` builds a new collection, makes it the active one
    and drops the previous collection, so content from earlier uploads is
    never retrievable once a new document is stored. There is no locking: a
    question racing an upload sees either the old or the new collection.
    """

    def __init__(self, location: str = ":memory:", batch_size: int = 100):
        """
        Initialize Qdrant client.

        Args:
            location: Qdrant location, ":memory:" for a process-local store
            batch_size: Maximum number of points per upsert
        """
        self.client = QdrantClient(location=location)
        self.batch_size = batch_size
        self._collection_name: Optional[str] = None
        self.active_document: Optional[Document] = None
        logger.info(f"Qdrant initialized at {location} with batch size {batch_size}")

    def has_documents(self) -> bool:
        """Return True when a non-empty chunk collection is active."""
        return self._collection_name is not None and self.active_document is not None

    def replace(self, document: Document, embeddings: List[List[float]]) -> None:
        """
        Store a document's chunks, discarding whatever was stored before.

        Args:
            document: Processed document with chunks
            embeddings: One embedding vector per chunk
        """
        chunks = document.chunks
        if not chunks or not embeddings:
            raise ValueError("Chunks and embeddings cannot be empty")
        if len(chunks) != len(embeddings):
            raise ValueError("Number of chunks must match number of embeddings")

        collection_name = f"document_{uuid.uuid4().hex}"
        self.client.create_collection(
            collection_name=collection_name,
            vectors_config=VectorParams(size=len(embeddings[0]), distance=Distance.COSINE),
        )

        try:
            for start in range(0, len(chunks), self.batch_size):
                self.client.upsert(
                    collection_name=collection_name,
                    points=self._build_points(
                        chunks[start:start + self.batch_size],
                        embeddings[start:start + self.batch_size],
                    ),
                )
        except Exception:
            self.client.delete_collection(collection_name=collection_name)
            raise

        previous = self._collection_name
        self._collection_name = collection_name
        self.active_document = document

        if previous:
            self.client.delete_collection(collection_name=previous)

        logger.info(
            f"Stored {len(chunks)} chunks for document {document.document_id}",
            extra={"document_id": document.document_id, "total_chunks": len(chunks)},
        )

    def _build_points(self, chunks: List[Chunk], embeddings: List[List[float]]) -> List[PointStruct]:
        return [
            PointStruct(id=chunk.chunk_index, vector=embedding, payload=chunk.to_payload())
            for chunk, embedding in zip(chunks, embeddings)
        ]

    def search(self, query_embedding: List[float], top_k: int = 4) -> List[dict]:
        """
        Retrieve the top-k chunks most similar to a query embedding.

        Args:
            query_embedding: Query embedding vector
            top_k: Number of chunks to retrieve

        Returns:
            List of chunk payloads with a ``similarity_score`` key, best first
        """
        collection_name = self._collection_name
        if collection_name is None:
            return []

        try:
            query_result = self.client.query_points(
                collection_name=collection_name,
                query=query_embedding,
                limit=top_k,
            )
        except ValueError as e:
            # Collection dropped by a concurrent replace
            logger.warning(f"Error querying collection {collection_name}: {str(e)}")
            return []

        retrieved_chunks = []
        for point in query_result.points:
            chunk_data = dict(point.payload)
            chunk_data["similarity_score"] = float(point.score)
            retrieved_chunks.append(chunk_data)

        logger.info(
            f"Retrieved {len(retrieved_chunks)} chunks",
            extra={"similarity_scores": [c["similarity_score"] for c in retrieved_chunks]},
        )
        return retrieved_chunks

    def clear(self) -> None:
        """Drop the active collection."""
        if self._collection_name:
            self.client.delete_collection(collection_name=self._collection_name)
        self._collection_name = None
        self.active_document = None
