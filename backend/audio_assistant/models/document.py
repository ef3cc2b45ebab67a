"""Document data models."""
from dataclasses import dataclass, field
from typing import List


@dataclass
class Chunk:
    """A span of document text ready to be embedded."""

    text: str
    page_number: int
    chunk_index: int
    document_id: str
    filename: str = ""

    def to_payload(self) -> dict:
        return {
            "text": self.text,
            "page_number": self.page_number,
            "chunk_index": self.chunk_index,
            "document_id": self.document_id,
            "filename": self.filename,
        }


@dataclass
class Document:
    """An ingested document and its chunks."""

    document_id: str
    filename: str
    total_pages: int
    chunks: List[Chunk] = field(default_factory=list)

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)
