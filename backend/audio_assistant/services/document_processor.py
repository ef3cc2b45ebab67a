"""Document processing service for PDF and TXT extraction and chunking."""
from pathlib import Path
from typing import List, Tuple

import pdfplumber

from audio_assistant.exceptions import DocumentEmptyError, ExtractionError, UnsupportedFileFormatError
from audio_assistant.models.document import Chunk, Document
from audio_assistant.utils.logger import logger
from audio_assistant.utils.text_cleaner import clean_text

# Preferred break points, strongest first
SEPARATORS = ("\n\n", "\n", ". ", " ")


def get_file_type(file_path) -> str:
    """Determine file type based on file extension."""
    extension = Path(file_path).suffix.lower()

    if extension == ".pdf":
        return "pdf"
    elif extension == ".txt":
        return "txt"
    else:
        raise UnsupportedFileFormatError()


def extract_text_from_pdf(file_path) -> List[Tuple[int, str]]:
    """
    Extract text from PDF using pdfplumber.

    Args:
        file_path: Path to PDF file

    Returns:
        List of (page_number, page_text) tuples

    Raises:
        ExtractionError: If PDF processing fails
    """
    pages_data = []

    try:
        with pdfplumber.open(file_path) as pdf:
            for page_num, page in enumerate(pdf.pages, 1):
                text = page.extract_text() or ""
                pages_data.append((page_num, clean_text(text)))
    except Exception as e:
        logger.error(f"Error opening PDF file {file_path}: {str(e)}")
        raise ExtractionError(f"Failed to process PDF file: {str(e)}")

    return pages_data


def extract_text_from_txt(file_path) -> List[Tuple[int, str]]:
    """
    Extract text from TXT file.

    Returns:
        Single (1, text) tuple, since plain text has no pages

    Raises:
        ExtractionError: If file reading fails
    """
    try:
        with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
            text = f.read()
        return [(1, clean_text(text))]
    except OSError as e:
        logger.error(f"Error reading TXT file {file_path}: {str(e)}")
        raise ExtractionError(f"Failed to process TXT file: {str(e)}")


class DocumentProcessor:
    """Handles document extraction, cleaning, and chunking for PDF and TXT files."""

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200):
        """
        Initialize document processor.

        Args:
            chunk_size: Maximum size for text chunks (in characters)
            chunk_overlap: Overlap between consecutive chunks (in characters)
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError("chunk_overlap must be between 0 and chunk_size")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def extract_text(self, file_path) -> List[Tuple[int, str]]:
        """Extract ``(page_number, text)`` pairs from any supported file type."""
        file_type = get_file_type(file_path)

        if file_type == "pdf":
            pages_data = extract_text_from_pdf(file_path)
        else:
            pages_data = extract_text_from_txt(file_path)

        total_chars = sum(len(text) for _, text in pages_data)
        logger.info(
            f"Extracted text from {Path(file_path).name}: {len(pages_data)} pages/sections, "
            f"{total_chars:,} total characters extracted"
        )
        return pages_data

    def _find_break(self, text: str, start: int, end: int) -> int:
        """Move ``end`` back to the strongest separator in the second half of the window."""
        floor = start + self.chunk_size // 2
        for separator in SEPARATORS:
            pos = text.rfind(separator, floor, end)
            if pos != -1:
                return pos + len(separator)
        return end

    def chunk_text(self, text: str) -> List[str]:
        """
        Split text into overlapping chunks of at most ``chunk_size`` characters.

        Args:
            text: Text to chunk

        Returns:
            List of non-blank text chunks
        """
        if not text:
            return []

        chunks = []
        start = 0
        text_length = len(text)

        while start < text_length:
            end = min(start + self.chunk_size, text_length)
            if end < text_length:
                end = self._find_break(text, start, end)

            chunk = text[start:end].strip()
            if chunk:
                chunks.append(chunk)

            if end >= text_length:
                break

            # Step back by the overlap, but always make progress
            next_start = end - self.chunk_overlap
            start = next_start if next_start > start else end

        return chunks

    def process_document(self, file_path, document_id: str, filename: str) -> Document:
        """
        Extract and chunk a document.

        Args:
            file_path: Path to the saved upload
            document_id: Unique document identifier
            filename: Original filename

        Returns:
            Document with its chunks

        Raises:
            DocumentEmptyError: If no text could be extracted
        """
        pages_data = self.extract_text(file_path)

        chunks = []
        for page_num, page_text in pages_data:
            for chunk_text in self.chunk_text(page_text):
                chunks.append(
                    Chunk(
                        text=chunk_text,
                        page_number=page_num,
                        chunk_index=len(chunks),
                        document_id=document_id,
                        filename=filename,
                    )
                )

        if not chunks:
            raise DocumentEmptyError(f"No extractable text found in {filename}.")

        logger.info(
            f"Created {len(chunks)} chunks from document {document_id}",
            extra={"document_id": document_id, "total_chunks": len(chunks)},
        )
        return Document(
            document_id=document_id,
            filename=filename,
            total_pages=len(pages_data),
            chunks=chunks,
        )
