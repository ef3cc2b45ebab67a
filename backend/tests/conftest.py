"""Pytest configuration and fixtures."""
import re
import shutil
import tempfile
import zlib
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from audio_assistant.services.document_processor import DocumentProcessor
from audio_assistant.services.embedding_service import EmbeddingService
from audio_assistant.services.ingestion_service import IngestionService
from audio_assistant.services.llm_service import LLMService
from audio_assistant.services.qa_service import QAService
from audio_assistant.services.transcription_service import TranscriptionService
from audio_assistant.services.upload_service import UploadService
from audio_assistant.services.vector_store import VectorStore

EMBEDDING_DIMS = 64


def fake_embedding(text: str):
    """Deterministic bag-of-words vector: texts sharing words point the same way."""
    vector = [0.0] * EMBEDDING_DIMS
    for word in re.findall(r"[a-z]+", text.lower()):
        vector[zlib.crc32(word.encode("utf-8")) % EMBEDDING_DIMS] += 1.0
    if not any(vector):
        vector[0] = 1.0
    return vector


def _embeddings_response(model, input):
    return SimpleNamespace(
        data=[
            SimpleNamespace(index=i, embedding=fake_embedding(text))
            for i, text in enumerate(input)
        ]
    )


def chat_response(content: str = "Freedonia's capital is Fredville."):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=120, completion_tokens=12, total_tokens=132),
    )


def make_pdf(text: str) -> bytes:
    """Build a one-page PDF with a correct xref table showing ``text``."""
    escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
    stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return bytes(out)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def mock_openai_client():
    """OpenAI client double: fake embeddings, canned chat and transcription replies."""
    client = Mock()
    client.embeddings.create = AsyncMock(side_effect=_embeddings_response)
    client.chat.completions.create = AsyncMock(return_value=chat_response())
    client.audio.transcriptions.create = AsyncMock(
        return_value=SimpleNamespace(text="What is the capital of Freedonia?")
    )
    client.close = AsyncMock()
    return client


@pytest.fixture
def upload_service(temp_dir):
    return UploadService(upload_dir=temp_dir, max_file_size_mb=1)


@pytest.fixture
def embedding_service(mock_openai_client):
    return EmbeddingService(client=mock_openai_client, batch_size=10)


@pytest.fixture
def vector_store():
    return VectorStore(location=":memory:")


@pytest.fixture
def llm_service(mock_openai_client):
    return LLMService(client=mock_openai_client)


@pytest.fixture
def document_processor():
    return DocumentProcessor(chunk_size=200, chunk_overlap=40)


@pytest.fixture
def transcription_service(mock_openai_client):
    return TranscriptionService(client=mock_openai_client)


@pytest.fixture
def ingestion_service(document_processor, embedding_service, vector_store):
    return IngestionService(
        document_processor=document_processor,
        embedding_service=embedding_service,
        vector_store=vector_store,
    )


@pytest.fixture
def qa_service(embedding_service, vector_store, llm_service):
    return QAService(
        embedding_service=embedding_service,
        vector_store=vector_store,
        llm_service=llm_service,
        top_k=2,
    )


@pytest.fixture
def freedonia_text():
    """Sample document about a fictional country."""
    return (
        "Freedonia is a small country. The capital of Freedonia is Fredville, "
        "a city on the river.\n\n"
        "Freedonia exports cheese and wool. Its farmers raise goats in the hills.\n\n"
        "The national anthem of Freedonia is sung at every football match."
    )


@pytest.fixture
def rocket_text():
    """Sample document with no overlap with the Freedonia one."""
    return (
        "Rockets need thrust to reach orbit. A launch vehicle burns propellant "
        "in stages.\n\n"
        "Engines are tested on static fire stands before flight."
    )
