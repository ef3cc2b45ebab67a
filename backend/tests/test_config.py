"""Tests for settings, logging and tracing setup."""
import json
import logging
import os
from unittest.mock import AsyncMock, patch

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from audio_assistant.exceptions import TranscriptionError
from audio_assistant.main import Settings
from audio_assistant.services.openai_client import create_openai_client
from audio_assistant.utils.logger import JSONFormatter
from audio_assistant.utils.tracer import initialize_tracing


class TestSettings:
    """Tests for application settings."""

    def test_defaults(self, monkeypatch):
        for name in ("CHUNK_SIZE", "CHUNK_OVERLAP", "TOP_K_CHUNKS", "API_PORT"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.chunk_size == 1000
        assert settings.chunk_overlap == 200
        assert settings.top_k_chunks == 4
        assert settings.transcription_model == "whisper-1"
        assert settings.api_port == 8082

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CHUNK_SIZE", "500")
        monkeypatch.setenv("completion_model", "gpt-4o")
        settings = Settings(_env_file=None)

        assert settings.chunk_size == 500
        assert settings.completion_model == "gpt-4o"


class TestOpenAIClient:
    """Tests for the shared OpenAI client factory."""

    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ValueError):
            create_openai_client(api_key="")

    def test_base_url_override(self):
        client = create_openai_client(api_key="sk-test", base_url="http://localhost:9999/v1")
        assert str(client.base_url).startswith("http://localhost:9999/v1")


class TestLogging:
    """Tests for the JSON log formatter."""

    def test_json_record_with_extra_fields(self):
        record = logging.LogRecord(
            name="audio_assistant",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Stored %d chunks",
            args=(3,),
            exc_info=None,
        )
        record.document_id = "doc-1"
        record.total_chunks = 3

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "Stored 3 chunks"
        assert data["level"] == "INFO"
        assert data["document_id"] == "doc-1"
        assert data["total_chunks"] == 3
        assert "timestamp" in data


class TestTracing:
    """Tests for tracing initialization."""

    def test_disabled(self):
        assert initialize_tracing(tracing_enabled=False) is None


@pytest.fixture
def span_exporter():
    """Route pipeline spans to an in-memory exporter."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    with patch(
        "audio_assistant.utils.tracer.get_tracer",
        return_value=provider.get_tracer("audio_assistant"),
    ):
        yield exporter


def spans_by_name(exporter):
    return {span.name: span for span in exporter.get_finished_spans()}


class TestPipelineSpans:
    """Tests for spans around transcription, ingestion and answering."""

    @pytest.mark.asyncio
    async def test_transcription_span(self, span_exporter, transcription_service, temp_dir):
        path = os.path.join(temp_dir, "audio-1.wav")
        with open(path, "wb") as f:
            f.write(b"RIFF")

        transcript = await transcription_service.transcribe(path)

        span = spans_by_name(span_exporter)["audio.transcribe"]
        assert span.attributes["audio_assistant.model"] == "whisper-1"
        assert span.attributes["audio_assistant.transcript_length"] == len(transcript)

    @pytest.mark.asyncio
    async def test_failed_transcription_marks_span(
        self, span_exporter, transcription_service, mock_openai_client, temp_dir
    ):
        mock_openai_client.audio.transcriptions.create = AsyncMock(side_effect=RuntimeError("boom"))
        path = os.path.join(temp_dir, "audio-2.wav")
        with open(path, "wb") as f:
            f.write(b"RIFF")

        with pytest.raises(TranscriptionError):
            await transcription_service.transcribe(path)

        span = spans_by_name(span_exporter)["audio.transcribe"]
        assert span.status.status_code == StatusCode.ERROR

    @pytest.mark.asyncio
    async def test_ingest_and_answer_spans(
        self, span_exporter, ingestion_service, qa_service, temp_dir, freedonia_text
    ):
        path = os.path.join(temp_dir, "document-1.txt")
        with open(path, "w") as f:
            f.write(freedonia_text)

        document = await ingestion_service.ingest(path, "freedonia.txt")
        await qa_service.answer("What is the capital of Freedonia?")

        spans = spans_by_name(span_exporter)
        ingest = spans["document.ingest"]
        assert ingest.attributes["audio_assistant.document_id"] == document.document_id
        assert ingest.attributes["audio_assistant.total_chunks"] == document.total_chunks
        answer = spans["question.answer"]
        assert answer.attributes["audio_assistant.top_k"] == 2
        assert answer.attributes["audio_assistant.chunks_retrieved"] > 0
