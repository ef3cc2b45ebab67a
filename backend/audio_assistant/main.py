"""FastAPI application entry point."""
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from openai import AsyncOpenAI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic_settings import BaseSettings
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from audio_assistant.api.routes import ask, audio, document
from audio_assistant.exceptions import AudioAssistantError
from audio_assistant.services.document_processor import DocumentProcessor
from audio_assistant.services.embedding_service import EmbeddingService
from audio_assistant.services.ingestion_service import IngestionService
from audio_assistant.services.llm_service import LLMService
from audio_assistant.services.openai_client import create_openai_client
from audio_assistant.services.qa_service import QAService
from audio_assistant.services.transcription_service import TranscriptionService
from audio_assistant.services.upload_service import UploadService
from audio_assistant.services.vector_store import VectorStore
from audio_assistant.utils.logger import logger
from audio_assistant.utils.tracer import initialize_tracing, shutdown_tracing


class Settings(BaseSettings):
    """Application settings."""

    openai_api_key: str = ""
    openai_base_url: Optional[str] = None
    openai_timeout_seconds: float = 60.0

    transcription_model: str = "whisper-1"
    embedding_model: str = "text-embedding-3-small"
    completion_model: str = "gpt-4o-mini"
    completion_temperature: float = 0.7
    completion_max_tokens: int = 512

    api_host: str = "0.0.0.0"
    api_port: int = 8082
    log_level: str = "INFO"

    # Uploads
    upload_dir: str = os.path.join(os.path.dirname(__file__), "..", "uploads")
    max_file_size_mb: float = 25  # transcription API rejects larger files

    # Document chunking and retrieval
    chunk_size: int = 1000
    chunk_overlap: int = 200
    embedding_batch_size: int = 100
    top_k_chunks: int = 4

    # OpenTelemetry tracing configuration
    tracing_enabled: bool = False
    otlp_endpoint: str = ""  # empty = console exporter

    class Config:
        # Look for .env in both backend/ and the repository root
        env_file = (
            os.path.join(os.path.dirname(__file__), "..", "..", ".env"),
            os.path.join(os.path.dirname(__file__), "..", ".env"),
        )
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global services (initialized in lifespan)
settings: Settings = None
openai_client: AsyncOpenAI = None
upload_service: UploadService = None
transcription_service: TranscriptionService = None
ingestion_service: IngestionService = None
qa_service: QAService = None
vector_store: VectorStore = None
tracer_provider = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global settings, openai_client, upload_service, transcription_service
    global ingestion_service, qa_service, vector_store, tracer_provider

    # Startup
    logger.info("Starting Audio Assistant")
    settings = Settings()

    tracer_provider = initialize_tracing(
        service_name="audio-assistant",
        service_version="1.0.0",
        otlp_endpoint=settings.otlp_endpoint or None,
        tracing_enabled=settings.tracing_enabled,
    )

    openai_client = create_openai_client(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.openai_timeout_seconds,
    )

    upload_service = UploadService(
        upload_dir=settings.upload_dir,
        max_file_size_mb=settings.max_file_size_mb,
    )
    embedding_service = EmbeddingService(
        client=openai_client,
        model=settings.embedding_model,
        batch_size=settings.embedding_batch_size,
    )
    vector_store = VectorStore(location=":memory:")
    llm_service = LLMService(
        client=openai_client,
        model=settings.completion_model,
        temperature=settings.completion_temperature,
        max_tokens=settings.completion_max_tokens,
    )

    transcription_service = TranscriptionService(
        client=openai_client,
        model=settings.transcription_model,
    )
    ingestion_service = IngestionService(
        document_processor=DocumentProcessor(
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
        ),
        embedding_service=embedding_service,
        vector_store=vector_store,
    )
    qa_service = QAService(
        embedding_service=embedding_service,
        vector_store=vector_store,
        llm_service=llm_service,
        top_k=settings.top_k_chunks,
    )

    logger.info(
        f"All services initialized (transcription={settings.transcription_model}, "
        f"embedding={settings.embedding_model}, completion={settings.completion_model})"
    )

    yield

    # Shutdown
    logger.info("Shutting down Audio Assistant")
    if vector_store:
        vector_store.clear()
    if openai_client:
        await openai_client.close()
    if tracer_provider:
        shutdown_tracing(tracer_provider)


# Create FastAPI app
app = FastAPI(
    title="Audio Assistant",
    description="Ask questions about an uploaded document by voice or text",
    version="1.0.0",
    lifespan=lifespan,
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(AudioAssistantError)
async def app_error_handler(request: Request, exc: AudioAssistantError):
    """Render application errors as ``{"error": message}``."""
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.message}",
            extra={"status_code": exc.status_code},
        )
    else:
        logger.warning(
            f"{request.method} {request.url.path} rejected: {exc.message}",
            extra={"status_code": exc.status_code},
        )
    return error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render framework HTTP errors in the same shape as application errors."""
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return error_response(exc.status_code, f"Cannot Find {request.url.path} on this server")
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle validation errors with a single readable message.

    Malformed JSON (including bodies with raw control characters) and
    missing or empty fields are all client errors.
    """
    errors = exc.errors()
    if not errors:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request")

    error = errors[0]
    if error.get("type") == "json_invalid":
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid JSON body")

    field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    if error.get("type") == "missing" and field == "question":
        return error_response(status.HTTP_400_BAD_REQUEST, "Question is required")

    message = error.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "Audio Assistant",
        "documents_loaded": bool(vector_store and vector_store.has_documents()),
    }


# Prometheus metrics endpoint
@app.get("/metrics")
async def prometheus_metrics():
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


# Include routers
app.include_router(audio.router, prefix="/api/v1", tags=["audio"])
app.include_router(document.router, prefix="/api/v1", tags=["document"])
app.include_router(ask.router, prefix="/api/v1", tags=["ask"])


if __name__ == "__main__":
    import uvicorn

    startup_settings = Settings()
    uvicorn.run(app, host=startup_settings.api_host, port=startup_settings.api_port)
