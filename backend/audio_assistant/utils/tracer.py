"""OpenTelemetry tracing for the transcribe, ingest and answer pipeline."""
from contextlib import contextmanager
from typing import Iterator, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.openai import OpenAIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter

from audio_assistant.utils.logger import logger

TRACER_NAME = "audio_assistant"


def _build_exporter(otlp_endpoint: Optional[str]) -> SpanExporter:
    if otlp_endpoint:
        logger.info(f"Exporting spans to OTLP endpoint {otlp_endpoint}")
        return OTLPSpanExporter(endpoint=otlp_endpoint)
    logger.info("Exporting spans to the console")
    return ConsoleSpanExporter()


def initialize_tracing(
    service_name: str = "audio-assistant",
    service_version: str = "1.0.0",
    otlp_endpoint: Optional[str] = None,
    tracing_enabled: bool = True,
) -> Optional[TracerProvider]:
    """
    Install a global tracer provider and instrument the OpenAI SDK.

    Args:
        service_name: ``service.name`` resource attribute
        service_version: ``service.version`` resource attribute
        otlp_endpoint: OTLP/HTTP traces URL, e.g. http://localhost:4318/v1/traces.
                      Spans go to the console when empty
        tracing_enabled: When False nothing is installed

    Returns:
        The installed TracerProvider, or None when tracing is off or setup failed
    """
    if not tracing_enabled:
        logger.info("Tracing is disabled")
        return None

    try:
        provider = TracerProvider(
            resource=Resource.create({"service.name": service_name, "service.version": service_version})
        )
        provider.add_span_processor(BatchSpanProcessor(_build_exporter(otlp_endpoint)))
        trace.set_tracer_provider(provider)

        # Transcription, embedding and completion calls all go through the SDK
        OpenAIInstrumentor().instrument()
    except Exception as e:
        logger.error(f"Failed to initialize tracing: {str(e)}", exc_info=True)
        return None

    logger.info(f"Tracing initialized for {service_name} {service_version}")
    return provider


def get_tracer() -> trace.Tracer:
    """Tracer for pipeline spans; a no-op tracer until tracing is initialized."""
    return trace.get_tracer(TRACER_NAME)


@contextmanager
def pipeline_span(name: str, **attributes) -> Iterator[trace.Span]:
    """
    Wrap one pipeline step in a span.

    Attributes whose value is None are skipped. An exception escaping the
    block is recorded on the span and marks it as failed.
    """
    with get_tracer().start_as_current_span(name) as span:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(f"audio_assistant.{key}", value)
        yield span


def shutdown_tracing(tracer_provider: Optional[TracerProvider]) -> None:
    """Flush pending spans and shut the provider down."""
    if not tracer_provider:
        return
    try:
        tracer_provider.shutdown()
        logger.info("Tracing shutdown completed")
    except Exception as e:
        logger.warning(f"Error during tracing shutdown: {str(e)}")
