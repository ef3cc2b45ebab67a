"""Speech-to-text via the OpenAI audio transcription API."""
import os
import time
from pathlib import Path

from openai import AsyncOpenAI

from audio_assistant.exceptions import EmptyTranscriptError, TranscriptionError
from audio_assistant.utils.logger import logger
from audio_assistant.utils.tracer import pipeline_span


class TranscriptionService:
    """Transcribes saved audio uploads and removes them afterwards."""

    def __init__(self, client: AsyncOpenAI, model: str = "whisper-1"):
        self.client = client
        self.model = model

    async def transcribe(self, audio_path) -> str:
        """
        Transcribe an audio file and delete it.

        Args:
            audio_path: Path to the saved audio upload

        Returns:
            Transcribed text

        Raises:
            TranscriptionError: If the file cannot be read or the API call fails
            EmptyTranscriptError: If no speech was recognised
        """
        audio_file = Path(audio_path)
        start_time = time.time()

        with pipeline_span("audio.transcribe", model=self.model, file_name=audio_file.name) as span:
            try:
                with open(audio_file, "rb") as f:
                    response = await self.client.audio.transcriptions.create(
                        model=self.model,
                        file=f,
                    )
            except Exception as e:
                logger.error(f"Transcription failed for {audio_file.name}: {str(e)}", exc_info=True)
                raise TranscriptionError(str(e))
            finally:
                if audio_file.exists():
                    os.unlink(audio_file)

            transcript = (getattr(response, "text", None) or "").strip()
            span.set_attribute("audio_assistant.transcript_length", len(transcript))

        response_time_ms = (time.time() - start_time) * 1000

        logger.info(
            "Audio transcribed",
            extra={
                "transcript_length": len(transcript),
                "response_time_ms": response_time_ms,
            },
        )

        if not transcript:
            raise EmptyTranscriptError()
        return transcript
