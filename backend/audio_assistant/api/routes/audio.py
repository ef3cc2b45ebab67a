"""Audio endpoint: transcribe a spoken question and answer it."""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from audio_assistant.api.routes.ask import get_qa_service
from audio_assistant.api.routes.document import get_upload_service
from audio_assistant.api.schemas import AnswerResponse, ErrorResponse
from audio_assistant.exceptions import AudioAssistantError, ServiceUnavailableError
from audio_assistant.services.qa_service import QAService
from audio_assistant.services.transcription_service import TranscriptionService
from audio_assistant.services.upload_service import AUDIO_FORMATS, UploadService
from audio_assistant.utils.logger import logger

router = APIRouter()


def get_transcription_service() -> TranscriptionService:
    """Get transcription service from main app."""
    from audio_assistant.main import transcription_service
    if transcription_service is None:
        raise ServiceUnavailableError("Transcription service not initialized")
    return transcription_service


# Spelling matches existing clients
@router.post(
    "/proccess-audio",
    response_model=AnswerResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def process_audio(
    audio: Annotated[Optional[UploadFile], File()] = None,
    uploads: UploadService = Depends(get_upload_service),
    transcription: TranscriptionService = Depends(get_transcription_service),
    qa: QAService = Depends(get_qa_service),
):
    """
    Transcribe an uploaded recording and answer it as a question.

    Args:
        audio: Recording in the ``audio`` multipart field
        uploads: Upload service instance
        transcription: Transcription service instance
        qa: QA service instance

    Returns:
        AnswerResponse with the answer and the transcribed question
    """
    path = None
    try:
        path = await uploads.save(audio, "audio", allowed=AUDIO_FORMATS)
        question = await transcription.transcribe(path)
        return AnswerResponse(**await qa.answer(question))
    except AudioAssistantError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error processing audio: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        if path is not None:
            uploads.discard(path)
