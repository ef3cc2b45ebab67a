"""Ask endpoint for question answering."""
from fastapi import APIRouter, Depends, HTTPException

from audio_assistant.api.schemas import AnswerResponse, AskRequest, ErrorResponse
from audio_assistant.exceptions import AudioAssistantError, ServiceUnavailableError
from audio_assistant.services.qa_service import QAService
from audio_assistant.utils.logger import logger

router = APIRouter()


def get_qa_service() -> QAService:
    """Get QA service from main app."""
    from audio_assistant.main import qa_service
    if qa_service is None:
        raise ServiceUnavailableError("QA service not initialized")
    return qa_service


@router.post(
    "/ask",
    response_model=AnswerResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def ask_question(
    request: AskRequest,
    qa: QAService = Depends(get_qa_service),
):
    """
    Answer a question about the uploaded document.

    Args:
        request: AskRequest with question
        qa: QA service instance

    Returns:
        AnswerResponse with the answer and the question it answers
    """
    try:
        return AnswerResponse(**await qa.answer(request.question))
    except AudioAssistantError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error answering question: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
