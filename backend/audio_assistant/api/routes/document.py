"""Document endpoint for ingesting a PDF or text file."""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from audio_assistant.api.schemas import DocumentResponse, ErrorResponse
from audio_assistant.exceptions import AudioAssistantError, ServiceUnavailableError
from audio_assistant.services.ingestion_service import IngestionService
from audio_assistant.services.upload_service import DOCUMENT_FORMATS, UploadService
from audio_assistant.utils.logger import logger

router = APIRouter()


def get_upload_service() -> UploadService:
    """Get upload service from main app."""
    from audio_assistant.main import upload_service
    if upload_service is None:
        raise ServiceUnavailableError("Upload service not initialized")
    return upload_service


def get_ingestion_service() -> IngestionService:
    """Get ingestion service from main app."""
    from audio_assistant.main import ingestion_service
    if ingestion_service is None:
        raise ServiceUnavailableError("Ingestion service not initialized")
    return ingestion_service


@router.post(
    "/document",
    response_model=DocumentResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_document(
    document: Annotated[Optional[UploadFile], File()] = None,
    uploads: UploadService = Depends(get_upload_service),
    ingestion: IngestionService = Depends(get_ingestion_service),
):
    """
    Upload a document and make it the collection questions are answered from.

    Any previously uploaded document is discarded.

    Args:
        document: PDF or TXT file in the ``document`` multipart field
        uploads: Upload service instance
        ingestion: Ingestion service instance

    Returns:
        DocumentResponse with a confirmation message and chunk statistics
    """
    try:
        path = await uploads.save(document, "document", allowed=DOCUMENT_FORMATS)
        stored = await ingestion.ingest(path, document.filename)
    except AudioAssistantError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error uploading document: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while processing your document")

    return DocumentResponse(
        document_id=stored.document_id,
        filename=stored.filename,
        total_chunks=stored.total_chunks,
        total_pages=stored.total_pages,
    )
