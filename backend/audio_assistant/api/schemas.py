"""Pydantic schemas for API requests and responses."""
from pydantic import BaseModel, Field, field_validator

from audio_assistant.utils.text_cleaner import clean_question


class AskRequest(BaseModel):
    """Request schema for asking questions."""

    question: str = Field(..., min_length=1, description="User's question")

    @field_validator("question")
    @classmethod
    def strip_control_characters(cls, v: str) -> str:
        """Remove control characters and reject questions that end up empty."""
        cleaned = clean_question(v)
        if not cleaned:
            raise ValueError("Question cannot be empty after cleaning")
        return cleaned


class AnswerResponse(BaseModel):
    """Response schema for question answering (typed or transcribed)."""

    answer: str = Field(..., description="LLM-generated answer")
    question: str = Field(..., description="The question that was answered")


class DocumentResponse(BaseModel):
    """Response schema for document upload."""

    message: str = Field(default="Document uploaded and stored successfully")
    document_id: str = Field(..., description="Identifier of the stored document")
    filename: str = Field(..., description="Original filename")
    total_chunks: int = Field(..., description="Number of text chunks stored")
    total_pages: int = Field(..., description="Number of pages in the document")


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    error: str
