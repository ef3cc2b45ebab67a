"""Custom exception classes for upload, transcription and question answering."""


class AudioAssistantError(Exception):
    """Base exception carrying the HTTP status it should be reported with."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AudioAssistantError):
    """Raised when a request or uploaded file fails validation."""

    status_code = 400


class NoFileUploadedError(ValidationError):
    """Raised when the expected multipart file field is missing."""

    def __init__(self, message: str = "No file uploaded"):
        super().__init__(message)


class UnsupportedFileFormatError(ValidationError):
    """Raised when an uploaded file's extension is not allowed."""

    def __init__(self, message: str = "Unsupported file format"):
        super().__init__(message)


class FileSizeExceededError(ValidationError):
    """Raised when an uploaded file is larger than allowed."""
    pass


class EmptyFileError(ValidationError):
    """Raised when an uploaded file has no content."""

    def __init__(self, message: str = "Uploaded file is empty."):
        super().__init__(message)


class DocumentEmptyError(ValidationError):
    """Raised when a document has no extractable text."""
    pass


class EmptyTranscriptError(ValidationError):
    """Raised when transcription returns no text."""

    def __init__(self, message: str = "No speech detected in audio"):
        super().__init__(message)


class InvalidQuestionError(ValidationError):
    """Raised when a question is missing or blank."""

    def __init__(self, message: str = "Question is required"):
        super().__init__(message)


class NoDocumentsError(AudioAssistantError):
    """Raised when a question is asked before any document was ingested."""

    status_code = 400

    def __init__(self, message: str = "No documents uploaded yet."):
        super().__init__(message)


class ExtractionError(AudioAssistantError):
    """Raised when text extraction from a document fails."""
    pass


class UpstreamServiceError(AudioAssistantError):
    """Raised when a call to an external AI service fails."""
    pass


class TranscriptionError(UpstreamServiceError):
    """Raised when speech-to-text fails."""
    pass


class EmbeddingError(UpstreamServiceError):
    """Raised when embedding generation fails."""
    pass


class LLMError(UpstreamServiceError):
    """Raised when the completion request fails."""
    pass


class ServiceUnavailableError(AudioAssistantError):
    """Raised when required services are not initialized."""

    status_code = 503
