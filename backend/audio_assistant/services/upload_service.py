"""Upload handling: persist multipart uploads to temporary storage and validate them."""
import os
import time
import uuid
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile

from audio_assistant.exceptions import (
    EmptyFileError,
    FileSizeExceededError,
    NoFileUploadedError,
    UnsupportedFileFormatError,
)
from audio_assistant.utils.logger import logger

AUDIO_FORMATS = frozenset(
    ["flac", "m4a", "mp3", "mp4", "mpeg", "mpga", "oga", "ogg", "wav", "webm"]
)
DOCUMENT_FORMATS = frozenset(["pdf", "txt"])
SUPPORTED_FORMATS = AUDIO_FORMATS | DOCUMENT_FORMATS

_READ_BLOCK_SIZE = 1024 * 1024


def get_extension(filename: Optional[str]) -> str:
    """Return the lower-cased extension of ``filename`` without the leading dot."""
    if not filename:
        return ""
    return Path(filename).suffix.lower().lstrip(".")


class UploadService:
    """Saves uploaded files under a generated name and rejects unsupported ones."""

    def __init__(self, upload_dir: str = "./uploads", max_file_size_mb: float = 25):
        """
        Initialize upload service.

        Args:
            upload_dir: Directory for temporary file storage
            max_file_size_mb: Largest accepted upload in megabytes
        """
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.max_file_size_mb = max_file_size_mb
        self.max_file_size_bytes = int(max_file_size_mb * 1024 * 1024)

    def generate_filename(self, field_name: str, original_filename: str) -> str:
        """Build ``<field>-<epoch ms>-<random><ext>`` for a new upload."""
        extension = Path(original_filename or "").suffix.lower()
        timestamp = int(time.time() * 1000)
        return f"{field_name}-{timestamp}-{uuid.uuid4().hex[:8]}{extension}"

    async def save(
        self,
        upload: Optional[UploadFile],
        field_name: str,
        allowed: Iterable[str] = SUPPORTED_FORMATS,
    ) -> Path:
        """
        Persist an upload to disk and validate it.

        The file is written first and removed again if validation fails, so a
        rejected upload never stays in storage. Writing stops as soon as the
        stream passes ``max_file_size_mb``.

        Args:
            upload: Multipart file from the request (None when the field is missing)
            field_name: Name of the multipart field, used as filename prefix
            allowed: Extensions (without dot) accepted for this upload

        Returns:
            Path of the saved file

        Raises:
            NoFileUploadedError: If no file was sent
            UnsupportedFileFormatError: If the extension is not allowed
            EmptyFileError: If the file has no content
            FileSizeExceededError: If the file is too large
        """
        if upload is None or not upload.filename:
            raise NoFileUploadedError()

        path = self.upload_dir / self.generate_filename(field_name, upload.filename)
        size = 0
        try:
            with open(path, "wb") as out:
                while True:
                    block = await upload.read(_READ_BLOCK_SIZE)
                    if not block:
                        break
                    size += len(block)
                    if size > self.max_file_size_bytes:
                        break
                    out.write(block)

            self._validate(upload.filename, size, allowed)
        except Exception:
            self.discard(path)
            raise

        logger.info(
            f"Saved upload {upload.filename} as {path.name} ({size:,} bytes)",
            extra={"uploaded_filename": upload.filename},
        )
        return path

    def _validate(self, filename: str, size: int, allowed: Iterable[str]) -> None:
        extension = get_extension(filename)
        if extension not in set(allowed):
            logger.warning(f"Rejected upload {filename}: unsupported extension '{extension}'")
            raise UnsupportedFileFormatError()

        if size == 0:
            raise EmptyFileError()

        if size > self.max_file_size_bytes:
            raise FileSizeExceededError(
                f"File exceeds maximum allowed size ({self.max_file_size_mb} MB)."
            )

    def discard(self, path) -> None:
        """Delete a saved upload; a file that is already gone is ignored."""
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
        else:
            logger.debug(f"Removed temporary file {path}")
