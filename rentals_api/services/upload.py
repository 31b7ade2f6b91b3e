"""
Upload service: validates image files and stores them on local disk.
"""

from typing import List, Optional, Tuple
from pathlib import Path
from fastapi import UploadFile
from rentals_api.config import settings
from rentals_api.utils.file_utils import FileValidator, FileStorage
from rentals_api.utils.exceptions import ValidationError
import logging

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_TYPE = "properties"
MAX_FILES_PER_REQUEST = 20


class UploadService:
    """
    Stores uploaded images under <upload_dir>/<type>/ and returns their public URLs.
    The request is all-or-nothing: every file is validated before any is written.
    """

    def __init__(self, file_storage: Optional[FileStorage] = None):
        self.file_storage = file_storage or FileStorage()

    async def save_images(self, files: List[UploadFile], upload_type: str = DEFAULT_UPLOAD_TYPE) -> List[dict]:
        """
        Validate and store images.

        Returns:
            One dict per file with url, filename, original_filename, content_type and size

        Raises:
            ValidationError: If no files were sent or the upload type is invalid
            UnsupportedFileTypeError: If a file is not an image
            FileSizeExceededError: If a file is larger than the configured limit
            FileUploadError: If a file cannot be decoded or written
        """
        if not files:
            raise ValidationError("At least one file is required")
        if len(files) > MAX_FILES_PER_REQUEST:
            raise ValidationError(f"At most {MAX_FILES_PER_REQUEST} files can be uploaded at once")

        upload_type = FileValidator.validate_upload_type(upload_type or DEFAULT_UPLOAD_TYPE)

        validated: List[Tuple[UploadFile, bytes, str]] = []
        for file in files:
            content, extension = await FileValidator.read_and_validate(file)
            validated.append((file, content, extension))

        saved: List[dict] = []
        written: List[Path] = []
        try:
            for file, content, extension in validated:
                filename, file_path = await self.file_storage.save_bytes(content, upload_type, extension)
                written.append(file_path)
                saved.append({
                    "url": self.file_storage.public_url(upload_type, filename),
                    "filename": filename,
                    "original_filename": file.filename or filename,
                    "content_type": file.content_type,
                    "size": len(content),
                })
        except Exception:
            for file_path in written:
                self.file_storage.delete_file(file_path)
            raise

        logger.info(f"Stored {len(saved)} images under '{upload_type}' in {settings.upload_dir}")
        return saved
