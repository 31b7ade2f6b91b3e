"""
File handling utilities for image uploads.
Validates uploaded images with Pillow and stores them on local disk under the upload directory.
"""

import io
import re
import uuid
from pathlib import Path
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile

from rentals_api.config import get_settings
from rentals_api.utils.exceptions import (
    ValidationError,
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError,
)
import logging

logger = logging.getLogger(__name__)

UPLOAD_TYPE_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]{0,49}$")


class FileValidator:
    """Utility class for file validation operations."""

    # Pillow format name -> stored extension
    FORMAT_EXTENSIONS = {
        "JPEG": ".jpg",
        "PNG": ".png",
        "WEBP": ".webp",
        "GIF": ".gif",
        "BMP": ".bmp",
        "TIFF": ".tiff",
    }

    @classmethod
    def validate_upload_type(cls, upload_type: str) -> str:
        """
        Validate the sub-directory name an upload is stored under.

        Raises:
            ValidationError: If the name is not a simple lowercase slug
        """
        upload_type = (upload_type or "").strip().lower()
        if not UPLOAD_TYPE_PATTERN.match(upload_type):
            raise ValidationError(
                "Upload type must contain only lowercase letters, digits, '-' or '_'"
            )
        return upload_type

    @classmethod
    def validate_content_type(cls, content_type: Optional[str]) -> str:
        """
        Only image/* uploads are accepted.

        Raises:
            UnsupportedFileTypeError: If the declared type is not an image
        """
        content_type = (content_type or "").lower()
        if not content_type.startswith("image/"):
            raise UnsupportedFileTypeError(content_type or "unknown", ["image/*"])
        return content_type

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: Optional[int] = None) -> int:
        """
        Raises:
            FileUploadError: If the file is empty
            FileSizeExceededError: If file size exceeds limit
        """
        if file_size <= 0:
            raise FileUploadError("File is empty")

        max_allowed = max_size or get_settings().max_file_size
        if file_size > max_allowed:
            raise FileSizeExceededError(file_size, max_allowed)

        return file_size

    @classmethod
    def validate_image_content(cls, content: bytes, filename: str) -> Tuple[str, str]:
        """
        Check that Pillow can decode the bytes.

        Returns:
            Tuple of (Pillow format name, extension for the stored file)

        The extension always comes from the decoded format, never from the client filename.

        Raises:
            FileUploadError: If the content is not a readable image
            UnsupportedFileTypeError: If the format has no known extension
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                img.verify()
                image_format = img.format or ""
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            raise FileUploadError(f"'{filename}' is not a valid image ({e})")

        extension = cls.FORMAT_EXTENSIONS.get(image_format)
        if extension is None:
            raise UnsupportedFileTypeError(image_format or "unknown", list(cls.FORMAT_EXTENSIONS))
        return image_format, extension

    @classmethod
    async def read_and_validate(cls, file: UploadFile) -> Tuple[bytes, str]:
        """
        Read an uploaded file and run every check on it.

        Returns:
            Tuple of (file content, extension for the stored file)
        """
        filename = file.filename or "upload"
        cls.validate_content_type(file.content_type)

        await file.seek(0)
        content = await file.read()
        cls.validate_file_size(len(content))

        _, extension = cls.validate_image_content(content, filename)
        return content, extension


class FileStorage:
    """Local-disk storage for uploaded files, served under the upload URL prefix."""

    def __init__(self, base_dir: Optional[Path] = None, url_prefix: Optional[str] = None):
        settings = get_settings()
        self.base_dir = Path(base_dir or settings.upload_dir)
        self.url_prefix = (url_prefix or settings.upload_url_prefix).rstrip("/")
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def generate_unique_filename(self, extension: str) -> str:
        return f"{uuid.uuid4().hex}{extension}"

    def get_type_directory(self, upload_type: str) -> Path:
        type_dir = self.base_dir / upload_type
        type_dir.mkdir(parents=True, exist_ok=True)
        return type_dir

    def public_url(self, upload_type: str, filename: str) -> str:
        return f"{self.url_prefix}/{upload_type}/{filename}"

    def path_for_url(self, url: str) -> Optional[Path]:
        """
        Map a public upload URL back to its file.

        Returns:
            Path inside the upload directory, or None for external URLs
        """
        if not url or not url.startswith(f"{self.url_prefix}/"):
            return None

        relative = url[len(self.url_prefix) + 1:]
        candidate = (self.base_dir / relative).resolve()
        try:
            candidate.relative_to(self.base_dir.resolve())
        except ValueError:
            return None
        return candidate

    async def save_bytes(self, content: bytes, upload_type: str, extension: str) -> Tuple[str, Path]:
        """
        Write content under <base_dir>/<upload_type>/ with a unique name.

        Returns:
            Tuple of (stored filename, full path)
        """
        file_path = self.get_type_directory(upload_type) / self.generate_unique_filename(extension)
        try:
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)
        except OSError as e:
            self.delete_file(file_path)
            raise FileUploadError(f"Failed to save file: {str(e)}")

        return file_path.name, file_path

    def delete_file(self, file_path: Path) -> bool:
        """
        Delete a file from disk.

        Returns:
            True if file was deleted, False otherwise
        """
        try:
            if file_path.exists():
                file_path.unlink()
                return True
            return False
        except OSError as e:
            logger.warning(f"Could not delete file {file_path}: {e}")
            return False

    def delete_by_url(self, url: str) -> bool:
        """Delete the local file behind a public URL; external URLs are ignored."""
        file_path = self.path_for_url(url)
        if file_path is None:
            return False
        return self.delete_file(file_path)
