"""
Local filesystem storage for applicant resumes.

Files are stored flat under RESUME_STORAGE_DIR as
``{timestamp_ms}-{user_id}-{sanitized_original_name}``.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from app.config import settings
from app.core.exceptions import BadRequestError, NotFoundError
from app.utils.helpers import resume_storage_name
from app.utils.validators import is_safe_stored_filename, validate_file_size, validate_mime_type

logger = logging.getLogger(__name__)

DOWNLOAD_URL_PREFIX = "/api/v1/jobs/download-resume/"


class ResumeStorageService:
    """Validates and stores resume uploads on local disk."""

    def __init__(
        self,
        storage_dir: Optional[str] = None,
        max_size: Optional[int] = None,
        allowed_types: Optional[List[str]] = None,
    ):
        self.storage_dir = Path(storage_dir or settings.RESUME_STORAGE_DIR)
        self.max_size = max_size or settings.MAX_RESUME_SIZE
        self.allowed_types = allowed_types or settings.ALLOWED_RESUME_MIME_TYPES

    def save(self, content: bytes, filename: str, content_type: Optional[str], user_id) -> Dict:
        """
        Validate and write a resume.

        Returns:
            dict with ``filename``, ``url`` (download path) and ``size``

        Raises:
            BadRequestError: unsupported MIME type, empty or oversized file
        """
        if not validate_mime_type(content_type, self.allowed_types):
            raise BadRequestError("Only PDF, DOC and DOCX files are allowed")

        if not validate_file_size(len(content), self.max_size):
            raise BadRequestError(
                f"File size must be between 1 byte and {self.max_size // (1024 * 1024)}MB"
            )

        stored_name = resume_storage_name(user_id, filename or "resume")
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        file_path = self.storage_dir / stored_name
        with open(file_path, "wb") as f:
            f.write(content)

        logger.info(f"Stored resume {stored_name} ({len(content)} bytes) for user {user_id}")
        return {
            "filename": stored_name,
            "url": f"{DOWNLOAD_URL_PREFIX}{stored_name}",
            "size": len(content),
        }

    def resolve(self, filename: str) -> Path:
        """Return the on-disk path of a stored resume."""
        if not is_safe_stored_filename(filename):
            raise BadRequestError("Invalid file name")

        file_path = self.storage_dir / filename
        if not file_path.is_file():
            raise NotFoundError("Resume file not found")
        return file_path


def get_resume_storage() -> ResumeStorageService:
    """FastAPI dependency returning the configured storage."""
    return ResumeStorageService()
