"""Validators."""

import re
from typing import List, Optional


def validate_mime_type(content_type: Optional[str], allowed_types: List[str]) -> bool:
    """Validate an upload's declared MIME type (parameters like charset ignored)."""
    if not content_type:
        return False

    mime = content_type.split(";", 1)[0].strip().lower()
    return mime in [t.lower() for t in allowed_types]


def validate_file_size(size: int, max_size: int) -> bool:
    """Validate file size in bytes."""
    return 0 < size <= max_size


def is_safe_stored_filename(filename: str) -> bool:
    """Reject names that could escape the storage directory."""
    if not filename or filename in (".", ".."):
        return False
    return bool(re.fullmatch(r"[a-zA-Z0-9.-]+", filename)) and ".." not in filename
