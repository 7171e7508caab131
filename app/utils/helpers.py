"""Helper utilities."""

import math
import re
from datetime import datetime
from typing import Optional, Tuple

from app.utils.constants import SALARY_PATTERN


def sanitize_filename(filename: str) -> str:
    """Keep only ASCII letters, digits, dots and dashes."""
    sanitized = re.sub(r"[^a-zA-Z0-9.-]", "", filename or "")
    return sanitized[:255]  # Limit length


def resume_storage_name(user_id, filename: str, now: Optional[datetime] = None) -> str:
    """Build the stored name ``{timestamp_ms}-{user_id}-{sanitized}``."""
    now = now or datetime.now()
    timestamp_ms = int(now.timestamp() * 1000)
    return f"{timestamp_ms}-{user_id}-{sanitize_filename(filename)}"


def _salary_amount(token: str) -> int:
    token = token.strip().lower()
    if token.endswith("k"):
        return int(token[:-1]) * 1000
    return int(token)


def parse_salary_range(salary: Optional[str]) -> Tuple[Optional[int], Optional[int]]:
    """
    Parse a free-text salary such as "50k - 80k" or "60000" into (min, max).

    Only the first match is used. A single number sets the minimum only.
    Text without digits yields (None, None).
    """
    if not salary:
        return None, None

    match = re.search(SALARY_PATTERN, salary, flags=re.IGNORECASE)
    if not match:
        return None, None

    parts = match.group(0).split("-")
    salary_min = _salary_amount(parts[0])
    salary_max = _salary_amount(parts[1]) if len(parts) > 1 else None
    return salary_min, salary_max


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` rows ``limit`` at a time."""
    return math.ceil(total / limit) if limit else 0
