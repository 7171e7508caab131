"""
Tests for salary parsing, upload validators and pagination helpers.
"""
from datetime import datetime

from app.utils.helpers import parse_salary_range, resume_storage_name, sanitize_filename, total_pages
from app.utils.validators import is_safe_stored_filename, validate_file_size, validate_mime_type


# ============================================================
# SALARY PARSING
# ============================================================

def test_parse_salary_range_with_k_suffix():
    assert parse_salary_range("50k - 80k") == (50000, 80000)


def test_parse_salary_range_plain_numbers():
    assert parse_salary_range("$60000-90000 per year") == (60000, 90000)


def test_parse_salary_single_value_sets_minimum_only():
    assert parse_salary_range("75K") == (75000, None)


def test_parse_salary_without_digits():
    assert parse_salary_range("Competitive") == (None, None)
    assert parse_salary_range("") == (None, None)
    assert parse_salary_range(None) == (None, None)


# ============================================================
# FILES AND PAGINATION
# ============================================================

def test_sanitize_filename_strips_unsafe_characters():
    assert sanitize_filename("my resume (final).pdf") == "myresumefinal.pdf"
    assert sanitize_filename("../../etc/passwd") == "....etcpasswd"


def test_resume_storage_name_format():
    now = datetime(2026, 1, 1, 12, 0, 0)
    name = resume_storage_name("user-1", "CV 2026.pdf", now=now)
    assert name == f"{int(now.timestamp() * 1000)}-user-1-CV2026.pdf"


def test_stored_filename_safety():
    assert is_safe_stored_filename("1700000000000-abc-cv.pdf")
    assert not is_safe_stored_filename("../secret.pdf")
    assert not is_safe_stored_filename("a..b.pdf")
    assert not is_safe_stored_filename("")


def test_upload_validators():
    allowed = ["application/pdf"]
    assert validate_mime_type("application/pdf", allowed)
    assert validate_mime_type("Application/PDF; charset=binary", allowed)
    assert not validate_mime_type("image/png", allowed)
    assert not validate_mime_type(None, allowed)
    assert validate_file_size(1, 10)
    assert not validate_file_size(0, 10)
    assert not validate_file_size(11, 10)


def test_total_pages():
    assert total_pages(0, 10) == 0
    assert total_pages(10, 10) == 1
    assert total_pages(11, 10) == 2
