"""Journal entry validation.

Pure functions: they raise ``ReflectionError`` with kind ``validation`` and
never touch shared state, so rejected requests cost nothing downstream.
"""

import re
from typing import Any

from journal_reflect.entities import ErrorKind, ReflectionError

MIN_CONTENT_LENGTH = 10
MAX_CONTENT_LENGTH = 5000

SPAM_PATTERNS = (
    re.compile(r"^(.)\1{20,}"),  # repeated character spam
    re.compile(r"[^\w\s.,!?'\"()-]{10,}"),  # long runs of special characters
)


def _invalid(message: str) -> ReflectionError:
    return ReflectionError(ErrorKind.VALIDATION, message)


def validate_content(content: Any) -> str:
    """Validate journal entry content.

    Args:
        content: The raw ``content`` value from the request body

    Returns:
        The trimmed content

    Raises:
        ReflectionError: If the content is missing, the wrong length or spam-like
    """
    if not content or not isinstance(content, str):
        raise _invalid("Content field is required")

    trimmed = content.strip()
    if not trimmed:
        raise _invalid("Content cannot be empty")

    if len(trimmed) < MIN_CONTENT_LENGTH:
        raise _invalid(f"Content must be at least {MIN_CONTENT_LENGTH} characters long")

    if len(trimmed) > MAX_CONTENT_LENGTH:
        raise _invalid(f"Content must be less than {MAX_CONTENT_LENGTH} characters")

    for pattern in SPAM_PATTERNS:
        if pattern.search(trimmed):
            raise _invalid("Content appears to contain invalid or spam-like patterns")

    return trimmed


def validate_request(body: Any) -> str:
    """Validate a decoded request body and return its trimmed content."""
    if not isinstance(body, dict):
        raise _invalid("Request body must be a valid JSON object")

    return validate_content(body.get("content"))
