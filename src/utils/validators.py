"""Input normalization helpers shared by handlers and services."""

from typing import Optional

from utils.error_handling import InvalidCodeError

MIN_LOOKUP_CODE_LENGTH = 3


def clean_text(value: Optional[str]) -> str:
    """Trim a possibly missing string."""
    return (value or "").strip()


def normalize_code(raw: Optional[str], min_length: int = MIN_LOOKUP_CODE_LENGTH) -> str:
    """
    Trim and upper-case a typed or scanned ticket code.

    Scanner payloads are untrusted and go through the same rules as manual input.
    """
    code = clean_text(raw).upper()
    if len(code) < min_length:
        raise InvalidCodeError()
    return code
