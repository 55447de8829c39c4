"""
Input checks shared by license handlers.

Client input errors are raised before any store access.
"""
from typing import Optional

from core.domain.exceptions import InvalidFieldError, MissingFieldError
from core.domain.value_objects import OwnerId


def require_text(value: Optional[str], missing_code: str, message: str) -> str:
    """
    Return ``value`` stripped, or raise if it is absent or blank.

    Args:
        value: Raw request value
        missing_code: Error code reported when missing
        message: Error message reported when missing

    Returns:
        Stripped value
    """
    text = (value or "").strip()
    if not text:
        raise MissingFieldError(missing_code, message)
    return text


def require_owner_id(value: Optional[str], missing_code: str = "MISSING_OWNER_ID") -> str:
    """Validate an owner identifier."""
    owner_id = require_text(value, missing_code, "Owner ID is required")
    try:
        OwnerId(owner_id)
    except ValueError as e:
        raise InvalidFieldError("INVALID_OWNER_ID", str(e)) from e
    return owner_id


# Longest term accepted; larger values overflow datetime arithmetic.
MAX_TERM_DAYS = 36500


def _check_upper_bound(days: int) -> int:
    if days > MAX_TERM_DAYS:
        raise InvalidFieldError("INVALID_DAYS", f"Days must not exceed {MAX_TERM_DAYS}")
    return days


def positive_days(value, default: int) -> int:
    """
    Lenient term parsing: missing or non-positive values fall back to ``default``.

    Raises:
        InvalidFieldError: INVALID_DAYS if the term is longer than MAX_TERM_DAYS
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return default
    return _check_upper_bound(value)


def strict_days(value, default: int) -> int:
    """
    Strict term parsing: missing means ``default``, anything else must be a
    positive int no larger than MAX_TERM_DAYS.

    Raises:
        InvalidFieldError: INVALID_DAYS
    """
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidFieldError("INVALID_DAYS", "Days must be a positive integer")
    return _check_upper_bound(value)
