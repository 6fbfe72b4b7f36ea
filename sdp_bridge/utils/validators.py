"""
Input validation utilities

Pure checks applied to caller-supplied values before they are used to
build a request, and to remote-supplied URLs before they are fetched.
Each validator returns the accepted value or raises InvalidInputError /
UntrustedLocationError.
"""
import re
from datetime import datetime, timezone
from typing import Iterable, Optional
from urllib.parse import quote

import httpx
from dateutil import parser as date_parser

from sdp_bridge.errors import InvalidInputError, UntrustedLocationError


# Field ceilings (characters)
MAX_ID_DIGITS = 19
MAX_SUBJECT_LENGTH = 250
MAX_DESCRIPTION_LENGTH = 64 * 1024
MAX_NOTE_LENGTH = 32 * 1024
MAX_METADATA_LENGTH = 500

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')

DEFAULT_PORTS = {"http": 80, "https": 443}


def validate_id(value: str, field: str, max_digits: int = MAX_ID_DIGITS) -> str:
    """
    Validate an SDP numeric identifier

    SDP uses strictly numeric IDs, so anything else could smuggle path
    segments or query syntax into the URL it is embedded in.

    Args:
        value: Identifier to validate
        field: Field name for the error message
        max_digits: Upper bound on the digit count

    Returns:
        The identifier unchanged

    Raises:
        InvalidInputError: If empty, too long, or not all ASCII digits
    """
    if not value:
        raise InvalidInputError(field, "is required")
    # str.isdigit() accepts non-ASCII digits such as '²'
    if not (value.isascii() and value.isdigit()):
        raise InvalidInputError(field, f"must be a numeric string, got: {value[:50]!r}")
    if len(value) > max_digits:
        raise InvalidInputError(field, f"must be at most {max_digits} digits")
    return value


def validate_text(
    value: Optional[str],
    field: str,
    max_length: int = MAX_METADATA_LENGTH,
    required: bool = False
) -> Optional[str]:
    """
    Validate a bounded string field

    Args:
        value: Text to validate (None means absent)
        field: Field name for the error message
        max_length: Ceiling in characters (inclusive)
        required: Whether an absent or empty value is an error

    Returns:
        The text unchanged, or None when absent and optional
    """
    if value is None or value == "":
        if required:
            raise InvalidInputError(field, "is required and cannot be empty")
        return None
    if len(value) > max_length:
        raise InvalidInputError(
            field,
            f"exceeds maximum length of {max_length} characters (got {len(value)})"
        )
    return value


def validate_email(email: str) -> bool:
    """
    Validate email format

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    return EMAIL_PATTERN.match(email) is not None


def validate_requester_email(value: Optional[str], field: str = "requester_email") -> Optional[str]:
    value = validate_text(value, field, MAX_METADATA_LENGTH)
    if value is not None and not validate_email(value):
        raise InvalidInputError(field, "must be a valid email address")
    return value


def validate_choice(value: Optional[str], field: str, allowed: Iterable[str]) -> Optional[str]:
    """Accept only values from a fixed allow-list"""
    if value is None:
        return None
    allowed = list(allowed)
    if value not in allowed:
        raise InvalidInputError(field, f"must be one of: {', '.join(allowed)}")
    return value


def validate_range(value: Optional[int], field: str, minimum: int, maximum: int) -> Optional[int]:
    if value is None:
        return None
    if value < minimum or value > maximum:
        raise InvalidInputError(field, f"must be between {minimum} and {maximum}")
    return value


def validate_date(value: Optional[str], field: str) -> Optional[datetime]:
    """
    Validate a YYYY-MM-DD date

    Returns:
        Midnight UTC of that date, or None when absent
    """
    if value is None:
        return None
    if not DATE_PATTERN.match(value):
        raise InvalidInputError(field, "must be a date in YYYY-MM-DD format")
    try:
        parsed = date_parser.isoparse(value)
    except ValueError:
        raise InvalidInputError(field, f"is not a valid calendar date: {value}")
    return parsed.replace(tzinfo=timezone.utc)


def validate_content_url(url: str, base_url: str) -> str:
    """
    Validate a remote-supplied content URL against the configured host

    Relative paths are resolved against the base URL first. The result is
    accepted only if scheme, host and port all match the base URL, so a
    crafted value cannot send the authenticated client to another endpoint.

    Args:
        url: Absolute URL or server-relative path returned by SDP
        base_url: Configured SDP base URL

    Returns:
        Absolute URL that is safe to fetch

    Raises:
        UntrustedLocationError: On a different host, port or scheme
    """
    try:
        base = httpx.URL(base_url)
        resolved = base.join(url)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise UntrustedLocationError(f"invalid content URL: {e}")

    def _origin(u: httpx.URL):
        return (
            u.scheme,
            (u.host or "").lower(),
            u.port or DEFAULT_PORTS.get(u.scheme),
        )

    if _origin(resolved) != _origin(base):
        raise UntrustedLocationError(
            f"content URL host mismatch: expected {base.host!r}, got {resolved.host!r}"
        )
    return str(resolved)


def encode_path_segment(value: str) -> str:
    """Percent-encode a value for use in a caller-facing URL"""
    return quote(value, safe="")


def sanitize_input(text: str) -> str:
    """
    Sanitize user input

    Args:
        text: Input text to sanitize

    Returns:
        Text without null bytes and surrounding whitespace
    """
    return text.replace('\x00', '').strip()
