"""
Secret Redaction and Truncation

Keeps the SDP API key out of anything a caller or a log file can see,
and caps the size of text that originates from the remote service.
"""
from typing import Optional


REDACTED = "[REDACTED]"
TRUNCATION_MARKER = "...[truncated]"

# Remote error bodies are capped to avoid surfacing verbose server internals
MAX_ERROR_BODY_LENGTH = 500


def redact(text: str, secret: Optional[str]) -> str:
    """
    Replace every literal occurrence of a secret with a fixed placeholder.

    Args:
        text: Text that may contain the secret
        secret: Secret value to strip (empty or None leaves text untouched)

    Returns:
        Text with every occurrence of the secret replaced by [REDACTED]

    Examples:
        >>> redact("token=abc123 failed", "abc123")
        'token=[REDACTED] failed'

        >>> redact("nothing to hide", "")
        'nothing to hide'
    """
    if not text or not secret:
        return text
    return text.replace(secret, REDACTED)


def truncate(text: str, max_length: int = MAX_ERROR_BODY_LENGTH) -> str:
    """
    Cap text at max_length characters, appending a truncation marker.

    Args:
        text: Text to cap
        max_length: Number of characters kept before the marker

    Returns:
        Original text if short enough, otherwise the first max_length
        characters followed by ...[truncated]
    """
    if text is None or len(text) <= max_length:
        return text
    return f"{text[:max_length]}{TRUNCATION_MARKER}"
