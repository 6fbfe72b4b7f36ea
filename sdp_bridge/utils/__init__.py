"""
Utility functions
"""
from sdp_bridge.utils.logger import get_logger, install_redaction, setup_logger
from sdp_bridge.utils.sanitizer import redact, truncate
from sdp_bridge.utils.validators import (
    validate_id,
    validate_text,
    validate_email,
    validate_content_url,
    sanitize_input
)

__all__ = [
    "get_logger",
    "install_redaction",
    "setup_logger",
    "redact",
    "truncate",
    "validate_id",
    "validate_text",
    "validate_email",
    "validate_content_url",
    "sanitize_input",
]
