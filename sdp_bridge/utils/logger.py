"""
Logging configuration
"""
import logging
import sys
from typing import Optional

from sdp_bridge.config import get_log_settings
from sdp_bridge.utils.sanitizer import redact


class RedactingFilter(logging.Filter):
    """
    Scrub the configured secret from every record passing through a handler.

    The message is rendered once (msg % args) and stored back on the record,
    so exception text interpolated into a log call is covered as well.
    """

    def __init__(self):
        super().__init__()
        self.secret: Optional[str] = None

    def filter(self, record: logging.LogRecord) -> bool:
        if self.secret:
            message = record.getMessage()
            record.msg = redact(message, self.secret)
            record.args = None
        return True


_redaction_filter = RedactingFilter()


def install_redaction(secret: Optional[str]) -> None:
    """
    Register the secret that every handler created here must redact

    Args:
        secret: Raw credential value (None disables redaction)
    """
    _redaction_filter.secret = secret


def setup_logger(name: str) -> logging.Logger:
    """
    Setup logger with standard format

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, get_log_settings().log_level.upper(), logging.INFO))

    if not logger.handlers:
        # stderr: stdout belongs to the tool protocol
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        handler.addFilter(_redaction_filter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger for a module"""
    return setup_logger(name)
