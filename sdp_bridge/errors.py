"""
Error taxonomy

Every failure an operation can surface is one of the categories below.
Operations raise these; the tool bridge is the only place that turns them
into caller-facing text.
"""
from enum import Enum
from typing import Dict, List, Optional


class ErrorCategory(str, Enum):
    """Closed set of caller-visible failure categories"""
    INVALID_INPUT = "InvalidInput"
    UNTRUSTED_LOCATION = "UntrustedLocation"
    AUTHENTICATION = "Authentication"
    NOT_FOUND = "NotFound"
    VALIDATION = "Validation"
    RATE_LIMITED = "RateLimited"
    UNAVAILABLE = "Unavailable"
    MALFORMED_RESPONSE = "MalformedResponse"
    REMOTE_ERROR = "RemoteError"


class OutcomeCategory(str, Enum):
    """Transport outcome categories the retry policy understands"""
    RATE_LIMITED = "rate_limited"
    SERVER_UNAVAILABLE = "server_unavailable"
    TIMEOUT = "timeout"
    CONNECTION_FAILED = "connection_failed"
    NON_TRANSIENT = "non_transient"


class BridgeError(Exception):
    """Base class for all classified failures"""

    category: ErrorCategory = ErrorCategory.REMOTE_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidInputError(BridgeError):
    """Caller-supplied value violated a shape, length or range constraint"""

    category = ErrorCategory.INVALID_INPUT

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class UntrustedLocationError(BridgeError):
    """A remote-supplied URL points outside the configured host"""

    category = ErrorCategory.UNTRUSTED_LOCATION


class AuthenticationError(BridgeError):
    category = ErrorCategory.AUTHENTICATION

    def __init__(self, message: str = "authentication failed - check SDP_API_KEY"):
        super().__init__(message)


class NotFoundError(BridgeError):
    category = ErrorCategory.NOT_FOUND

    def __init__(self, resource: str = "resource", identifier: Optional[str] = None):
        if identifier:
            message = f"{resource} not found: {identifier}"
        else:
            message = f"{resource} not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class RemoteValidationError(BridgeError):
    """The remote service rejected one or more field values"""

    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, field_errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.field_errors = field_errors or []


class TransientError(BridgeError):
    """Failure the retry policy may retry; carries its outcome category"""

    outcome: OutcomeCategory = OutcomeCategory.NON_TRANSIENT


class RateLimitedError(TransientError):
    category = ErrorCategory.RATE_LIMITED
    outcome = OutcomeCategory.RATE_LIMITED

    def __init__(self, retry_after: Optional[float] = None):
        super().__init__("rate limited by server - please wait before retrying")
        self.retry_after = retry_after


class UnavailableError(TransientError):
    category = ErrorCategory.UNAVAILABLE

    def __init__(self, reason: str, outcome: OutcomeCategory = OutcomeCategory.SERVER_UNAVAILABLE):
        super().__init__(f"service unavailable: {reason}")
        self.outcome = outcome


class MalformedResponseError(BridgeError):
    category = ErrorCategory.MALFORMED_RESPONSE

    def __init__(self, detail: str):
        super().__init__(f"malformed response: {detail}")


class RemoteError(BridgeError):
    """Classified remote failure with no dedicated category"""

    category = ErrorCategory.REMOTE_ERROR

    def __init__(self, code: int, message: str):
        super().__init__(f"remote error {code}: {message}")
        self.code = code
        self.remote_message = message
