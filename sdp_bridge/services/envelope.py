"""
SDP response envelope decoding

Every SDP v3 response wraps its payload together with a status block:

    {"response_status": {"status_code": 2000, "status": "success"},
     "request": {...}}

List endpoints return the status block as a one-element list. A status
code outside the success range always becomes an error, never a partial
payload. Codes are mapped through a fixed table because SDP message text
changes between versions.
"""
import json
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from sdp_bridge.errors import (
    AuthenticationError,
    BridgeError,
    ErrorCategory,
    MalformedResponseError,
    NotFoundError,
    RemoteError,
    RemoteValidationError,
)
from sdp_bridge.models.common import ResponseStatus

T = TypeVar("T", bound=BaseModel)

SUCCESS_CODES = range(2000, 3000)
GENERIC_FAILURE_CODE = 4000

STATUS_CODE_TABLE: Dict[int, ErrorCategory] = {
    4000: ErrorCategory.VALIDATION,
    4001: ErrorCategory.AUTHENTICATION,
    4002: ErrorCategory.AUTHENTICATION,
    4005: ErrorCategory.NOT_FOUND,
    4007: ErrorCategory.NOT_FOUND,
    4012: ErrorCategory.VALIDATION,
    4014: ErrorCategory.VALIDATION,
}


def _parse(body: Union[str, bytes]) -> Tuple[ResponseStatus, Dict[str, Any]]:
    try:
        document = json.loads(body)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"response is not valid JSON ({e.__class__.__name__})")

    if not isinstance(document, dict):
        raise MalformedResponseError("response is not a JSON object")

    raw_status = document.get("response_status")
    if isinstance(raw_status, list):
        raw_status = raw_status[0] if raw_status else None
    if raw_status is None:
        raise MalformedResponseError("response_status block is missing")

    try:
        status = ResponseStatus.model_validate(raw_status)
    except ValidationError:
        raise MalformedResponseError("response_status block has an unexpected shape")

    return status, document


def error_from_status(status: ResponseStatus) -> BridgeError:
    """
    Map a failed status block to a taxonomy error

    Args:
        status: Status block whose code is outside the success range

    Returns:
        Classified error; unknown codes become RemoteError
    """
    code = status.status_code
    first = status.messages[0] if status.messages else None
    if code == GENERIC_FAILURE_CODE and first is not None and first.status_code:
        code = first.status_code

    message = first.message if first and first.message else "Unknown error"
    category = STATUS_CODE_TABLE.get(code)

    factories: Dict[ErrorCategory, Callable[[], BridgeError]] = {
        ErrorCategory.AUTHENTICATION: lambda: AuthenticationError(),
        ErrorCategory.NOT_FOUND: lambda: NotFoundError(),
        ErrorCategory.VALIDATION: lambda: RemoteValidationError(
            message,
            [
                {"field": m.field, "message": m.message}
                for m in status.messages if m.field
            ],
        ),
    }
    factory = factories.get(category)
    if factory is None:
        return RemoteError(code, message)
    return factory()


def decode(body: Union[str, bytes], model: Type[T]) -> T:
    """
    Decode an SDP envelope into the expected payload model

    Args:
        body: Raw response body
        model: Pydantic model describing the payload keys

    Returns:
        Decoded payload

    Raises:
        MalformedResponseError: Body or payload could not be parsed
        BridgeError: Status block reports a failure
    """
    status, document = _parse(body)
    if status.status_code not in SUCCESS_CODES:
        raise error_from_status(status)

    try:
        return model.model_validate(document)
    except ValidationError as e:
        locations = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise MalformedResponseError(
            f"payload does not match {model.__name__} ({', '.join(locations[:5])})"
        )


def classify_error_body(body: Union[str, bytes]) -> Optional[BridgeError]:
    """
    Classify a non-2xx body that may still carry an SDP envelope

    Returns:
        The classified error, or None if the body is not a failed envelope
    """
    try:
        status, _ = _parse(body)
    except MalformedResponseError:
        return None
    if status.status_code in SUCCESS_CODES:
        return None
    return error_from_status(status)
