"""
Authenticated HTTP transport for the SDP v3 API

Builds requests (credential header, versioned Accept header, the single
`input_data` parameter), executes them over a pooled httpx.AsyncClient,
classifies failures into the error taxonomy and applies the retry policy.
"""
import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx
from pydantic import SecretStr

from sdp_bridge.errors import (
    AuthenticationError,
    BridgeError,
    NotFoundError,
    OutcomeCategory,
    RateLimitedError,
    RemoteError,
    TransientError,
    UnavailableError,
)
from sdp_bridge.services.envelope import classify_error_body
from sdp_bridge.services.retry import DEFAULT_RETRY_POLICY, RetryPolicy
from sdp_bridge.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
SDP_ACCEPT_HEADER = "application/vnd.manageengine.sdp.v3+json"
API_PATH = "/api/v3"


def normalize_api_base(url: str) -> str:
    """
    Ensure the base URL ends with /api/v3

    Examples:
        >>> normalize_api_base("https://sd.example.com/")
        'https://sd.example.com/api/v3'
        >>> normalize_api_base("https://sd.example.com/api")
        'https://sd.example.com/api/v3'
    """
    url = url.rstrip("/")
    if url.endswith(API_PATH):
        return url
    if url.endswith("/api"):
        return f"{url}/v3"
    return f"{url}{API_PATH}"


def web_base(url: str) -> str:
    """Base URL with any /api or /api/v3 suffix removed"""
    url = url.rstrip("/")
    for suffix in (API_PATH, "/api"):
        if url.endswith(suffix):
            return url[: -len(suffix)]
    return url


@dataclass(frozen=True)
class RawResponse:
    """Successful HTTP response, body not yet decoded"""
    status_code: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)


class Transport:
    """
    HTTP transport with retry logic and error classification

    One transport owns one httpx.AsyncClient, so connections are pooled
    across concurrent operations.
    """

    def __init__(
        self,
        base_url: str,
        credential: SecretStr,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
        policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    ):
        self.base_url = normalize_api_base(base_url)
        self.timeout = timeout
        self.policy = policy
        self._credential = credential
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> Dict[str, str]:
        # SECURITY: header only, never a query parameter, never logged
        return {
            "authtoken": self._credential.get_secret_value(),
            "Accept": SDP_ACCEPT_HEADER,
        }

    async def execute(
        self,
        method: str,
        path: str,
        input_data: Optional[Dict[str, Any]] = None,
    ) -> RawResponse:
        """
        Execute one logical operation, retrying transient failures

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: API path below /api/v3 (e.g. "/requests/123")
            input_data: Structured parameter, serialized once and sent whole

        Returns:
            RawResponse for a 2xx outcome

        Raises:
            BridgeError: Classified failure, after the retry budget for
                transient categories is spent
        """
        return await self._with_retry(f"{method} {path}", method, self.base_url + path, input_data)

    async def fetch(self, url: str) -> RawResponse:
        """GET an absolute URL that the caller has already validated"""
        return await self._with_retry(f"GET {httpx.URL(url).path}", "GET", url, None)

    async def _with_retry(
        self,
        operation: str,
        method: str,
        url: str,
        input_data: Optional[Dict[str, Any]],
    ) -> RawResponse:
        attempt = 0
        failures: Dict[OutcomeCategory, int] = {}
        while True:
            attempt += 1
            try:
                return await self._send(method, url, input_data)
            except TransientError as e:
                failures[e.outcome] = failures.get(e.outcome, 0) + 1
                decision = self.policy.decide(e.outcome, failures[e.outcome])
                if not decision.retry:
                    if attempt > 1:
                        logger.warning(f"{operation}: giving up after {attempt} attempts ({e.category.value})")
                    raise
                logger.warning(
                    f"{operation} failed (attempt {attempt}, {e.outcome.value}), "
                    f"retrying in {decision.delay * 1000:.0f}ms"
                )
                # Cancellation interrupts the wait and propagates
                await asyncio.sleep(decision.delay)

    async def _send(
        self,
        method: str,
        url: str,
        input_data: Optional[Dict[str, Any]],
    ) -> RawResponse:
        params = None
        data = None
        if input_data is not None:
            encoded = json.dumps(input_data)
            if method.upper() == "GET":
                params = {"input_data": encoded}
            else:
                data = {"input_data": encoded}

        logger.debug(f"SDP request: {method} {httpx.URL(url).path}")

        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                data=data,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.TimeoutException:
            raise UnavailableError(
                f"request timed out after {self.timeout:g}s",
                outcome=OutcomeCategory.TIMEOUT,
            )
        except httpx.TransportError as e:
            raise UnavailableError(
                f"connection failed ({e.__class__.__name__})",
                outcome=OutcomeCategory.CONNECTION_FAILED,
            )

        if response.is_success:
            return RawResponse(response.status_code, response.text, dict(response.headers))

        raise self._classify(response)

    def _classify(self, response: httpx.Response) -> BridgeError:
        status = response.status_code

        if status in (401, 403):
            return AuthenticationError()
        if status == 404:
            return NotFoundError()
        if status == 429:
            logger.warning("Rate limited by SDP server")
            return RateLimitedError(retry_after=_retry_after(response))
        if status in (502, 503, 504):
            logger.warning(f"SDP server temporarily unavailable ({status})")
            return UnavailableError(f"HTTP {status}")

        classified = classify_error_body(response.text)
        if classified is not None:
            return classified
        # Kept whole: the bridge redacts before it truncates
        return RemoteError(status, response.text or response.reason_phrase)

    async def aclose(self) -> None:
        await self._client.aclose()


def _retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("retry-after")
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None
