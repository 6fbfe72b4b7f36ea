"""
Pytest configuration and fixtures
"""
import json
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest

from sdp_bridge.config import Settings
from sdp_bridge.services.sdp_client import SdpClient
from sdp_bridge.services.transport import Transport
from sdp_bridge.tools.bridge import ToolBridge

BASE_URL = "https://sdp.example.com"
API_KEY = "a1b2c3d4-sdp-live-token-9f8e7d"


def envelope(payload: Optional[Dict[str, Any]] = None, status_code: int = 2000, **extra) -> Dict[str, Any]:
    """SDP response body with a response_status block"""
    status = "success" if 2000 <= status_code < 3000 else "failed"
    body: Dict[str, Any] = {"response_status": {"status_code": status_code, "status": status, **extra}}
    body.update(payload or {})
    return body


def json_response(status_code: int, body: Union[Dict[str, Any], str], headers: Optional[Dict[str, str]] = None) -> httpx.Response:
    content = body if isinstance(body, str) else json.dumps(body)
    return httpx.Response(status_code, content=content.encode(), headers=headers)


def fresh(response: httpx.Response) -> httpx.Response:
    """Unread copy of a canned response, so it can be served more than once"""
    return httpx.Response(response.status_code, content=response.content, headers=response.headers)


class RecordingHandler:
    """
    MockTransport handler replaying a fixed sequence of responses

    Each item is an httpx.Response, an exception instance to raise, or a
    callable taking the request. The last item repeats once the sequence
    runs out. Every request is recorded.
    """

    def __init__(self, *outcomes: Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]):
        self.outcomes = list(outcomes)
        self.requests: List[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        if callable(outcome) and not isinstance(outcome, httpx.Response):
            return outcome(request)
        return fresh(outcome)


class RoutingHandler:
    """MockTransport handler answering by (method, path); unknown routes get a 404"""

    def __init__(self, routes: Dict[tuple, httpx.Response]):
        self.routes = routes
        self.requests: List[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, request.url.path))
        if response is None:
            return json_response(404, envelope(status_code=4000, messages=[{"status_code": 4007, "message": "Not found"}]))
        return fresh(response)


@pytest.fixture
def settings() -> Settings:
    """Settings built from explicit values, ignoring any local .env"""
    return Settings(
        _env_file=None,
        sdp_base_url=BASE_URL,
        sdp_api_key=API_KEY,
        sdp_timeout_seconds=5.0,
    )


@pytest.fixture
def make_transport(settings):
    """Factory for a Transport backed by an httpx.MockTransport handler"""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> Transport:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return Transport(settings.sdp_base_url, settings.sdp_api_key, timeout=5.0, client=client)

    return _make


@pytest.fixture
def make_client(settings, make_transport):
    """Factory for an SdpClient whose transport is mocked"""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> SdpClient:
        return SdpClient(settings, transport=make_transport(handler))

    return _make


@pytest.fixture
def make_bridge(make_client):
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> ToolBridge:
        return ToolBridge(make_client(handler))

    return _make


@pytest.fixture
def sample_ticket() -> Dict[str, Any]:
    """Ticket record as returned by GET /requests/{id}"""
    return {
        "id": "12345",
        "subject": "VPN drops every 10 minutes",
        "description": "<p>Since Monday the VPN client disconnects.</p>",
        "status": {"id": "2", "name": "Open"},
        "priority": {"id": "3", "name": "High"},
        "technician": {"id": "301", "name": "Dana Lee"},
        "requester": {"id": "88", "name": "Sam Ortiz"},
        "group": {"id": "5", "name": "Network"},
        "category": {"id": "7", "name": "Network"},
        "subcategory": {"id": "9", "name": "VPN"},
        "created_time": {"value": "1700000000000", "display_value": "Nov 14, 2023 10:13 PM"},
        "is_overdue": False,
    }


@pytest.fixture
def sample_ticket_list() -> Dict[str, Any]:
    return {
        "requests": [
            {
                "id": "101",
                "subject": "Printer offline",
                "status": {"name": "Open"},
                "priority": {"name": "Low"},
                "requester": {"name": "Ana Diaz"},
            },
            {
                "id": 102,
                "subject": None,
                "status": {"name": "On Hold"},
            },
        ],
        "list_info": {"has_more_rows": True, "row_count": 2, "start_index": 1},
    }
