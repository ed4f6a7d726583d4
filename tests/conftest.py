"""
pytest configuration and fixtures.
"""

from typing import Callable, List, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpcors.http import HTTPRequest, HTTPResponse, ResponseBuilder


class RecordingHandler:
    """Async downstream handler that returns a fixed response and counts calls."""

    def __init__(self, response: Optional[HTTPResponse] = None):
        self.response = response if response is not None else HTTPResponse()
        self.calls: List[HTTPRequest] = []

    async def __call__(self, request: HTTPRequest) -> HTTPResponse:
        self.calls.append(request)
        return self.response

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture
def handler_factory() -> Callable[..., RecordingHandler]:
    """Build a RecordingHandler; pass a response or headers to return."""
    def make(response: Optional[HTTPResponse] = None, headers: Optional[dict] = None) -> RecordingHandler:
        if response is None and headers is not None:
            response = ResponseBuilder().headers(headers).build()
        return RecordingHandler(response)

    return make


@pytest.fixture
def downstream() -> RecordingHandler:
    """Downstream handler returning an empty 200 response."""
    return RecordingHandler()


@pytest.fixture
def cors_request() -> HTTPRequest:
    """Simple cross-origin GET request."""
    return HTTPRequest(
        method="GET",
        path="/api/users",
        headers={"Origin": "http://test.example"},
    )


@pytest.fixture
def preflight_request() -> HTTPRequest:
    """Full CORS preflight request."""
    return HTTPRequest(
        method="OPTIONS",
        path="/api/users",
        headers={
            "Origin": "http://test.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )
