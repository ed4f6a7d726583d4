"""
=============================================================================
HTTP RESPONSE
=============================================================================

Immutable response values, a fluent builder, and copy-with-overrides.

=============================================================================
NEVER MUTATE A DOWNSTREAM RESPONSE
=============================================================================

A response returned by `next(request)` may also be held by a cache, a
logger, or another middleware further out. Middleware therefore never
edits it in place. It produces a NEW response instead:

    downstream ─────► HTTPResponse(status=200, headers={vary: "Accept"})
                                │
                                │  copy_response(response, headers=...)
                                ▼
    returned   ─────► HTTPResponse(status=200, headers={vary: "Accept, Origin",
                                                        access-control-...})

    The original object is left exactly as it was.

=============================================================================
BUILDER PATTERN
=============================================================================

    response = (ResponseBuilder()
        .status(HTTPStatus.NO_CONTENT)
        .header("Access-Control-Allow-Origin", "*")
        .build())

Each method returns `self` except build(), which returns a fresh
HTTPResponse with its own copy of the headers.
=============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from .headers import Headers
from .status_codes import HTTPStatus, reason_phrase


@dataclass(frozen=True)
class HTTPResponse:
    """
    An HTTP response value.

    status_text defaults to the reason phrase of `status`.
    """

    status: int = HTTPStatus.OK
    headers: Mapping[str, str] = field(default_factory=Headers)
    body: bytes = b""
    status_text: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))
        if self.status_text is None:
            object.__setattr__(self, "status_text", reason_phrase(self.status))

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line, e.g. "HTTP/1.1 204 No Content".
        """
        return f"HTTP/1.1 {int(self.status)} {self.status_text}"


_OVERRIDABLE = frozenset({"status", "status_text", "headers", "body"})


def copy_response(response: HTTPResponse, **overrides: Any) -> HTTPResponse:
    """
    Return a new response based on `response` with some fields replaced.

    Headers are replaced wholesale when given, never merged; callers that
    want merge semantics pre-merge with merge_headers(). When `status` is
    overridden without `status_text`, the text follows the new status.

    Raises:
        TypeError: If an unknown field name is passed.
    """
    unknown = set(overrides) - _OVERRIDABLE
    if unknown:
        raise TypeError(f"copy_response() got unexpected fields: {sorted(unknown)}")

    status = overrides.get("status", response.status)
    if "status_text" in overrides:
        status_text = overrides["status_text"]
    elif "status" in overrides:
        status_text = reason_phrase(status)
    else:
        status_text = response.status_text

    headers = overrides.get("headers", response.headers)

    return HTTPResponse(
        status=status,
        headers=Headers(headers),
        body=overrides.get("body", response.body),
        status_text=status_text,
    )


class ResponseBuilder:
    """Fluent builder for HTTPResponse values."""

    def __init__(self):
        self._status: int = HTTPStatus.OK
        self._headers = Headers()
        self._body: bytes = b""

    def status(self, status: int) -> "ResponseBuilder":
        """Set the status code."""
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Set a single header (replaces an existing value)."""
        self._headers[name] = value
        return self

    def headers(self, headers: Mapping[str, str]) -> "ResponseBuilder":
        """Set several headers at once."""
        self._headers.update(headers)
        return self

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the body; strings are encoded as UTF-8."""
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def build(self) -> HTTPResponse:
        """Build the response. The builder can be reused afterwards."""
        return HTTPResponse(
            status=self._status,
            headers=self._headers.copy(),
            body=self._body,
        )
