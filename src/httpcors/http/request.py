"""
=============================================================================
HTTP REQUEST AND CORS CLASSIFIERS
=============================================================================

The request value handed to middleware, and the two predicates that decide
which CORS branch a request takes.

=============================================================================
CLASSIFYING A REQUEST
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    WHAT KIND OF REQUEST IS THIS?                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Has "Origin" header?                                               │
    │        │                                                             │
    │        ├── no  ──► plain request (same-origin, curl, server-side)   │
    │        │                                                             │
    │        └── yes ──► CORS request                                      │
    │                       │                                              │
    │             method == OPTIONS                                        │
    │             AND has Access-Control-Request-Method                    │
    │             AND has Access-Control-Request-Headers ?                 │
    │                       │                                              │
    │                       ├── no  ──► "actual" CORS request              │
    │                       └── yes ──► CORS PREFLIGHT request             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Both checks look at header PRESENCE only. An empty
"Access-Control-Request-Headers:" still counts as present.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Mapping

from .headers import CORSHeader, Headers


OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class HTTPRequest:
    """
    An incoming HTTP request, as seen by middleware.

    Frozen: middleware reads requests, it never rewrites them. Headers
    given as a plain dict are normalized into a case-insensitive Headers.
    """

    method: str
    path: str = "/"
    headers: Mapping[str, str] = field(default_factory=Headers)
    body: bytes = b""
    version: str = "HTTP/1.1"

    def __post_init__(self):
        # frozen=True blocks normal assignment
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value (case-insensitive lookup)."""
        return self.headers.get(name, default)

    @property
    def origin(self) -> str:
        """The Origin header value, or "" when absent."""
        return self.headers.get(CORSHeader.ORIGIN, "")


def is_cors_request(request: HTTPRequest) -> bool:
    """A CORS request is any request that carries an Origin header."""
    return CORSHeader.ORIGIN in request.headers


def is_cors_preflight_request(request: HTTPRequest) -> bool:
    """
    Whether the request is a CORS preflight request.

    Fetch Living Standard, 3.2.2: an OPTIONS CORS request that announces
    the method and headers of the request the browser wants to make.
    """
    return (
        is_cors_request(request)
        and request.method == OPTIONS
        and CORSHeader.ACCESS_CONTROL_REQUEST_METHOD in request.headers
        and CORSHeader.ACCESS_CONTROL_REQUEST_HEADERS in request.headers
    )
