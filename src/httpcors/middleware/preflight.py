"""
=============================================================================
CORS PREFLIGHT MIDDLEWARE
=============================================================================

Answers CORS preflight requests without ever reaching application code.

=============================================================================
PREFLIGHT FLOW
=============================================================================

Before a "non-simple" cross-origin request (PUT, DELETE, JSON bodies,
custom headers), the browser asks for permission:

    ┌─────────┐                                          ┌─────────┐
    │ Browser │─────────── OPTIONS /api ────────────────▶│ Server  │
    │         │  Origin: https://app.com                 │         │
    │         │  Access-Control-Request-Method: DELETE   │         │
    │         │  Access-Control-Request-Headers: x-token │         │
    │         │◀──────────────────────────────────────────│         │
    │         │  204 No Content                          │         │
    │         │  Access-Control-Allow-Origin: *          │         │
    │         │  Access-Control-Allow-Methods: DELETE    │         │
    │         │  Access-Control-Allow-Headers: x-token   │         │
    │         │  Vary: Origin, Access-Control-Request-   │         │
    │         │        Method, Access-Control-Request-   │         │
    │         │        Headers                           │         │
    └─────────┘                                          └─────────┘

=============================================================================
THREE BRANCHES
=============================================================================

    ┌────────────────────────────┬───────────────┬────────────────────────┐
    │ Request                    │ Calls next?   │ Result                 │
    ├────────────────────────────┼───────────────┼────────────────────────┤
    │ method != OPTIONS          │ yes           │ downstream, untouched  │
    │ OPTIONS, not a preflight   │ yes           │ downstream + 3 Vary    │
    │ full preflight             │ NO            │ synthesized response   │
    └────────────────────────────┴───────────────┴────────────────────────┘

The synthesized response is built from scratch. A preflight must never
reach application logic, so there is no downstream response to merge.

When allow_methods / allow_headers are not configured, the response
echoes what the browser asked for.
=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, Optional, Pattern, Sequence, Union
import logging

from .base import Middleware, NextHandler
from .cors import add_vary
from .origin import create_origin_matcher, get_allowed_origin
from ..config import PreflightConfig, WILDCARD, join_list
from ..http.headers import CORSHeader, Headers, LIST_SEPARATOR
from ..http.request import OPTIONS, HTTPRequest, is_cors_preflight_request
from ..http.response import HTTPResponse, ResponseBuilder, copy_response
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


# Request headers that influence a preflight response, in Vary order.
PREFLIGHT_VARY = (
    "Origin",
    "Access-Control-Request-Method",
    "Access-Control-Request-Headers",
)


@dataclass(frozen=True)
class PreflightContext:
    """Header values precomputed once from a validated PreflightConfig."""

    match_origin: Optional[Callable[[str], bool]] = None
    allow_credentials: Optional[str] = None
    allow_headers: Optional[str] = None
    allow_methods: Optional[str] = None
    max_age: Optional[str] = None
    status: int = HTTPStatus.NO_CONTENT

    @classmethod
    def from_config(cls, config: PreflightConfig) -> "PreflightContext":
        return cls(
            match_origin=create_origin_matcher(config.allow_origins),
            allow_credentials=config.serialized_credentials(),
            allow_headers=join_list(config.allow_headers),
            allow_methods=join_list(config.allow_methods),
            max_age=None if config.max_age is None else str(config.max_age),
            status=HTTPStatus(config.status),
        )


def build_preflight_response(context: PreflightContext, request: HTTPRequest) -> HTTPResponse:
    """Synthesize the short-circuit response for a preflight request."""
    headers = Headers({
        CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: get_allowed_origin(
            request.headers[CORSHeader.ORIGIN],
            context.match_origin,
        ),
        CORSHeader.ACCESS_CONTROL_ALLOW_HEADERS: (
            context.allow_headers
            if context.allow_headers
            else request.headers[CORSHeader.ACCESS_CONTROL_REQUEST_HEADERS]
        ),
        CORSHeader.ACCESS_CONTROL_ALLOW_METHODS: (
            context.allow_methods
            if context.allow_methods
            else request.headers[CORSHeader.ACCESS_CONTROL_REQUEST_METHOD]
        ),
        CORSHeader.VARY: LIST_SEPARATOR.join(PREFLIGHT_VARY),
    })

    if context.max_age is not None:
        headers[CORSHeader.ACCESS_CONTROL_MAX_AGE] = context.max_age
    if context.allow_credentials:
        headers[CORSHeader.ACCESS_CONTROL_ALLOW_CREDENTIALS] = context.allow_credentials

    return ResponseBuilder().status(context.status).headers(headers).build()


class PreflightMiddleware(Middleware):
    """
    Short-circuits CORS preflight requests.

    Place it OUTSIDE anything that should not see preflight traffic
    (authentication, rate limiting, the router):

        pipeline.add(PreflightMiddleware(PreflightConfig(max_age=600)))
        pipeline.add(CORSMiddleware())
        pipeline.add(AuthMiddleware())
    """

    def __init__(self, config: Optional[PreflightConfig] = None):
        self.config = config or PreflightConfig()
        self.config.validate()  # Fail-fast on invalid config
        self._context = PreflightContext.from_config(self.config)

        logger.debug(
            f"Preflight middleware configured: allow_origins={self.config.allow_origins!r} "
            f"allow_methods={self._context.allow_methods!r} "
            f"allow_headers={self._context.allow_headers!r} "
            f"max_age={self._context.max_age!r} status={int(self._context.status)}"
        )

    @property
    def context(self) -> PreflightContext:
        return self._context

    async def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        if request.method != OPTIONS:
            return await next(request)

        if not is_cors_preflight_request(request):
            response = await next(request)
            return copy_response(response, headers=add_vary(response, *PREFLIGHT_VARY))

        logger.debug(
            f"Preflight for origin {request.headers[CORSHeader.ORIGIN]!r}, "
            f"method {request.headers[CORSHeader.ACCESS_CONTROL_REQUEST_METHOD]!r}"
        )
        return build_preflight_response(self._context, request)


def preflight(
    allow_origins: Optional[Union[str, Sequence[Union[str, Pattern[str]]]]] = WILDCARD,
    allow_credentials: Union[bool, str, None] = None,
    allow_headers: Optional[Sequence[str]] = None,
    allow_methods: Optional[Sequence[str]] = None,
    max_age: Optional[int] = None,
    status: int = HTTPStatus.NO_CONTENT,
) -> PreflightMiddleware:
    """
    Create CORS preflight middleware.

    Args:
        allow_origins: "*" or a sequence of literal origins / compiled patterns
        allow_credentials: True or "true" to send Access-Control-Allow-Credentials
        allow_headers: Access-Control-Allow-Headers; echoes the request when unset
        allow_methods: Access-Control-Allow-Methods; echoes the request when unset
        max_age: Access-Control-Max-Age in seconds
        status: 204 (default) or 200

    Raises:
        RangeError: If max_age is not a non-negative integer, or status is
            not 200/204
        FormatError: If an allow_headers or allow_methods entry is invalid
    """
    return PreflightMiddleware(PreflightConfig(
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_headers=allow_headers,
        allow_methods=allow_methods,
        max_age=max_age,
        status=status,
    ))
