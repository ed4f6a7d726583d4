"""
=============================================================================
CORS (Cross-Origin Resource Sharing) MIDDLEWARE
=============================================================================

Annotates responses to cross-origin requests with access-control headers.

=============================================================================
WHAT IS CORS?
=============================================================================

Browsers block scripts from reading responses served by a different
origin unless the server opts in:

    ┌─────────┐                                          ┌─────────┐
    │ Browser │─────────── GET /api ────────────────────▶│ Server  │
    │         │           Origin: https://app.com        │         │
    │         │◀──────────────────────────────────────────│         │
    │         │    Access-Control-Allow-Origin: *        │         │
    │         │    Vary: Origin                          │         │
    └─────────┘                                          └─────────┘

    Origin = scheme + host + port

=============================================================================
WHAT THIS MIDDLEWARE DOES
=============================================================================

    1. await next(request)
    2. Append "Origin" to Vary (every response, CORS or not)
    3. For CORS requests, add:
         Access-Control-Allow-Origin       always
         Access-Control-Allow-Credentials  when allow_credentials is set
         Access-Control-Expose-Headers     when expose_headers is set and
                                           the request is not a preflight
    4. Return a NEW response; the downstream one is never modified

=============================================================================
DOWNSTREAM HEADERS WIN
=============================================================================

The computed access-control headers are the BASE of the merge and the
downstream response headers are applied on top:

    computed:    { access-control-allow-origin: "*" }
    downstream:  { access-control-allow-origin: "",  vary: "Origin" }
                 ─────────────────────────────────────────────────
    final:       { access-control-allow-origin: "",  vary: "Origin" }

A handler that sets its own access-control header keeps it.

=============================================================================
INTERVIEW QUESTIONS ABOUT CORS
=============================================================================

Q: "What's the Vary header for in CORS?"
A: "It tells caches the response depends on the Origin request header.
   Without it, a cache could serve the response computed for origin A
   to origin B."

Q: "Why add Vary: Origin to non-CORS responses too?"
A: "A cache may store the response to a same-origin request and later
   serve it to a cross-origin one. The Vary entry keeps those apart."

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, Optional, Pattern, Sequence, Union
import logging

from .base import Middleware, NextHandler
from .origin import create_origin_matcher, get_allowed_origin
from ..config import CORSConfig, WILDCARD, join_list
from ..http.headers import (
    CORSHeader,
    Headers,
    append_to_header_value,
    merge_headers,
)
from ..http.request import HTTPRequest, is_cors_preflight_request, is_cors_request
from ..http.response import HTTPResponse, copy_response


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CORSContext:
    """Header values precomputed once from a validated CORSConfig."""

    match_origin: Optional[Callable[[str], bool]] = None
    allow_credentials: Optional[str] = None
    expose_headers: Optional[str] = None

    @classmethod
    def from_config(cls, config: CORSConfig) -> "CORSContext":
        return cls(
            match_origin=create_origin_matcher(config.allow_origins),
            allow_credentials=config.serialized_credentials(),
            expose_headers=join_list(config.expose_headers),
        )


def add_vary(response: HTTPResponse, *names: str) -> Headers:
    """Response headers with `names` appended to Vary (nothing else changed)."""
    vary = append_to_header_value(response.headers.get(CORSHeader.VARY, ""), list(names))
    return merge_headers(response.headers, {CORSHeader.VARY: vary})


def apply_cors(
    context: CORSContext,
    request: HTTPRequest,
    response: HTTPResponse,
) -> HTTPResponse:
    """
    Derive the CORS-annotated copy of `response` for `request`.

    Pure function of its inputs; `response` is not modified.
    """
    headers = add_vary(response, "Origin")

    if not is_cors_request(request):
        return copy_response(response, headers=headers)

    origin = request.headers[CORSHeader.ORIGIN]
    allowed_origin = get_allowed_origin(origin, context.match_origin)
    if not allowed_origin:
        logger.debug(f"Origin not allowed: {origin!r}")

    left = Headers({CORSHeader.ACCESS_CONTROL_ALLOW_ORIGIN: allowed_origin})

    if context.allow_credentials:
        left[CORSHeader.ACCESS_CONTROL_ALLOW_CREDENTIALS] = context.allow_credentials
    if context.expose_headers and not is_cors_preflight_request(request):
        left[CORSHeader.ACCESS_CONTROL_EXPOSE_HEADERS] = context.expose_headers

    # Downstream headers go on top: existing access-control headers win
    final_headers = merge_headers(left, headers)

    return copy_response(response, headers=final_headers)


class CORSMiddleware(Middleware):
    """
    Adds access-control headers to responses for CORS requests.

    =========================================================================
    USAGE
    =========================================================================

        # Development: allow all origins
        pipeline.add(CORSMiddleware())

        # Production
        pipeline.add(CORSMiddleware(CORSConfig(
            allow_origins=["https://myapp.com"],
            allow_credentials=True,
            expose_headers=["X-Request-ID"],
        )))

    The config is validated here; an invalid one raises FormatError and
    no middleware is created.
    =========================================================================
    """

    def __init__(self, config: Optional[CORSConfig] = None):
        self.config = config or CORSConfig()
        self.config.validate()  # Fail-fast on invalid config
        self._context = CORSContext.from_config(self.config)

        logger.debug(
            f"CORS middleware configured: allow_origins={self.config.allow_origins!r} "
            f"allow_credentials={self._context.allow_credentials!r} "
            f"expose_headers={self._context.expose_headers!r}"
        )

    @property
    def context(self) -> CORSContext:
        return self._context

    async def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        response = await next(request)
        return apply_cors(self._context, request, response)


def cors(
    allow_origins: Optional[Union[str, Sequence[Union[str, Pattern[str]]]]] = WILDCARD,
    allow_credentials: Union[bool, str, None] = None,
    expose_headers: Optional[Sequence[str]] = None,
) -> CORSMiddleware:
    """
    Create CORS request middleware.

    Args:
        allow_origins: "*" or a sequence of literal origins / compiled patterns
        allow_credentials: True or "true" to send Access-Control-Allow-Credentials
        expose_headers: Header names sent in Access-Control-Expose-Headers

    Raises:
        FormatError: If an expose_headers entry is not a valid <field-name>
    """
    return CORSMiddleware(CORSConfig(
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        expose_headers=expose_headers,
    ))
