"""
=============================================================================
HTTP PRIMITIVES
=============================================================================

The request/response values the CORS middleware works on.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ headers.py       Headers map, CORSHeader names, merge / append      │
    │ request.py       HTTPRequest, is_cors_request, is_cors_preflight_*  │
    │ response.py      HTTPResponse, ResponseBuilder, copy_response       │
    │ status_codes.py  HTTPStatus                                         │
    └─────────────────────────────────────────────────────────────────────┘
=============================================================================
"""

from .headers import (
    CORSHeader,
    Headers,
    append_to_header_value,
    merge_headers,
)
from .request import HTTPRequest, is_cors_preflight_request, is_cors_request
from .response import HTTPResponse, ResponseBuilder, copy_response
from .status_codes import HTTPStatus

__all__ = [
    # Headers
    "CORSHeader",
    "Headers",
    "append_to_header_value",
    "merge_headers",

    # Request
    "HTTPRequest",
    "is_cors_request",
    "is_cors_preflight_request",

    # Response
    "HTTPResponse",
    "ResponseBuilder",
    "copy_response",

    # Status codes
    "HTTPStatus",
]
