"""
=============================================================================
httpcors - CORS middleware for async HTTP pipelines
=============================================================================

Two composable middleware:

    cors()       adds Access-Control-Allow-Origin, -Allow-Credentials and
                 -Expose-Headers to responses for cross-origin requests,
                 and keeps Vary: Origin on every response

    preflight()  answers OPTIONS preflight requests directly with the
                 full preflight header set

QUICK START:

    from httpcors import MiddlewarePipeline, cors, preflight

    pipeline = MiddlewarePipeline().use(
        preflight(allow_methods=["GET", "POST"], max_age=600),
        cors(allow_origins=["https://app.example.com"], allow_credentials=True),
    )
    handler = pipeline.wrap(app)

    response = await handler(request)

Invalid options raise FormatError / RangeError immediately, before any
request is handled.
=============================================================================
"""

from .config import CORSConfig, PreflightConfig
from .errors import CORSConfigError, FormatError, RangeError
from .http import (
    CORSHeader,
    Headers,
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    ResponseBuilder,
    append_to_header_value,
    copy_response,
    is_cors_preflight_request,
    is_cors_request,
    merge_headers,
)
from .middleware import (
    CORSMiddleware,
    FunctionMiddleware,
    Middleware,
    MiddlewarePipeline,
    PreflightMiddleware,
    cors,
    function_middleware,
    get_allowed_origin,
    preflight,
)
from .validators import (
    assert_field_name_format,
    assert_method_format,
    assert_non_negative_integer,
    assert_token_format,
    format_instance_path,
)

__version__ = "1.0.0"

__all__ = [
    # Factories
    "cors",
    "preflight",

    # Middleware
    "CORSMiddleware",
    "PreflightMiddleware",
    "Middleware",
    "MiddlewarePipeline",
    "FunctionMiddleware",
    "function_middleware",

    # Configuration
    "CORSConfig",
    "PreflightConfig",

    # Errors
    "CORSConfigError",
    "FormatError",
    "RangeError",

    # HTTP
    "CORSHeader",
    "Headers",
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "ResponseBuilder",
    "append_to_header_value",
    "copy_response",
    "merge_headers",
    "is_cors_request",
    "is_cors_preflight_request",
    "get_allowed_origin",

    # Validators
    "assert_token_format",
    "assert_field_name_format",
    "assert_method_format",
    "assert_non_negative_integer",
    "format_instance_path",
]
