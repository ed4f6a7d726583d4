"""
=============================================================================
CORS MIDDLEWARE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    MIDDLEWARE PIPELINE                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Incoming Request                                                   │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌──────────────────────┐                                          │
    │   │ PreflightMiddleware  │ ──► answers OPTIONS preflight directly   │
    │   └──────────┬───────────┘                                          │
    │              ▼                                                       │
    │   ┌──────────────────────┐                                          │
    │   │ CORSMiddleware       │ ──► adds Allow-Origin & friends, Vary    │
    │   └──────────┬───────────┘                                          │
    │              ▼                                                       │
    │   ┌──────────────────────┐                                          │
    │   │   Your Handler       │                                          │
    │   └──────────────────────┘                                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Both middleware are stateless apart from configuration captured once at
construction, so a single instance can be shared by every request.
=============================================================================
"""

from .base import (
    FunctionMiddleware,
    Middleware,
    MiddlewarePipeline,
    NextHandler,
    function_middleware,
)
from .cors import CORSContext, CORSMiddleware, cors
from .origin import (
    LiteralOrigin,
    OriginMatcher,
    PatternOrigin,
    create_origin_matcher,
    get_allowed_origin,
)
from .preflight import PreflightContext, PreflightMiddleware, preflight

__all__ = [
    # Base classes
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "FunctionMiddleware",
    "function_middleware",

    # CORS
    "CORSContext",
    "CORSMiddleware",
    "cors",

    # Preflight
    "PreflightContext",
    "PreflightMiddleware",
    "preflight",

    # Origin matching
    "LiteralOrigin",
    "PatternOrigin",
    "OriginMatcher",
    "create_origin_matcher",
    "get_allowed_origin",
]
