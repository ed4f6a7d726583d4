"""
=============================================================================
CONFIGURATION ERRORS
=============================================================================

Exceptions raised while building CORS middleware.

Every error in this package happens at CONSTRUCTION time, never while a
request is being handled:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      WHEN CAN THINGS FAIL?                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Application startup                  Request handling             │
    │   ───────────────────                  ────────────────             │
    │   cors(expose_headers=[""])            await middleware(req, next)  │
    │          │                                     │                    │
    │          ▼                                     ▼                    │
    │   FormatError / RangeError             never raises on its own      │
    │   (no middleware is created)           (errors from next propagate) │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Both concrete errors subclass ValueError, so callers that only care about
"bad configuration" can catch CORSConfigError or plain ValueError.
=============================================================================
"""

from typing import Any, Optional


class CORSConfigError(ValueError):
    """
    Base class for invalid CORS configuration.

    Carries the offending value and, when the value came from a list
    option, the instance path that locates it (e.g. "allow_headers[2]").
    """

    def __init__(self, message: str, value: Any = None, path: Optional[str] = None):
        super().__init__(message)
        self.value = value
        self.path = path


class FormatError(CORSConfigError):
    """A header or method name does not match the HTTP token grammar."""


class RangeError(CORSConfigError):
    """A numeric option is outside its allowed range (e.g. negative max_age)."""
