"""
=============================================================================
OPTION VALIDATORS
=============================================================================

Construct-time checks for CORS configuration values.

=============================================================================
THE TOKEN GRAMMAR (RFC 9110, Section 5.6.2)
=============================================================================

Header names and method names are both `token`s:

    token  = 1*tchar
    tchar  = "!" / "#" / "$" / "%" / "&" / "'" / "*"
           / "+" / "-" / "." / "^" / "_" / "`" / "|" / "~"
           / DIGIT / ALPHA

    field-name = token        (Section 5.1)
    method     = token        (Section 9.1)

So "Content-Type", "X-Request-ID" and "PATCH" are valid, while
"", "X Custom", "a:b" and "(foo)" are not.

=============================================================================
INSTANCE PATHS
=============================================================================

Error messages point at the exact list entry that failed:

    format_instance_path("expose_headers", 1)   → "expose_headers[1]"
    format_instance_path("a", 0, "b", 1)        → "a[0].b[1]"

=============================================================================
"""

import re
from typing import Any, Optional, Union

from .errors import FormatError, RangeError


# Compiled once at import time. fullmatch() anchors both ends.
TOKEN_PATTERN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def is_token(input: Any) -> bool:
    """Check whether input is a non-empty string matching the token grammar."""
    return isinstance(input, str) and TOKEN_PATTERN.fullmatch(input) is not None


def assert_token_format(input: Any, message: str, path: Optional[str] = None) -> None:
    """
    Raise FormatError if input is not a valid HTTP token.

    Args:
        input: Value to check
        message: Error message used when the check fails
        path: Instance path of the value, attached to the error
    """
    if not is_token(input):
        raise FormatError(message, value=input, path=path)


def assert_field_name_format(input: Any, message: str, path: Optional[str] = None) -> None:
    """Raise FormatError if input is not a valid `field-name` (header name)."""
    assert_token_format(input, message, path)


def assert_method_format(input: Any, message: str, path: Optional[str] = None) -> None:
    """Raise FormatError if input is not a valid `method` name."""
    assert_token_format(input, message, path)


def assert_non_negative_integer(input: Any, message: str, path: Optional[str] = None) -> None:
    """
    Raise RangeError unless input is an integer >= 0.

    bool is rejected even though it subclasses int; so are floats,
    including nan and inf.
    """
    if isinstance(input, bool) or not isinstance(input, int):
        raise RangeError(message, value=input, path=path)
    if input < 0:
        raise RangeError(message, value=input, path=path)


def format_instance_path(*segments: Union[str, int]) -> str:
    """
    Build a human-readable path for validation messages.

    The first segment is emitted bare. After that, string segments are
    prefixed with "." and integer segments are wrapped in "[...]".

    Examples:
        format_instance_path()               → ""
        format_instance_path("a", 0)         → "a[0]"
        format_instance_path(0, "0", 0, "0") → "0.0[0].0"
    """
    path = ""
    for i, segment in enumerate(segments):
        if i == 0:
            path = str(segment)
        elif isinstance(segment, str):
            path += f".{segment}"
        else:
            path += f"[{segment}]"
    return path


def describe_value(value: Any) -> str:
    """Render a value for an error message; strings are double-quoted."""
    if isinstance(value, str):
        return f'"{value}"'
    return repr(value)
