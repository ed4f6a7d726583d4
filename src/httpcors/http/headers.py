"""
=============================================================================
HEADER UTILITIES
=============================================================================

A case-insensitive header map plus the two operations the CORS middleware
builds everything else on: right-biased merge and comma-list append.

=============================================================================
WHY LOWERCASE KEYS?
=============================================================================

HTTP field names are case-insensitive (RFC 9110, Section 5.1):

    "Vary", "vary" and "VARY" are the same header.

Headers normalizes names once, on the way in, so every lookup and every
merge compares names the same way:

    headers = Headers({"Vary": "Accept"})
    headers["VARY"]          → "Accept"
    "vary" in headers        → True
    list(headers)            → ["vary"]

=============================================================================
MERGE SEMANTICS
=============================================================================

    merge_headers(base, overrides)

    base:       { vary: "Accept",  x-a: "1" }
    overrides:  { vary: "Origin",  x-b: "2" }
                ───────────────────────────
    result:     { vary: "Origin",  x-a: "1",  x-b: "2" }

Neither input is mutated. The CORS middleware relies on the ORDER of the
arguments: whichever set is passed as `overrides` wins on collision.

=============================================================================
"""

from collections.abc import Mapping, MutableMapping
from typing import Dict, Iterator, Optional, Sequence, Union


ACCESS_CONTROL = "access-control"


class CORSHeader:
    """Wire names (lower-case) of the headers this package reads or writes."""

    ORIGIN = "origin"
    VARY = "vary"

    # Request side (sent by the browser on preflight)
    ACCESS_CONTROL_REQUEST_METHOD = f"{ACCESS_CONTROL}-request-method"
    ACCESS_CONTROL_REQUEST_HEADERS = f"{ACCESS_CONTROL}-request-headers"

    # Response side
    ACCESS_CONTROL_ALLOW_ORIGIN = f"{ACCESS_CONTROL}-allow-origin"
    ACCESS_CONTROL_ALLOW_CREDENTIALS = f"{ACCESS_CONTROL}-allow-credentials"
    ACCESS_CONTROL_ALLOW_METHODS = f"{ACCESS_CONTROL}-allow-methods"
    ACCESS_CONTROL_ALLOW_HEADERS = f"{ACCESS_CONTROL}-allow-headers"
    ACCESS_CONTROL_EXPOSE_HEADERS = f"{ACCESS_CONTROL}-expose-headers"
    ACCESS_CONTROL_MAX_AGE = f"{ACCESS_CONTROL}-max-age"


# Separator for list-valued header values ("GET, POST").
LIST_SEPARATOR = ", "


class Headers(MutableMapping):
    """
    Ordered, case-insensitive mapping of header name → value.

    Names are stored lower-cased in insertion order. Setting an existing
    name replaces its value in place. Multiple values for one name are
    expected to be joined with ", " before they get here.
    """

    def __init__(self, headers: Optional[Union[Mapping, Sequence]] = None):
        self._store: Dict[str, str] = {}
        if headers is not None:
            self.update(headers)

    def __getitem__(self, name: str) -> str:
        return self._store[name.lower()]

    def __setitem__(self, name: str, value: str) -> None:
        self._store[name.lower()] = value

    def __delitem__(self, name: str) -> None:
        del self._store[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._store

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return self._store == {str(k).lower(): v for k, v in other.items()}

    def __repr__(self) -> str:
        return f"Headers({self._store!r})"

    def copy(self) -> "Headers":
        """Return an independent shallow copy."""
        return Headers(self)


def merge_headers(base: Mapping, overrides: Mapping) -> Headers:
    """
    Merge two header sets into a new Headers; `overrides` wins on collision.

    Args:
        base: Headers to start from
        overrides: Headers applied on top (case-insensitive key match)

    Returns:
        A new Headers containing every key of both inputs
    """
    merged = Headers(base)
    for name, value in overrides.items():
        merged[name] = value
    return merged


def append_to_header_value(existing: str, to_add: Union[str, Sequence[str]]) -> str:
    """
    Append one or more values to a comma-separated header value.

    No de-duplication is done; Vary tolerates repeated entries.

        append_to_header_value("", "Origin")            → "Origin"
        append_to_header_value("Accept", "Origin")      → "Accept, Origin"
        append_to_header_value("", ["Origin", "Host"])  → "Origin, Host"
    """
    values = [to_add] if isinstance(to_add, str) else list(to_add)
    joined = LIST_SEPARATOR.join(values)

    if not existing:
        return joined
    return f"{existing}{LIST_SEPARATOR}{joined}"
