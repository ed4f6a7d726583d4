"""
=============================================================================
ORIGIN MATCHING
=============================================================================

Decides whether a request's Origin is allowed, and what to echo back in
Access-Control-Allow-Origin.

    ┌──────────────────────────┬───────────────────┬──────────────────────┐
    │ allow_origins            │ Origin            │ Allow-Origin value   │
    ├──────────────────────────┼───────────────────┼──────────────────────┤
    │ "*"                      │ (anything)        │ "*"                  │
    │ ["https://a.com"]        │ https://a.com     │ "https://a.com"      │
    │ ["https://a.com"]        │ https://b.com     │ ""                   │
    │ [re.compile("a.com$")]   │ https://x.a.com   │ "https://x.a.com"    │
    └──────────────────────────┴───────────────────┴──────────────────────┘

A denied origin gets an EMPTY Allow-Origin header, not a missing one:
the header is present and matches no origin, so the browser blocks it.

Literal entries compare with ==. Pattern entries use search(), which is
unanchored; anchor the pattern yourself ("^https://...$") when needed.
=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, Optional, Pattern, Sequence, Tuple, Union
import re

from ..config import WILDCARD


@dataclass(frozen=True)
class LiteralOrigin:
    """An allow-list entry that must equal the origin exactly."""

    value: str

    def matches(self, origin: str) -> bool:
        return origin == self.value


@dataclass(frozen=True)
class PatternOrigin:
    """An allow-list entry tested as a regular expression."""

    pattern: Pattern[str]

    def matches(self, origin: str) -> bool:
        return self.pattern.search(origin) is not None


OriginRule = Union[LiteralOrigin, PatternOrigin]


def to_origin_rule(entry: Union[str, Pattern[str]]) -> OriginRule:
    """Tag a raw allow_origins entry as literal or pattern."""
    if isinstance(entry, re.Pattern):
        return PatternOrigin(entry)
    return LiteralOrigin(entry)


class OriginMatcher:
    """
    Predicate over origins built from an ordered allow-list.

    Calling the matcher returns True when any rule matches.
    """

    def __init__(self, entries: Sequence[Union[str, Pattern[str]]]):
        self._rules: Tuple[OriginRule, ...] = tuple(to_origin_rule(e) for e in entries)

    @property
    def rules(self) -> Tuple[OriginRule, ...]:
        return self._rules

    def __call__(self, origin: str) -> bool:
        return any(rule.matches(origin) for rule in self._rules)

    def __repr__(self) -> str:
        return f"OriginMatcher({list(self._rules)!r})"


def create_origin_matcher(
    allow_origins: Union[str, Sequence[Union[str, Pattern[str]]]]
) -> Optional[OriginMatcher]:
    """Build a matcher; None means every origin is allowed ("*")."""
    if allow_origins == WILDCARD:
        return None
    return OriginMatcher(allow_origins)


def get_allowed_origin(origin: str, matcher: Optional[Callable[[str], bool]]) -> str:
    """
    The Access-Control-Allow-Origin value for `origin`.

    "*" without a matcher, the origin itself when it matches, else "".
    """
    if matcher is None:
        return WILDCARD
    return origin if matcher(origin) else ""
