"""
=============================================================================
CORS CONFIGURATION
=============================================================================

Typed, frozen configuration for the two CORS middleware.

=============================================================================
CONFIGURATION OPTIONS
=============================================================================

    CORSConfig (actual CORS requests)
    - allow_origins, allow_credentials, expose_headers

    PreflightConfig (OPTIONS preflight requests)
    - allow_origins, allow_credentials
    - allow_headers, allow_methods, max_age, status

=============================================================================
DEVELOPMENT VS PRODUCTION
=============================================================================

Development:
    CORSConfig()                      # any origin, "*" echoed back

Production:
    CORSConfig(
        allow_origins=["https://app.example.com", re.compile(r"\\.example\\.com$")],
        allow_credentials=True,
        expose_headers=["X-Request-ID"],
    )

=============================================================================
FAIL-FAST
=============================================================================

validate() is called by the middleware constructor. A bad value stops
the application at startup, not on the first cross-origin request hours
into a deployment. No middleware is ever built from an invalid config.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional, Pattern, Sequence, Tuple, Union
import os
import re

from .errors import FormatError, RangeError
from .http.headers import LIST_SEPARATOR
from .http.status_codes import HTTPStatus, PREFLIGHT_STATUSES
from .validators import (
    assert_field_name_format,
    assert_method_format,
    assert_non_negative_integer,
    describe_value,
    format_instance_path,
)


WILDCARD = "*"

OriginEntry = Union[str, Pattern[str]]
AllowOrigins = Union[str, Sequence[OriginEntry]]

_TRUTHY = ("1", "true", "yes", "on")


def _as_tuple(values):
    """Freeze a list option; strings and None pass through unchanged."""
    if values is None or isinstance(values, str):
        return values
    return tuple(values)


def join_list(values: Optional[Sequence[str]]) -> Optional[str]:
    """Serialize a list option as a header value; None when empty or unset."""
    if not values:
        return None
    return LIST_SEPARATOR.join(values)


def _env_list(name: str) -> Optional[Tuple[str, ...]]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _env_origins(name: str) -> AllowOrigins:
    raw = os.getenv(name, "").strip()
    if not raw or raw == WILDCARD:
        return WILDCARD
    return _env_list(name) or ()


def _env_int(name: str, option: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError:
        raise RangeError(
            f"{option} must be an integer. {describe_value(raw)}",
            value=raw,
            path=option,
        ) from None


def _env_flag(name: str) -> Optional[bool]:
    raw = os.getenv(name)
    if raw is None:
        return None
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class BaseCORSConfig:
    """Options shared by actual-request and preflight handling."""

    # ─────────────────────────────────────────────────────────────────────
    # "*" allows every origin and echoes "*".
    # A sequence of literal strings / compiled patterns echoes the request
    # origin when one entry matches, and "" when none does.
    # ─────────────────────────────────────────────────────────────────────
    allow_origins: Optional[AllowOrigins] = WILDCARD

    # ─────────────────────────────────────────────────────────────────────
    # True or "true" emits Access-Control-Allow-Credentials: true.
    # None / False leave the header out.
    # ─────────────────────────────────────────────────────────────────────
    allow_credentials: Union[bool, str, None] = None

    def __post_init__(self):
        # None means "not configured", same as every other option
        origins = WILDCARD if self.allow_origins is None else self.allow_origins
        object.__setattr__(self, "allow_origins", _as_tuple(origins))

    def serialized_credentials(self) -> Optional[str]:
        """The Access-Control-Allow-Credentials value, or None if not sent."""
        if self.allow_credentials is True or self.allow_credentials == "true":
            return "true"
        return None

    def validate(self) -> None:
        """
        Validate the shared options.

        Raises:
            FormatError: allow_origins or allow_credentials has a bad value
        """
        origins = self.allow_origins
        if isinstance(origins, str):
            if origins != WILDCARD:
                raise FormatError(
                    f'allow_origins must be "*" or a sequence. {describe_value(origins)}',
                    value=origins,
                    path="allow_origins",
                )
        else:
            for i, entry in enumerate(origins):
                if not isinstance(entry, (str, re.Pattern)):
                    path = format_instance_path("allow_origins", i)
                    raise FormatError(
                        f"{path} must be a string or a compiled pattern. {describe_value(entry)}",
                        value=entry,
                        path=path,
                    )

        if self.allow_credentials not in (None, False, True, "true"):
            raise FormatError(
                f'allow_credentials must be True or "true". {describe_value(self.allow_credentials)}',
                value=self.allow_credentials,
                path="allow_credentials",
            )


@dataclass(frozen=True)
class CORSConfig(BaseCORSConfig):
    """
    Configuration for CORSMiddleware.

    Usage:
        config = CORSConfig(expose_headers=["X-Request-ID"])
        config.validate()
    """

    # Response headers scripts may read beyond the CORS-safelisted ones
    expose_headers: Optional[Sequence[str]] = None

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "expose_headers", _as_tuple(self.expose_headers))

    @classmethod
    def from_env(cls, prefix: str = "CORS_") -> "CORSConfig":
        """
        Create configuration from environment variables.

            CORS_ALLOW_ORIGINS      "*" or comma-separated origins (default: *)
            CORS_ALLOW_CREDENTIALS  true / 1 / yes / on
            CORS_EXPOSE_HEADERS     comma-separated header names
        """
        return cls(
            allow_origins=_env_origins(f"{prefix}ALLOW_ORIGINS"),
            allow_credentials=_env_flag(f"{prefix}ALLOW_CREDENTIALS"),
            expose_headers=_env_list(f"{prefix}EXPOSE_HEADERS"),
        )

    def validate(self) -> None:
        """
        Validate every option.

        Raises:
            FormatError: An expose_headers entry is not a <field-name>
        """
        super().validate()

        for i, name in enumerate(self.expose_headers or ()):
            path = format_instance_path("expose_headers", i)
            assert_field_name_format(
                name,
                f"{path} is invalid <field-name> format. {describe_value(name)}",
                path,
            )


@dataclass(frozen=True)
class PreflightConfig(BaseCORSConfig):
    """
    Configuration for PreflightMiddleware.

    allow_headers / allow_methods left unset make the preflight response
    echo whatever the browser asked for.
    """

    allow_headers: Optional[Sequence[str]] = None
    allow_methods: Optional[Sequence[str]] = None

    # Seconds the browser may cache the preflight result
    max_age: Optional[int] = None

    # 204 No Content (default) or 200 OK
    status: int = HTTPStatus.NO_CONTENT

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "allow_headers", _as_tuple(self.allow_headers))
        object.__setattr__(self, "allow_methods", _as_tuple(self.allow_methods))

    @classmethod
    def from_env(cls, prefix: str = "CORS_") -> "PreflightConfig":
        """
        Create configuration from environment variables.

            CORS_ALLOW_ORIGINS      "*" or comma-separated origins (default: *)
            CORS_ALLOW_CREDENTIALS  true / 1 / yes / on
            CORS_ALLOW_HEADERS      comma-separated header names
            CORS_ALLOW_METHODS      comma-separated method names
            CORS_MAX_AGE            integer seconds
            CORS_PREFLIGHT_STATUS   200 or 204 (default: 204)

        Raises:
            RangeError: CORS_MAX_AGE or CORS_PREFLIGHT_STATUS is not an integer
        """
        status = _env_int(f"{prefix}PREFLIGHT_STATUS", "status")
        return cls(
            allow_origins=_env_origins(f"{prefix}ALLOW_ORIGINS"),
            allow_credentials=_env_flag(f"{prefix}ALLOW_CREDENTIALS"),
            allow_headers=_env_list(f"{prefix}ALLOW_HEADERS"),
            allow_methods=_env_list(f"{prefix}ALLOW_METHODS"),
            max_age=_env_int(f"{prefix}MAX_AGE", "max_age"),
            status=HTTPStatus.NO_CONTENT if status is None else status,
        )

    def validate(self) -> None:
        """
        Validate every option.

        Raises:
            RangeError: max_age is not a non-negative integer, or status
                is not 200/204
            FormatError: An allow_headers entry is not a <field-name>, or
                an allow_methods entry is not a <method>
        """
        super().validate()

        if self.max_age is not None:
            assert_non_negative_integer(
                self.max_age,
                f"max_age must be non-negative integer. {describe_value(self.max_age)}",
                "max_age",
            )

        for i, name in enumerate(self.allow_headers or ()):
            path = format_instance_path("allow_headers", i)
            assert_field_name_format(
                name,
                f"{path} is invalid <field-name> format. {describe_value(name)}",
                path,
            )

        for i, method in enumerate(self.allow_methods or ()):
            path = format_instance_path("allow_methods", i)
            assert_method_format(
                method,
                f"{path} is invalid <method> format. {describe_value(method)}",
                path,
            )

        if isinstance(self.status, bool) or self.status not in PREFLIGHT_STATUSES:
            raise RangeError(
                f"status must be 200 or 204. {describe_value(self.status)}",
                value=self.status,
                path="status",
            )
