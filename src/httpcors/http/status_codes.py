"""
=============================================================================
HTTP STATUS CODES
=============================================================================

Status codes used by the CORS middleware and by the responses it copies.

A preflight response only ever uses one of two success codes:

    204 No Content  - the default; a preflight response has no body
    200 OK          - for old clients that mishandle 204 on OPTIONS

Anything a downstream handler returns is passed through untouched, so
HTTPResponse also accepts plain integers that are not listed here.
=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """HTTP status codes with their reason phrases."""

    # 2xx Success
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    # 4xx Client Errors
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405

    # 5xx Server Errors
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 204 No Content
                     ─── ──────────
                      │      └──── Reason phrase
                      └────────── Status code
        """
        return _STATUS_PHRASES.get(self, "Unknown")


def reason_phrase(status: int) -> str:
    """Reason phrase for any integer status; "" when the code is unknown."""
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


# Statuses a preflight response may be configured with.
PREFLIGHT_STATUSES = (HTTPStatus.OK, HTTPStatus.NO_CONTENT)


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
}
