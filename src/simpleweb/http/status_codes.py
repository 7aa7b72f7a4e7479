"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can produce, with their reason phrases.

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ OK                  - /static hit, /stats, valid /calc    │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  400   │ Bad Request         - malformed request line or /calc     │
    │        │                       query                               │
    │  404   │ Not Found           - unknown path, missing static file   │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  503   │ Service Unavailable - bounded queue full, connection      │
    │        │                       rejected                            │
    └────────┴───────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    Extends IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    SERVICE_UNAVAILABLE = 503

    @property
    def phrase(self) -> str:
        """
        Reason phrase used in the status line:

            HTTP/1.1 404 Not Found
                     ─── ─────────
        """
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
}
