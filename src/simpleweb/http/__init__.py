"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

The protocol side of the server, independent of sockets and threads:

    request.py       Request line → ParsedRequest | MalformedRequest
    router.py        Path → RouteDecision → handler
    response.py      HTTPResponse and its wire serialization
    status_codes.py  The status codes this server emits
    mime_types.py    File extension → Content-Type

=============================================================================
"""

from .request import (
    ParsedRequest,
    MalformedRequest,
    ParseResult,
    RequestParser,
    parse_request,
)
from .response import (
    HTTPResponse,
    html,
    error_page,
    not_found,
    bad_request,
    service_unavailable,
)
from .router import (
    Router,
    RouteDecision,
    StaticFile,
    Stats,
    Calculation,
    NotFound,
    resolve_route,
)
from .status_codes import HTTPStatus
from .mime_types import get_mime_type

__all__ = [
    # Request parsing
    "ParsedRequest",
    "MalformedRequest",
    "ParseResult",
    "RequestParser",
    "parse_request",

    # Responses
    "HTTPResponse",
    "html",
    "error_page",
    "not_found",
    "bad_request",
    "service_unavailable",

    # Routing
    "Router",
    "RouteDecision",
    "StaticFile",
    "Stats",
    "Calculation",
    "NotFound",
    "resolve_route",

    # Status codes
    "HTTPStatus",

    # Content types
    "get_mime_type",
]
