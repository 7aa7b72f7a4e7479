"""
=============================================================================
HTTP RESPONSE
=============================================================================

Every handler produces the same three-part response:

    HTTP/1.1 200 OK\r\n                   ← Status line
    Content-Type: text/html\r\n           ← The only header
    \r\n                                  ← Blank line
    <html><body>...</body></html>         ← Body bytes

The connection is closed after every response, so the client learns that
the body has ended from the FIN, not from a Content-Length header.

=============================================================================
BODIES ARE BYTES, ALWAYS
=============================================================================

The body is stored and serialized as `bytes` from end to end. A PNG read
from disk goes into the response untouched:

    path.read_bytes() ──► HTTPResponse.body ──► to_bytes() ──► sendall()

Only the status line and header are encoded (ASCII-safe). Passing
binary content through a str would corrupt every byte that is not
valid text.

=============================================================================
"""

from dataclasses import dataclass
from typing import Union

from .status_codes import HTTPStatus


HTML = "text/html"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Constructed by a handler, serialized once by the connection worker,
    then discarded.

    Attributes:
        status: HTTP status code (enum).
        content_type: Value of the Content-Type header.
        body: Raw body bytes.
        version: HTTP version for the status line.
    """

    status: HTTPStatus = HTTPStatus.OK
    content_type: str = HTML
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def to_bytes(self) -> bytes:
        """
        Serialize the response for socket.sendall().

        Returns:
            Status line, Content-Type header, blank line, then the body.
        """
        head = (
            f"{self.status_line}\r\n"
            f"Content-Type: {self.content_type}\r\n"
            "\r\n"
        )
        return head.encode("latin-1") + self.body


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def html(body: Union[str, bytes], status: HTTPStatus = HTTPStatus.OK) -> HTTPResponse:
    """
    Create an HTML response.

    Strings are encoded as UTF-8; bytes are used as given.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    return HTTPResponse(status=status, content_type=HTML, body=body)


def error_page(status: HTTPStatus) -> HTTPResponse:
    """
    Create the fixed HTML fragment used for every error status.

    Example:
        >>> error_page(HTTPStatus.NOT_FOUND).body
        b'<html><body><h1>404 Not Found</h1></body></html>'
    """
    return html(
        f"<html><body><h1>{int(status)} {status.phrase}</h1></body></html>",
        status=status,
    )


def not_found() -> HTTPResponse:
    """404 Not Found with the standard HTML body."""
    return error_page(HTTPStatus.NOT_FOUND)


def bad_request() -> HTTPResponse:
    """400 Bad Request with the standard HTML body."""
    return error_page(HTTPStatus.BAD_REQUEST)


def service_unavailable() -> HTTPResponse:
    """503, sent when the worker queue refuses a connection."""
    return error_page(HTTPStatus.SERVICE_UNAVAILABLE)
