"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Serves files from the static root for every path that starts with
"/static".

=============================================================================
FLOW
=============================================================================

    Request: GET /static/img/logo.png

    1. Strip the 7-character "/static" prefix       → "/img/logo.png"
    2. Join the remainder onto the static root      → static/img/logo.png
    3. Security check: is the path inside the root?  no  → 404
    4. Is it an existing regular file?               no  → 404
    5. Look up Content-Type from the extension      → image/png
    6. Read the file as raw bytes                   → 200 + body

=============================================================================
PATH TRAVERSAL
=============================================================================

Without a check, this request escapes the static root:

    GET /static/../../etc/passwd
        → static/../../etc/passwd
        → /etc/passwd                    ← NOT a static file!

We resolve the joined path (following "..", symlinks) and require the
result to still be inside the resolved root. Anything outside is answered
with the same 404 as a missing file, so the response does not reveal what
exists elsewhere on disk.

=============================================================================
BYTE FIDELITY
=============================================================================

Files are read with Path.read_bytes() and placed in the response body
unchanged. They are never decoded, so a PNG, a gzip archive or a UTF-16
text file reaches the client byte-for-byte as it is on disk.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..http.mime_types import get_mime_type
from ..http.response import HTTPResponse, not_found
from ..http.router import STATIC_PREFIX
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class StaticFileHandler:
    """
    Handler for serving static files.

    Usage:
        static = StaticFileHandler("static")
        response = static.handle("/static/index.html")

    Errors:
        - Missing file, directory, or path outside the root → 404
        - Any other OSError while reading propagates to the caller, which
          abandons the connection.
    """

    def __init__(self, root_dir: Union[str, Path] = "static", url_prefix: str = STATIC_PREFIX):
        """
        Initialize static file handler.

        Args:
            root_dir: Directory files are served from. It is not required
                      to exist; while it is missing every request is a 404.
            url_prefix: Prefix stripped from the request path.
        """
        self.root_dir = Path(root_dir).resolve()
        self.url_prefix = url_prefix

        if not self.root_dir.is_dir():
            logger.warning(f"Static root does not exist (yet): {self.root_dir}")

    def handle(self, path: str) -> HTTPResponse:
        """
        Handle a static file request.

        Args:
            path: Request path beginning with the URL prefix.

        Returns:
            200 with the file bytes, or 404.
        """
        full_path = self.resolve(path)
        if full_path is None:
            return not_found()

        try:
            content = full_path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            # Deleted or replaced between the check and the read
            return not_found()

        return HTTPResponse(
            status=HTTPStatus.OK,
            content_type=get_mime_type(full_path),
            body=content,
        )

    def resolve(self, path: str) -> Optional[Path]:
        """
        Map a request path to a regular file inside the static root.

        Returns:
            The resolved file path, or None when there is nothing to serve.
        """
        remainder = path[len(self.url_prefix):].lstrip("/")

        try:
            full_path = (self.root_dir / remainder).resolve()
            full_path.relative_to(self.root_dir)
        except ValueError:
            # Outside the root, or a name the OS cannot represent (NUL byte)
            logger.warning(f"Rejected static path outside root: {path!r}")
            return None
        except OSError as e:
            logger.debug(f"Cannot resolve static path {path!r}: {e}")
            return None

        if not full_path.is_file():
            return None

        return full_path
