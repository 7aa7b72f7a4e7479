"""
=============================================================================
CONTENT TYPE RESOLUTION
=============================================================================

Maps a file extension to the media type sent in the Content-Type header
of /static responses.

    ┌────────────────────────────────────────────────────────────────────┐
    │  .html .htm   → text/html                                          │
    │  .css         → text/css                                           │
    │  .js          → application/javascript                             │
    │  .png         → image/png                                          │
    │  .jpg .jpeg   → image/jpeg                                         │
    │  .gif         → image/gif                                          │
    │  (anything)   → application/octet-stream                           │
    └────────────────────────────────────────────────────────────────────┘

Unknown extensions, and names without one, fall back to
application/octet-stream ("unknown binary data"), so a client never
tries to render bytes it cannot interpret.

No charset parameter is appended: files are served as raw bytes, and the
server makes no claim about how they are encoded.

=============================================================================
"""

from pathlib import Path
from typing import Optional, Union


MIME_TYPES = {
    # text
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    # images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


def get_mime_type(path: Union[str, Path], default: Optional[str] = None) -> str:
    """
    Get the media type for a file based on its extension.

    Args:
        path: File path or name with extension.
        default: Media type for unknown extensions.
                 Uses application/octet-stream if not specified.

    Returns:
        The media type string.

    Examples:
        >>> get_mime_type("style.css")
        'text/css'

        >>> get_mime_type("/static/img/LOGO.PNG")
        'image/png'

        >>> get_mime_type("archive.tar")
        'application/octet-stream'
    """
    if isinstance(path, str):
        path = Path(path)

    extension = path.suffix.lower()  # .PNG → .png
    return MIME_TYPES.get(extension, default or DEFAULT_MIME_TYPE)
