"""
=============================================================================
ACCESS LOGGING
=============================================================================

One log record per completed response, on its own logger so it can be
routed or silenced independently of the server's diagnostic logs:

    logging.getLogger("simpleweb.access").setLevel(logging.WARNING)

Two formats:

    text   127.0.0.1 - - [2026-10-19T12:00:00+00:00] "GET /stats" 200 142 0.41ms
    json   {"connection_id": "1f3a9c0d", "method": "GET", "path": "/stats", ...}

=============================================================================
"""

import json
import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone


logger = logging.getLogger("simpleweb.access")


@dataclass
class RequestLog:
    """
    Structured log entry for one request.

    Attributes:
        connection_id: Connection identifier, matches the server logs.
        method: Request method ("-" if the line was malformed).
        path: Request path ("-" if the line was malformed).
        client_ip: Client's IP address.
        status_code: Response status.
        bytes_received: Request-line bytes read.
        bytes_sent: Response bytes written.
        duration_ms: Time from accept to response written.
        timestamp: ISO-8601 UTC time the response completed.
    """

    connection_id: str
    method: str
    path: str
    client_ip: str
    status_code: int
    bytes_received: int
    bytes_sent: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        """Apache-like single line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.bytes_sent} {self.duration_ms:.2f}ms'
        )


class AccessLogger:
    """
    Emits RequestLog entries in the configured format.

    Usage:
        access_log = AccessLogger(log_format="json")
        access_log.log(RequestLog(...))
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        self.log_format = log_format
        self.log_level = log_level

    def log(self, entry: RequestLog) -> None:
        if not logger.isEnabledFor(self.log_level):
            return

        if self.log_format == "json":
            message = json.dumps(entry.to_dict())
        else:
            message = entry.to_text()

        logger.log(self.log_level, message)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")
