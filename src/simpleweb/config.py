"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables live in one dataclass, filled from (lowest to highest
priority):

    1. Defaults below
    2. Environment variables       ServerConfig.from_env()
    3. Command-line flags          python -m simpleweb -p 8080

The config is validated once, before the port is bound, and treated as
read-only once the server is running.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the web server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK      host, port, backlog, buffer_size, timeout
    PROTOCOL     max_line_length
    WORKERS      workers, queue_size, block_when_full
    CONTENT      static_root
    LOGGING      log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Interface to bind. "0.0.0.0" accepts connections on every interface."""

    port: int = 80
    """
    Port to listen on. 80 is the standard HTTP port and needs root on
    Unix. 0 lets the OS pick a free port (used by tests).
    """

    backlog: int = 128
    """Kernel queue of connections waiting for accept()."""

    buffer_size: int = 4096
    """Bytes requested per recv() while reading the request line."""

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds. None (the default) blocks
    forever: a silent client keeps its worker busy until it disconnects.
    """

    # ─────────────────────────────────────────────────────────────────────
    # PROTOCOL
    # ─────────────────────────────────────────────────────────────────────

    max_line_length: int = 8192
    """Longest request line accepted; longer lines get 400 Bad Request."""

    # ─────────────────────────────────────────────────────────────────────
    # WORKER POOL
    # ─────────────────────────────────────────────────────────────────────

    workers: int = 10
    """Number of worker threads. Fixed for the life of the server."""

    queue_size: int = 0
    """Connections allowed to wait for a worker. 0 = unbounded."""

    block_when_full: bool = True
    """
    With a bounded queue: True stalls the accept loop until a slot frees
    up, False rejects the connection with 503.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    static_root: str = "static"
    """Directory that /static/<rest> is served from."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    log_format: str = "text"
    """Access log format: 'text' (one line per request) or 'json'."""

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        SIMPLEWEB_HOST          Interface to bind (default: 0.0.0.0)
        SIMPLEWEB_PORT          Port (default: 80)
        SIMPLEWEB_WORKERS       Worker threads (default: 10)
        SIMPLEWEB_QUEUE_SIZE    Queue bound, 0 = unbounded (default: 0)
        SIMPLEWEB_TIMEOUT       Socket timeout in seconds (default: none)
        SIMPLEWEB_STATIC_ROOT   Static root (default: static)
        SIMPLEWEB_LOG_LEVEL     Logging level (default: INFO)
        SIMPLEWEB_LOG_FORMAT    text or json (default: text)

        =====================================================================

        Args:
            environ: Mapping to read instead of os.environ (tests).

        Raises:
            ValueError: If a numeric variable does not parse.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        timeout = env.get("SIMPLEWEB_TIMEOUT")

        return cls(
            host=env.get("SIMPLEWEB_HOST", defaults.host),
            port=int(env.get("SIMPLEWEB_PORT", defaults.port)),
            workers=int(env.get("SIMPLEWEB_WORKERS", defaults.workers)),
            queue_size=int(env.get("SIMPLEWEB_QUEUE_SIZE", defaults.queue_size)),
            timeout=float(timeout) if timeout else None,
            static_root=env.get("SIMPLEWEB_STATIC_ROOT", defaults.static_root),
            log_level=env.get("SIMPLEWEB_LOG_LEVEL", defaults.log_level),
            log_format=env.get("SIMPLEWEB_LOG_FORMAT", defaults.log_format),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called before binding, so a bad value fails at startup rather
        than on the first request.

        Raises:
            ValueError: Describing the first invalid field.
        """
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

        if self.queue_size < 0:
            raise ValueError(f"queue_size must be >= 0, got {self.queue_size}")

        if self.backlog < 1:
            raise ValueError(f"backlog must be >= 1, got {self.backlog}")

        if self.buffer_size < 1:
            raise ValueError(f"buffer_size must be >= 1, got {self.buffer_size}")

        if self.max_line_length < 1:
            raise ValueError(f"max_line_length must be >= 1, got {self.max_line_length}")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(
                f"log_format must be one of {', '.join(LOG_FORMATS)}, got {self.log_format!r}"
            )
