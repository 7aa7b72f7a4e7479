"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Standard HTTP port (needs root on Unix)
    python -m simpleweb

    # Unprivileged port
    python -m simpleweb -p 8080

    # Serve files from another directory, more workers, verbose logs
    python -m simpleweb -p 8080 --static-root ./public -w 20 -l DEBUG

Environment variables (SIMPLEWEB_PORT, ...) are read first; flags given
on the command line override them.

Exit status: 0 after a clean shutdown, 1 if the configuration is invalid
or the port cannot be bound.

=============================================================================
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from . import __version__
from .config import LOG_FORMATS, ServerConfig
from .core import ListenerError
from .server import SimpleWebServer


logger = logging.getLogger("simpleweb")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simple-web-server",
        description="Minimal multi-threaded web server with /static, /stats and /calc",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  simple-web-server                     # Port 80, ./static, 10 workers
  simple-web-server -p 8080             # Custom port
  simple-web-server -s ./public         # Different static root
  simple-web-server -q 100 --reject     # Bounded queue, 503 when full
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("-p", "--port", type=int, default=None,
                        help="Port to listen on (default: 80)")
    parser.add_argument("-H", "--host", default=None,
                        help="Interface to bind (default: 0.0.0.0)")
    parser.add_argument("-t", "--timeout", type=float, default=None,
                        help="Per-connection socket timeout in seconds (default: none)")

    # ─────────────────────────────────────────────────────────────────────
    # WORKERS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("-w", "--workers", type=int, default=None,
                        help="Worker threads (default: 10)")
    parser.add_argument("-q", "--queue-size", type=int, default=None,
                        help="Connections allowed to wait for a worker, 0 = unbounded (default: 0)")
    parser.add_argument("--reject", action="store_true",
                        help="With a bounded queue, answer 503 instead of waiting for a slot")

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT AND LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("-s", "--static-root", default=None,
                        help="Directory served under /static (default: static)")
    parser.add_argument("-l", "--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level (default: INFO)")
    parser.add_argument("--log-format", default=None, choices=LOG_FORMATS,
                        help="Access log format (default: text)")

    parser.add_argument("-v", "--version", action="version",
                        version=f"simple-web-server {__version__}")

    return parser


def config_from_args(args: argparse.Namespace, base: Optional[ServerConfig] = None) -> ServerConfig:
    """
    Overlay parsed flags on a base config (the environment by default).

    Flags left unset keep the base value.
    """
    config = base if base is not None else ServerConfig.from_env()

    overrides = {
        "port": args.port,
        "host": args.host,
        "timeout": args.timeout,
        "workers": args.workers,
        "queue_size": args.queue_size,
        "static_root": args.static_root,
        "log_level": args.log_level,
        "log_format": args.log_format,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)

    if args.reject:
        config.block_when_full = False

    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Parse arguments, build the server and run it until interrupted.

    Returns:
        Process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
        config.validate()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    server = SimpleWebServer(config)

    try:
        server.run()
    except ListenerError as e:
        logger.error(f"Cannot start server: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
