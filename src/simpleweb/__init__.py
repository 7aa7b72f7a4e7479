"""
=============================================================================
SIMPLEWEB - Minimal Multi-threaded Web Server
=============================================================================

A small server on raw sockets. It reads ONE request line per connection,
routes it, writes a response and closes the connection.

    GET /static/<rest>       file bytes from the static root
    GET /stats               request count, bytes received, bytes sent
    GET /calc?a=3&b=4        "The sum of 3 and 4 is 7"
    anything else            404

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    simpleweb/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m simpleweb)
    ├── server.py            # SimpleWebServer + ConnectionWorker
    ├── config.py            # ServerConfig dataclass
    ├── stats.py             # SharedStats (lock-guarded counters)
    ├── access_log.py        # One log line per completed response
    ├── core/
    │   ├── socket_server.py # Listener: bind once, accept loop
    │   ├── connection.py    # Read one line, send, close
    │   └── thread_pool.py   # Fixed-size WorkerPool
    ├── http/
    │   ├── request.py       # Request line parsing
    │   ├── response.py      # HTTPResponse serialization
    │   ├── router.py        # Path → RouteDecision → handler
    │   ├── status_codes.py  # HTTPStatus
    │   └── mime_types.py    # Extension → Content-Type
    └── handlers/
        ├── static.py        # /static
        ├── stats.py         # /stats
        └── calc.py          # /calc

=============================================================================
QUICK START
=============================================================================

    from simpleweb import SimpleWebServer, ServerConfig

    SimpleWebServer(ServerConfig(port=8080, static_root="public")).run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .stats import SharedStats, StatsSnapshot
from .server import SimpleWebServer, ConnectionWorker, create_server

__all__ = [
    "SimpleWebServer",
    "ConnectionWorker",
    "ServerConfig",
    "SharedStats",
    "StatsSnapshot",
    "create_server",
    "__version__",
]
