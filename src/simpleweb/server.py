"""
=============================================================================
MAIN SERVER
=============================================================================

Ties the components together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Listener (accept thread)                                           │
    │       │  accept() → Connection                                      │
    │       ▼                                                              │
    │   WorkerPool.submit(ConnectionWorker, conn)                          │
    │       │                                                              │
    │       ▼  (one of N worker threads)                                   │
    │   ConnectionWorker                                                   │
    │       ├── conn.read_line()          one line, nothing more          │
    │       ├── RequestParser.parse()     ParsedRequest | MalformedRequest│
    │       ├── Router.handle()           StaticFile | Stats | Calc | 404 │
    │       ├── conn.send_response()      status line, header, body       │
    │       ├── SharedStats.record()      one atomic update               │
    │       └── conn.close()                                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no return path to the listener: each connection is fire and
forget once it has been queued.

=============================================================================
WHAT HAPPENS ON BAD INPUT
=============================================================================

    Client sends nothing, resets, or sends a blank line
        → close silently, nothing counted
    Request line with fewer than two tokens, or too long
        → 400 Bad Request, counted
    Handler raises (e.g. disk error while reading a file)
        → connection abandoned and closed, nothing counted,
          the worker logs the traceback and takes the next connection
    Client disconnects before the response is fully written
        → nothing counted

=============================================================================
"""

import logging
import signal
import threading
from typing import Optional

from .access_log import AccessLogger, RequestLog, utc_timestamp
from .config import ServerConfig
from .core import Connection, ConnectionState, Listener, WorkerPool
from .handlers import CalcHandler, StaticFileHandler, StatsHandler
from .http import (
    HTTPResponse,
    MalformedRequest,
    RequestParser,
    Router,
    bad_request,
    service_unavailable,
)
from .stats import SharedStats


logger = logging.getLogger(__name__)


class ConnectionWorker:
    """
    Owns one accepted connection end to end: parse, route, respond, close.

    A single instance is shared by all worker threads; it keeps no
    per-connection state of its own.
    """

    def __init__(
        self,
        router: Router,
        stats: SharedStats,
        parser: Optional[RequestParser] = None,
        access_log: Optional[AccessLogger] = None,
    ):
        self.router = router
        self.stats = stats
        self.parser = parser or RequestParser()
        self.access_log = access_log or AccessLogger()

    def __call__(self, conn: Connection):
        with conn:  # Closed on every path, including exceptions
            self.process(conn)

    def process(self, conn: Connection):
        raw = conn.read_line()
        if raw is None:
            logger.debug(f"[{conn.id}] No request received, closing")
            return

        result = self.parser.parse(raw)

        if isinstance(result, MalformedRequest):
            if result.blank:
                logger.debug(f"[{conn.id}] Blank request line, closing")
                return
            logger.debug(f"[{conn.id}] Malformed request: {result.reason}")
            method, path = "-", "-"
            response = bad_request()
        else:
            method, path = result.method, result.path
            conn.state = ConnectionState.PROCESSING
            response = self.router.handle(result)

        data = response.to_bytes()
        if not conn.send_response(data):
            return

        self.stats.record(received=len(raw), sent=len(data))

        self.access_log.log(RequestLog(
            connection_id=conn.id,
            method=method,
            path=path,
            client_ip=conn.client_ip,
            status_code=int(response.status),
            bytes_received=len(raw),
            bytes_sent=len(data),
            duration_ms=conn.age * 1000,
            timestamp=utc_timestamp(),
        ))


class SimpleWebServer:
    """
    Multi-threaded web server with /static, /stats and /calc routes.

    =========================================================================
    USAGE
    =========================================================================

        # Blocking, until Ctrl+C / SIGTERM
        SimpleWebServer(ServerConfig(port=8080)).run()

        # Background, e.g. in tests
        with SimpleWebServer(ServerConfig(port=0)) as server:
            host, port = server.address
            ...
            server.stats.request_count

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None, stats: Optional[SharedStats] = None):
        """
        Args:
            config: Server configuration (defaults to ServerConfig()).
            stats: Counters to update; a fresh SharedStats if omitted.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Components below are sized from it
        self.stats = stats if stats is not None else SharedStats()

        self.router = Router(
            static_handler=StaticFileHandler(self.config.static_root),
            stats_handler=StatsHandler(self.stats),
            calc_handler=CalcHandler(),
        )

        self._worker = ConnectionWorker(
            router=self.router,
            stats=self.stats,
            parser=RequestParser(max_line_length=self.config.max_line_length),
            access_log=AccessLogger(log_format=self.config.log_format),
        )

        self._listener = Listener(
            host=self.config.host,
            port=self.config.port,
            backlog=self.config.backlog,
            buffer_size=self.config.buffer_size,
            timeout=self.config.timeout,
            max_line_length=self.config.max_line_length,
        )

        self._pool = WorkerPool(
            workers=self.config.workers,
            queue_size=self.config.queue_size,
        )

        self._lock = threading.Lock()
        self._started = False
        self._stopped = False
        self._original_handlers: dict = {}

    @property
    def address(self) -> tuple:
        """Bound (host, port); the real port when configured with 0."""
        return self._listener.address

    @property
    def is_running(self) -> bool:
        return self._started and not self._stopped

    @property
    def pool_stats(self) -> dict:
        return self._pool.stats

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> "SimpleWebServer":
        """
        Bind, start the workers and run the accept loop on its own thread.

        Returns once the server is accepting connections.

        Raises:
            ValueError: If the configuration is invalid.
            ListenerError: If the port cannot be bound.
            RuntimeError: If the server was already started.
        """
        with self._lock:
            if self._started:
                raise RuntimeError("Server already started")

            self.config.validate()
            self._listener.bind()  # Fatal errors surface here, before any thread starts
            self._pool.start()
            self._listener.start_in_thread(self._handle_connection)
            self._started = True

        return self

    def run(self):
        """
        Start the server and block until SIGINT/SIGTERM or shutdown().

        Configures logging from the config first.
        """
        self._setup_logging()
        self.start()

        in_main_thread = threading.current_thread() is threading.main_thread()
        if in_main_thread:
            self._setup_signals()

        try:
            # Short waits keep the main thread responsive to signals
            while not self._listener.wait_for_shutdown(timeout=0.5):
                pass
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            if in_main_thread:
                self._restore_signals()
            self.shutdown()

    def shutdown(self, timeout: Optional[float] = 30.0):
        """
        Stop accepting, let queued connections finish, stop the workers.

        Idempotent; safe to call from any thread except a worker.

        Args:
            timeout: Longest wait for queued connections to drain.
        """
        with self._lock:
            if not self._started or self._stopped:
                return
            self._stopped = True

        logger.info("Shutting down server...")
        self._listener.shutdown(wait=True)
        self._pool.shutdown(wait=True, timeout=timeout)
        logger.info(f"Server stopped ({self.stats!r})")

    def __enter__(self) -> "SimpleWebServer":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
        return False

    # =========================================================================
    # CONNECTION HANDOFF
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Queue a connection for a worker. Runs on the accept thread.
        """
        submitted = self._pool.submit(
            self._worker,
            args=(conn,),
            block=self.config.block_when_full,
        )

        if not submitted:
            logger.warning(f"[{conn.id}] Worker queue full, rejecting connection")
            self._reject(conn, service_unavailable())

    def _reject(self, conn: Connection, response: HTTPResponse):
        with conn:
            conn.send_response(response.to_bytes())

    # =========================================================================
    # PROCESS SETUP
    # =========================================================================

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("simpleweb").setLevel(level)

    def _setup_signals(self):
        """
        SIGTERM (docker stop, systemd, kill) and SIGINT (Ctrl+C) stop the
        listener; run() then finishes the shutdown on the main thread.
        """
        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, initiating shutdown...")
            self._listener.shutdown(wait=False)

        for sig in (signal.SIGTERM, signal.SIGINT):
            self._original_handlers[sig] = signal.signal(sig, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()


def create_server(config: Optional[ServerConfig] = None, **overrides) -> SimpleWebServer:
    """
    Factory for a server, with keyword overrides on top of the config.

    Example:
        server = create_server(port=0, static_root="tests/fixtures/static")
    """
    config = config or ServerConfig()
    for name, value in overrides.items():
        if not hasattr(config, name):
            raise TypeError(f"Unknown config option: {name}")
        setattr(config, name, value)
    return SimpleWebServer(config)
