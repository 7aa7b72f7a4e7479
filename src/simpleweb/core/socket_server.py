"""
=============================================================================
LISTENER: TCP SOCKET + ACCEPT LOOP
=============================================================================

Binds the listening socket once at startup, then accepts connections one
after another and hands each to a callback (the server submits it to the
worker pool). The loop itself never processes a request, so a slow
client cannot stall accept().

=============================================================================
SOCKET LIFECYCLE (server side)
=============================================================================

    1. socket()    Create the TCP socket
    2. bind()      Reserve IP:PORT             ← fails fatally if the port is
                                                 taken or privileged
    3. listen()    Kernel starts queueing connection attempts (backlog)
    4. accept()    Wait for a client; returns a NEW socket for it
    5. close()     Release the listening socket on shutdown

                    ┌───────────────────────┐
                    │   Listening socket    │ ◄── bind() once at startup
                    └───────────┬───────────┘
                                │ accept()
            ┌───────────────────┼───────────────────┐
            ▼                   ▼                   ▼
     ┌────────────┐      ┌────────────┐      ┌────────────┐
     │ Client A   │      │ Client B   │      │ Client C   │ ──► worker pool
     └────────────┘      └────────────┘      └────────────┘

=============================================================================
WHY A 1-SECOND ACCEPT TIMEOUT?
=============================================================================

A thread blocked in accept() can't notice that shutdown() was called.
With a timeout, accept() wakes up every second, checks the running flag
and either goes back to waiting or exits the loop.

=============================================================================
"""

import socket
import logging
import threading
from typing import Callable, Optional

from .connection import Connection


logger = logging.getLogger(__name__)

ACCEPT_TIMEOUT = 1.0


class ListenerError(OSError):
    """
    The listening socket could not be set up (port in use, permission
    denied for a privileged port, bad address). Fatal at startup.
    """


class Listener:
    """
    TCP listener with a blocking accept loop.

    Usage:
        listener = Listener(host="0.0.0.0", port=8080)
        listener.bind()                      # raises ListenerError
        listener.serve_forever(on_connect)   # blocks until shutdown()

    or, with the loop on its own thread:

        listener.bind()
        listener.start_in_thread(on_connect)
        ...
        listener.shutdown()
    """

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 80,
        backlog: int = 128,
        buffer_size: int = 4096,
        timeout: Optional[float] = None,
        max_line_length: int = 8192,
    ):
        """
        Args:
            host: Interface to bind.
            port: Port to bind. 0 lets the OS choose a free port.
            backlog: Maximum pending connections in the kernel queue.
            buffer_size, timeout, max_line_length: Passed to every
                Connection this listener creates.
        """
        self.host = host
        self.port = port
        self.backlog = backlog
        self.buffer_size = buffer_size
        self.timeout = timeout
        self.max_line_length = max_line_length

        self._socket: Optional[socket.socket] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._stopped = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> tuple:
        """The bound (host, port). Reports the real port after binding to 0."""
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.host, self.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Allow an immediate restart while old connections sit in TIME_WAIT.
        # SO_REUSEPORT is deliberately not set: a second server must NOT be
        # able to bind the same port.
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        sock.settimeout(ACCEPT_TIMEOUT)
        return sock

    def bind(self):
        """
        Bind and start listening.

        Raises:
            ListenerError: If the address cannot be bound.
        """
        if self._socket is not None:
            return

        sock = self._create_socket()
        try:
            sock.bind((self.host, self.port))
            sock.listen(self.backlog)
        except OSError as e:
            sock.close()
            logger.error(f"Failed to bind to {self.host}:{self.port}: {e}")
            message = f"Cannot listen on {self.host}:{self.port}: {e.strerror or e}"
            if e.errno is None:
                raise ListenerError(message) from e
            raise ListenerError(e.errno, message) from e

        self._socket = sock
        self._running = True
        self._stopped.clear()

        host, port = self.address
        logger.info(f"Server started on port {port} ({host})")

    def serve_forever(self, connection_handler: Callable[[Connection], None]):
        """
        Run the accept loop on the calling thread until shutdown().

        Args:
            connection_handler: Called with each new Connection. Must not
                                block on the connection itself.
        """
        if self._socket is None:
            self.bind()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def start_in_thread(self, connection_handler: Callable[[Connection], None]) -> threading.Thread:
        """Run serve_forever() on a dedicated daemon thread."""
        if self._socket is None:
            self.bind()

        self._thread = threading.Thread(
            target=self.serve_forever,
            args=(connection_handler,),
            name="Listener",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.buffer_size,
                timeout=self.timeout,
                max_line_length=self.max_line_length,
            )

            try:
                connection_handler(conn)
            except Exception as e:
                logger.exception(f"[{conn.id}] Failed to dispatch connection: {e}")
                conn.close()

    def shutdown(self, wait: bool = True):
        """
        Stop accepting connections. Idempotent.

        Args:
            wait: Join the accept thread if one was started.
        """
        if self._running:
            logger.info("Stopping listener...")
        self._running = False

        if wait and self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=ACCEPT_TIMEOUT * 3)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the accept loop has exited and the socket is closed.

        Returns:
            True if stopped, False on timeout.
        """
        return self._stopped.wait(timeout)

    def _cleanup(self):
        if self._socket is not None:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._stopped.set()
        logger.info("Listener stopped")
