"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket with the three operations a worker
needs: read the request line, send the response, close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does NOT preserve message boundaries. A client that sends

    "GET /stats HTTP/1.1\r\n"

may arrive as "GET /st" followed by "ats HTTP/1.1\r\n", or glued to the
headers that follow it. So read_line() buffers chunks until it sees the
LF that ends the first line:

    recv() → b"GET /st"                  no LF yet, keep reading
    recv() → b"ats HTTP/1.1\r\nHost: x"  LF found
                  └── line = b"GET /stats HTTP/1.1\r\n"
                      rest ("Host: x" ...) is never parsed

Everything after the first line is ignored: this server answers exactly
one request per connection and then closes it.

=============================================================================
CLOSING BOTH HALVES
=============================================================================

    1. shutdown(SHUT_WR)   Send FIN: "no more data from the server"
    2. Drain               Read (and discard) what the client still sends,
                           so unread bytes don't turn the close into a RST
                           that could destroy the response in flight
    3. close()             Release the file descriptor

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


logger = logging.getLogger(__name__)

# Upper bound on how long close() waits for the client to finish sending.
DRAIN_TIMEOUT = 0.5


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Used for logging and to make close() idempotent.
    """
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Reading the request line
    PROCESSING = "processing"  # Line parsed, handler is executing
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        buffer_size: Bytes requested per recv() call.
        timeout: Socket timeout in seconds. None blocks forever.
        max_line_length: Stop reading once the line exceeds this many bytes.
        bytes_sent: Bytes successfully written so far.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 4096
    timeout: Optional[float] = None
    max_line_length: int = 8192

    bytes_sent: int = 0

    def __post_init__(self):
        # Accepted sockets may inherit the listener's accept timeout
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0] if self.address else ""

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    def read_line(self) -> Optional[bytes]:
        """
        Read the first line sent by the client.

        Returns:
            The line bytes up to and including the first LF. If the client
            closes before sending an LF, whatever arrived is returned as the
            final line. If the line grows beyond max_line_length without an
            LF, the bytes read so far are returned (the parser rejects them).
            None if the client sent nothing at all, reset the connection, or
            the read timed out.
        """
        self.state = ConnectionState.READING
        buffer = b""

        try:
            while b"\n" not in buffer:
                if len(buffer) > self.max_line_length:
                    return buffer

                chunk = self.socket.recv(self.buffer_size)
                if not chunk:
                    break  # Client finished sending
                buffer += chunk

        except socket.timeout:
            logger.debug(f"[{self.id}] Timed out waiting for request line")
            return None
        except (ConnectionResetError, BrokenPipeError) as e:
            logger.debug(f"[{self.id}] Connection lost while reading: {e}")
            return None

        if not buffer:
            return None

        line_end = buffer.find(b"\n")
        if line_end == -1:
            return buffer
        return buffer[:line_end + 1]

    def send_response(self, data: bytes) -> bool:
        """
        Send response data to the client.

        Uses sendall() so the whole response is written, not just what
        fits in the kernel buffer.

        Returns:
            True if everything was sent, False if the connection was lost.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
        except (ConnectionResetError, BrokenPipeError, socket.timeout, OSError) as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

        self.bytes_sent += len(data)
        return True

    def close(self):
        """
        Close the connection gracefully (see module docstring).

        Safe to call more than once.
        """
        if self.state in (ConnectionState.CLOSING, ConnectionState.CLOSED):
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.settimeout(DRAIN_TIMEOUT)
            deadline = time.monotonic() + DRAIN_TIMEOUT
            while time.monotonic() < deadline:
                if not self.socket.recv(self.buffer_size):
                    break
        except OSError:
            pass  # socket.timeout is an OSError too

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        """
        Context manager entry. The connection is closed on exit, whatever
        happened inside the block:

            with conn:
                line = conn.read_line()
                conn.send_response(response)
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
