"""
=============================================================================
CORE NETWORKING AND CONCURRENCY
=============================================================================

    socket_server.py   Listener: bind once, accept loop
    connection.py      Connection: read one line, send, close
    thread_pool.py     WorkerPool: fixed workers draining a task queue

These modules know nothing about routes or handlers; the server wires
them together.

=============================================================================
"""

from .socket_server import Listener, ListenerError
from .connection import Connection, ConnectionState
from .thread_pool import WorkerPool, Worker, WorkerState, Task

__all__ = [
    "Listener",
    "ListenerError",
    "Connection",
    "ConnectionState",
    "WorkerPool",
    "Worker",
    "WorkerState",
    "Task",
]
