"""
=============================================================================
SHARED TRAFFIC STATISTICS
=============================================================================

Process-lifetime counters describing the traffic this server has served.
One SharedStats instance is created by the server and handed by reference
to every worker thread.

=============================================================================
WHY A LOCK AROUND ALL THREE COUNTERS?
=============================================================================

`count += 1` is NOT atomic in Python. It is a read, an add and a write,
and the interpreter may switch threads between any of them:

    Worker-1                         Worker-2
    ────────                         ────────
    read  count  (= 41)
                                     read  count  (= 41)
    write count  (= 42)
                                     write count  (= 42)   ← one update lost

A request also touches THREE fields. If they were updated one by one, a
concurrent /stats reader could see the request counted but its bytes not
yet added. So a single mutex guards the whole record:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   record(received, sent)          snapshot()                        │
    │       with lock:                      with lock:                    │
    │           request_count  += 1             copy all three fields     │
    │           bytes_received += received                                │
    │           bytes_sent     += sent                                    │
    └─────────────────────────────────────────────────────────────────────┘

Readers always see totals that belong together, and the totals only grow.

=============================================================================
"""

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class StatsSnapshot:
    """
    Consistent, immutable copy of the counters at one instant.

    Attributes:
        request_count: Completed responses.
        bytes_received: Request-line bytes read off the wire.
        bytes_sent: Response bytes written to clients.
    """
    request_count: int = 0
    bytes_received: int = 0
    bytes_sent: int = 0

    def to_dict(self) -> dict:
        """Convert to a plain dict (logging, tests)."""
        return {
            "request_count": self.request_count,
            "bytes_received": self.bytes_received,
            "bytes_sent": self.bytes_sent,
        }


class SharedStats:
    """
    Mutex-guarded traffic counters shared by all workers.

    Usage:
        stats = SharedStats()
        stats.record(received=18, sent=240)   # one completed request
        snap = stats.snapshot()
        snap.request_count                    # 1
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._request_count = 0
        self._bytes_received = 0
        self._bytes_sent = 0

    def record(self, received: int, sent: int) -> None:
        """
        Account for one completed request in a single transaction.

        Args:
            received: Bytes consumed from the connection for this request.
            sent: Bytes written back to the client.

        Raises:
            ValueError: If either byte count is negative (counters never
                        decrease).
        """
        if received < 0 or sent < 0:
            raise ValueError(
                f"Byte counts must be non-negative (received={received}, sent={sent})"
            )

        with self._lock:
            self._request_count += 1
            self._bytes_received += received
            self._bytes_sent += sent

    def snapshot(self) -> StatsSnapshot:
        """Read all three counters atomically."""
        with self._lock:
            return StatsSnapshot(
                request_count=self._request_count,
                bytes_received=self._bytes_received,
                bytes_sent=self._bytes_sent,
            )

    @property
    def request_count(self) -> int:
        return self.snapshot().request_count

    @property
    def bytes_received(self) -> int:
        return self.snapshot().bytes_received

    @property
    def bytes_sent(self) -> int:
        return self.snapshot().bytes_sent

    def __repr__(self) -> str:
        snap = self.snapshot()
        return (
            f"SharedStats(request_count={snap.request_count}, "
            f"bytes_received={snap.bytes_received}, bytes_sent={snap.bytes_sent})"
        )
