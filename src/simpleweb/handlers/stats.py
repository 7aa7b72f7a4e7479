"""
=============================================================================
STATS HANDLER
=============================================================================

GET /stats renders the shared traffic counters as a small HTML page:

    <html><body>
    <h1>Server Stats</h1>
    <p>Requests received: 42</p>
    <p>Bytes received: 1234</p>
    <p>Bytes sent: 56789</p>
    </body></html>

The three values come from ONE SharedStats.snapshot() call, so they
always describe the same moment. A request is counted after its response
has been written, so the page reports every request completed before it
(but not itself):

    GET /calc ...   GET /calc ...   GET /stats     → Requests received: 2
    GET /stats                                     → Requests received: 3

A request whose response is never fully written is not counted at all.

=============================================================================
"""

from ..http.response import HTTPResponse, html
from ..stats import SharedStats, StatsSnapshot


class StatsHandler:
    """Read-only view of SharedStats."""

    def __init__(self, stats: SharedStats):
        self.stats = stats

    def handle(self) -> HTTPResponse:
        return html(render_stats(self.stats.snapshot()))


def render_stats(snapshot: StatsSnapshot) -> str:
    """Render a snapshot as the /stats HTML body."""
    return (
        "<html><body>\n"
        "<h1>Server Stats</h1>\n"
        f"<p>Requests received: {snapshot.request_count}</p>\n"
        f"<p>Bytes received: {snapshot.bytes_received}</p>\n"
        f"<p>Bytes sent: {snapshot.bytes_sent}</p>\n"
        "</body></html>\n"
    )
