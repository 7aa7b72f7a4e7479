"""
=============================================================================
REQUEST HANDLERS
=============================================================================

One handler per route:

    /static/<rest>   StaticFileHandler   file bytes from the static root
    /stats           StatsHandler        shared traffic counters
    /calc?a=..&b=..  CalcHandler         a + b

Handlers return an HTTPResponse and never touch the socket. The only
state they share is SharedStats, which StatsHandler reads.

=============================================================================
"""

from .static import StaticFileHandler
from .stats import StatsHandler, render_stats
from .calc import CalcHandler, parse_operands, INT64_MAX

__all__ = [
    "StaticFileHandler",
    "StatsHandler",
    "render_stats",
    "CalcHandler",
    "parse_operands",
    "INT64_MAX",
]
