"""
=============================================================================
ROUTING
=============================================================================

Routing happens in two steps:

    path ──resolve_route()──► RouteDecision ──Router.dispatch()──► HTTPResponse

resolve_route() is a pure function of the path. The rules are checked in
this order and the first match wins:

    ┌────┬───────────────────────────────┬──────────────────────────────┐
    │ #  │ Rule                          │ Decision                     │
    ├────┼───────────────────────────────┼──────────────────────────────┤
    │ 1  │ path starts with "/static"    │ StaticFile(path)             │
    │ 2  │ path == "/stats" exactly      │ Stats()                      │
    │ 3  │ path starts with "/calc"      │ Calculation(path)            │
    │ 4  │ anything else                 │ NotFound()                   │
    └────┴───────────────────────────────┴──────────────────────────────┘

Note the asymmetry: "/stats" must match EXACTLY ("/stats/", "/statsxyz"
and "/stats?x=1" are all NotFound), while "/static" and "/calc" are plain
prefix checks ("/staticfoo" is a StaticFile, "/calculator" a
Calculation).

=============================================================================
"""

from dataclasses import dataclass
from typing import Union

from .request import ParsedRequest
from .response import HTTPResponse, not_found


STATIC_PREFIX = "/static"
STATS_PATH = "/stats"
CALC_PREFIX = "/calc"


@dataclass(frozen=True)
class StaticFile:
    """Serve a file from the static root."""
    path: str


@dataclass(frozen=True)
class Stats:
    """Report the shared traffic counters."""


@dataclass(frozen=True)
class Calculation:
    """Add the a and b query parameters."""
    path: str


@dataclass(frozen=True)
class NotFound:
    """No handler for this path."""


RouteDecision = Union[StaticFile, Stats, Calculation, NotFound]


def resolve_route(path: str) -> RouteDecision:
    """
    Choose the route for a request path.

    Examples:
        >>> resolve_route("/static/css/site.css")
        StaticFile(path='/static/css/site.css')
        >>> resolve_route("/stats")
        Stats()
        >>> resolve_route("/calc?a=1&b=2")
        Calculation(path='/calc?a=1&b=2')
        >>> resolve_route("/")
        NotFound()
    """
    if path.startswith(STATIC_PREFIX):
        return StaticFile(path)
    if path == STATS_PATH:
        return Stats()
    if path.startswith(CALC_PREFIX):
        return Calculation(path)
    return NotFound()


class Router:
    """
    Dispatches a parsed request to the handler chosen by resolve_route().

    Usage:
        router = Router(
            static_handler=StaticFileHandler("static"),
            stats_handler=StatsHandler(stats),
            calc_handler=CalcHandler(),
        )
        response = router.handle(ParsedRequest(method="GET", path="/stats"))
    """

    def __init__(self, static_handler, stats_handler, calc_handler):
        """
        Args:
            static_handler: Object with handle(path) -> HTTPResponse.
            stats_handler: Object with handle() -> HTTPResponse.
            calc_handler: Object with handle(path) -> HTTPResponse.
        """
        self.static_handler = static_handler
        self.stats_handler = stats_handler
        self.calc_handler = calc_handler

    def handle(self, request: ParsedRequest) -> HTTPResponse:
        """Route a request and return the handler's response."""
        return self.dispatch(resolve_route(request.path))

    def dispatch(self, decision: RouteDecision) -> HTTPResponse:
        """Invoke the handler for an already-made decision."""
        if isinstance(decision, StaticFile):
            return self.static_handler.handle(decision.path)
        if isinstance(decision, Stats):
            return self.stats_handler.handle()
        if isinstance(decision, Calculation):
            return self.calc_handler.handle(decision.path)
        return not_found()
