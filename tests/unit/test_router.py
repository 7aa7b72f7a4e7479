"""
Tests for path routing.
"""

import pytest

from simpleweb.http.request import ParsedRequest
from simpleweb.http.response import HTTPResponse, html
from simpleweb.http.router import (
    Calculation,
    NotFound,
    Router,
    StaticFile,
    Stats,
    resolve_route,
)
from simpleweb.http.status_codes import HTTPStatus


class TestResolveRoute:
    """Tests for resolve_route()."""

    @pytest.mark.parametrize("path", [
        "/static",
        "/static/",
        "/static/index.html",
        "/static/css/site.css",
        "/staticfoo",
        "/static/../etc/passwd",
    ])
    def test_static_prefix(self, path):
        """Test that any path starting with /static is a StaticFile."""
        assert resolve_route(path) == StaticFile(path)

    def test_stats_exact(self):
        assert resolve_route("/stats") == Stats()

    @pytest.mark.parametrize("path", ["/stats/", "/statsxyz", "/stats?x=1", "/STATS"])
    def test_stats_must_match_exactly(self, path):
        """Test that near-misses of /stats are not found."""
        assert resolve_route(path) == NotFound()

    @pytest.mark.parametrize("path", ["/calc", "/calc?a=1&b=2", "/calculator", "/calc/x"])
    def test_calc_prefix(self, path):
        assert resolve_route(path) == Calculation(path)

    @pytest.mark.parametrize("path", ["/", "", "/index.html", "/stat", "/Static/x", "static/x"])
    def test_not_found(self, path):
        assert resolve_route(path) == NotFound()


class RecordingHandler:
    """Handler stub that records calls and returns a fixed response."""

    def __init__(self, name):
        self.name = name
        self.calls = []

    def handle(self, *args):
        self.calls.append(args)
        return html(self.name)


class TestRouter:
    """Tests for Router dispatch."""

    @pytest.fixture
    def handlers(self):
        return {
            "static": RecordingHandler("static"),
            "stats": RecordingHandler("stats"),
            "calc": RecordingHandler("calc"),
        }

    @pytest.fixture
    def router(self, handlers):
        return Router(
            static_handler=handlers["static"],
            stats_handler=handlers["stats"],
            calc_handler=handlers["calc"],
        )

    def test_static_receives_full_path(self, router, handlers):
        response = router.handle(ParsedRequest("GET", "/static/a.png"))

        assert response.body == b"static"
        assert handlers["static"].calls == [("/static/a.png",)]

    def test_stats_called_without_arguments(self, router, handlers):
        response = router.handle(ParsedRequest("GET", "/stats"))

        assert response.body == b"stats"
        assert handlers["stats"].calls == [()]

    def test_calc_receives_query(self, router, handlers):
        router.handle(ParsedRequest("GET", "/calc?a=1&b=2"))

        assert handlers["calc"].calls == [("/calc?a=1&b=2",)]

    def test_unknown_path_is_404(self, router, handlers):
        response = router.handle(ParsedRequest("GET", "/nope"))

        assert isinstance(response, HTTPResponse)
        assert response.status == HTTPStatus.NOT_FOUND
        assert all(not h.calls for h in handlers.values())

    def test_method_ignored(self, router, handlers):
        """Test that the method plays no part in routing."""
        router.handle(ParsedRequest("DELETE", "/stats"))

        assert handlers["stats"].calls == [()]

    def test_dispatch_decision_directly(self, router, handlers):
        router.dispatch(Calculation("/calc?a=5&b=6"))

        assert handlers["calc"].calls == [("/calc?a=5&b=6",)]
