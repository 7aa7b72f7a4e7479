"""
Tests for the /static, /stats and /calc handlers.
"""

import pytest

from simpleweb.handlers import (
    INT64_MAX,
    CalcHandler,
    StaticFileHandler,
    StatsHandler,
    parse_operands,
    render_stats,
)
from simpleweb.http.status_codes import HTTPStatus
from simpleweb.stats import SharedStats, StatsSnapshot


NOT_FOUND_BODY = b"<html><body><h1>404 Not Found</h1></body></html>"
BAD_REQUEST_BODY = b"<html><body><h1>400 Bad Request</h1></body></html>"


class TestStaticFileHandler:
    """Tests for StaticFileHandler."""

    @pytest.fixture
    def handler(self, static_root):
        return StaticFileHandler(static_root)

    def test_serves_html(self, handler, static_files):
        response = handler.handle("/static/index.html")

        assert response.status == HTTPStatus.OK
        assert response.content_type == "text/html"
        assert response.body == static_files["index.html"]

    def test_serves_nested_file(self, handler, static_files):
        response = handler.handle("/static/css/site.css")

        assert response.content_type == "text/css"
        assert response.body == static_files["css/site.css"]

    def test_binary_file_byte_exact(self, handler, static_files):
        """Test that binary content is served unchanged."""
        response = handler.handle("/static/logo.png")

        assert response.content_type == "image/png"
        assert response.body == static_files["logo.png"]

    def test_unknown_extension(self, handler, static_files):
        response = handler.handle("/static/blob.bin")

        assert response.content_type == "application/octet-stream"
        assert response.body == static_files["blob.bin"]

    def test_no_extension(self, handler):
        response = handler.handle("/static/README")

        assert response.status == HTTPStatus.OK
        assert response.content_type == "application/octet-stream"

    def test_prefix_without_slash(self, handler, static_files):
        """Test that the remainder after /static is joined onto the root."""
        response = handler.handle("/staticindex.html")

        assert response.body == static_files["index.html"]

    def test_extra_slashes_stripped(self, handler, static_files):
        response = handler.handle("/static//index.html")

        assert response.body == static_files["index.html"]

    def test_missing_file(self, handler):
        response = handler.handle("/static/missing.html")

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body == NOT_FOUND_BODY

    @pytest.mark.parametrize("path", ["/static", "/static/", "/static/css"])
    def test_directory_is_not_found(self, handler, path):
        assert handler.handle(path).status == HTTPStatus.NOT_FOUND

    @pytest.mark.parametrize("path", [
        "/static/../secret.txt",
        "/static/css/../../secret.txt",
        "/static/../../../../etc/passwd",
    ])
    def test_traversal_rejected(self, handler, path):
        """Test that paths escaping the root are 404."""
        response = handler.handle(path)

        assert response.status == HTTPStatus.NOT_FOUND
        assert b"top secret" not in response.body

    def test_absolute_remainder_stays_in_root(self, handler):
        """Test that a leading slash cannot make the path absolute."""
        assert handler.handle("/static//etc/passwd").status == HTTPStatus.NOT_FOUND

    def test_nul_byte(self, handler):
        assert handler.handle("/static/index.html\x00.png").status == HTTPStatus.NOT_FOUND

    def test_dotdot_inside_root_allowed(self, handler, static_files):
        response = handler.handle("/static/css/../index.html")

        assert response.body == static_files["index.html"]

    def test_missing_root(self, tmp_path):
        """Test that a missing root serves 404 rather than failing."""
        handler = StaticFileHandler(tmp_path / "does-not-exist")

        assert handler.handle("/static/index.html").status == HTTPStatus.NOT_FOUND

    def test_read_error_propagates(self, handler, monkeypatch):
        """Test that unexpected I/O errors reach the caller."""
        def fail(self):
            raise PermissionError("denied")

        monkeypatch.setattr("pathlib.Path.read_bytes", fail)

        with pytest.raises(PermissionError):
            handler.handle("/static/index.html")

    def test_file_vanishing_before_read(self, handler, monkeypatch):
        def gone(self):
            raise FileNotFoundError(str(self))

        monkeypatch.setattr("pathlib.Path.read_bytes", gone)

        assert handler.handle("/static/index.html").status == HTTPStatus.NOT_FOUND


class TestParseOperands:
    """Tests for parse_operands()."""

    @pytest.mark.parametrize("path,expected", [
        ("/calc?a=3&b=4", (3, 4)),
        ("/calc?a=0&b=0", (0, 0)),
        ("/calc?x=1&a=3&b=4", (3, 4)),
        ("/calc?a=3&b=4&y=2", (3, 4)),
        ("/calc?a=007&b=08", (7, 8)),
        ("/calculator?a=1&b=2", (1, 2)),
        ("/calc?a=12&b=34xyz", (12, 34)),
    ])
    def test_valid(self, path, expected):
        assert parse_operands(path) == expected

    @pytest.mark.parametrize("path", [
        "/calc",
        "/calc?a=3",
        "/calc?b=4&a=3",
        "/calc?a=-3&b=4",
        "/calc?a=3.5&b=4",
        "/calc?a=&b=4",
        "/calc?a=3&c=1&b=4",
        "/calc?xa=3&b=4",
        "/calc?a=٣&b=4",  # Arabic-Indic digit three
    ])
    def test_invalid(self, path):
        assert parse_operands(path) is None

    def test_int64_max_accepted(self):
        assert parse_operands(f"/calc?a={INT64_MAX}&b=0") == (INT64_MAX, 0)

    def test_operand_overflow(self):
        assert parse_operands(f"/calc?a={INT64_MAX + 1}&b=0") is None

    def test_huge_operand(self):
        assert parse_operands("/calc?a=" + "9" * 5000 + "&b=1") is None

    def test_leading_zeros_do_not_count_toward_length(self):
        assert parse_operands("/calc?a=" + "0" * 40 + "5&b=1") == (5, 1)

    def test_zero_padding_beyond_int_conversion_limit(self):
        """Test that thousands of leading zeros still parse."""
        assert parse_operands("/calc?a=" + "0" * 5000 + "1&b=2") == (1, 2)

    def test_all_zeros(self):
        assert parse_operands("/calc?a=" + "0" * 5000 + "&b=0") == (0, 0)


class TestCalcHandler:
    """Tests for CalcHandler."""

    def test_sum_body(self):
        response = CalcHandler().handle("/calc?a=3&b=4")

        assert response.status == HTTPStatus.OK
        assert response.content_type == "text/html"
        assert response.body == (
            b"<html><body>\n"
            b"<h1>Sum</h1>\n"
            b"<p>The sum of 3 and 4 is 7</p>\n"
            b"</body></html>\n"
        )

    def test_leading_zeros_normalized(self):
        response = CalcHandler().handle("/calc?a=007&b=1")

        assert b"The sum of 7 and 1 is 8" in response.body

    def test_long_zero_padding(self):
        response = CalcHandler().handle("/calc?a=" + "0" * 5000 + "1&b=2")

        assert response.status == HTTPStatus.OK
        assert b"The sum of 1 and 2 is 3" in response.body

    def test_sum_at_limit(self):
        response = CalcHandler().handle(f"/calc?a={INT64_MAX - 1}&b=1")

        assert response.status == HTTPStatus.OK
        assert str(INT64_MAX).encode() in response.body

    def test_sum_overflow(self):
        response = CalcHandler().handle(f"/calc?a={INT64_MAX}&b=1")

        assert response.status == HTTPStatus.BAD_REQUEST
        assert response.body == BAD_REQUEST_BODY

    def test_missing_operand(self):
        assert CalcHandler().handle("/calc?a=1").status == HTTPStatus.BAD_REQUEST


class TestStatsHandler:
    """Tests for StatsHandler and render_stats()."""

    def test_render(self):
        body = render_stats(StatsSnapshot(request_count=2, bytes_received=40, bytes_sent=500))

        assert body == (
            "<html><body>\n"
            "<h1>Server Stats</h1>\n"
            "<p>Requests received: 2</p>\n"
            "<p>Bytes received: 40</p>\n"
            "<p>Bytes sent: 500</p>\n"
            "</body></html>\n"
        )

    def test_fresh_stats(self):
        response = StatsHandler(SharedStats()).handle()

        assert response.status == HTTPStatus.OK
        assert b"<p>Requests received: 0</p>" in response.body

    def test_reflects_recorded_requests(self):
        stats = SharedStats()
        stats.record(received=10, sent=100)
        stats.record(received=5, sent=50)

        body = StatsHandler(stats).handle().body

        assert b"<p>Requests received: 2</p>" in body
        assert b"<p>Bytes received: 15</p>" in body
        assert b"<p>Bytes sent: 150</p>" in body
