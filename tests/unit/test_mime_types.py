"""
Tests for Content-Type resolution.
"""

from pathlib import Path

import pytest

from simpleweb.http.mime_types import DEFAULT_MIME_TYPE, get_mime_type


class TestGetMimeType:
    """Tests for get_mime_type()."""

    @pytest.mark.parametrize("name,expected", [
        ("index.html", "text/html"),
        ("index.htm", "text/html"),
        ("site.css", "text/css"),
        ("app.js", "application/javascript"),
        ("logo.png", "image/png"),
        ("photo.jpg", "image/jpeg"),
        ("photo.jpeg", "image/jpeg"),
        ("anim.gif", "image/gif"),
    ])
    def test_known_extensions(self, name, expected):
        assert get_mime_type(name) == expected

    def test_case_insensitive(self):
        assert get_mime_type("LOGO.PNG") == "image/png"

    @pytest.mark.parametrize("name", ["README", "archive.tar", "data.json", "notes.txt"])
    def test_unknown_falls_back(self, name):
        assert get_mime_type(name) == DEFAULT_MIME_TYPE == "application/octet-stream"

    def test_custom_default(self):
        assert get_mime_type("data.bin", default="text/plain") == "text/plain"

    def test_accepts_path(self):
        assert get_mime_type(Path("static") / "css" / "site.css") == "text/css"

    def test_no_charset(self):
        """Test that no charset parameter is appended."""
        assert ";" not in get_mime_type("index.html")
