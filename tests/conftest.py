"""
pytest configuration and fixtures.
"""

import socket
from pathlib import Path
from typing import Generator
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from simpleweb import SimpleWebServer, ServerConfig


class RawClient:
    """
    Minimal client speaking raw bytes to a running server.

    Sends a payload, half-closes, and reads until the server closes, so
    a silent close shows up as b"".
    """

    def __init__(self, address: tuple, timeout: float = 5.0):
        self.address = address
        self.timeout = timeout

    def exchange(self, payload: bytes) -> bytes:
        with socket.create_connection(self.address, timeout=self.timeout) as sock:
            if payload:
                sock.sendall(payload)
            sock.shutdown(socket.SHUT_WR)

            chunks = []
            while True:
                chunk = sock.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)

    def get(self, path: str) -> tuple:
        """Send 'GET <path> HTTP/1.1' and return (status_line, headers, body)."""
        return split_response(self.exchange(f"GET {path} HTTP/1.1\r\n".encode()))


def split_response(raw: bytes) -> tuple:
    """
    Split a raw response into (status_line, headers, body).

    headers is a dict; body stays as bytes.
    """
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        headers[name.strip()] = value.strip()
    return lines[0], headers, body


@pytest.fixture
def static_files() -> dict:
    """Files placed under the static root, keyed by relative path."""
    return {
        "index.html": b"<html><body><h1>Hello</h1></body></html>\n",
        "css/site.css": b"body { color: #333; }\n",
        "logo.png": b"\x89PNG\r\n\x1a\n" + b"\x00\xff\xfe\x80\r\n" * 64,
        # Every byte value, so any decode/encode step in the pipeline shows up
        "blob.bin": bytes(range(256)) * 8,
        "README": b"no extension\n",
    }


@pytest.fixture
def static_root(tmp_path: Path, static_files: dict) -> Path:
    """A static root populated from static_files."""
    root = tmp_path / "static"
    for name, content in static_files.items():
        target = root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)

    # Outside the root; must never be served
    (tmp_path / "secret.txt").write_bytes(b"top secret\n")
    return root


@pytest.fixture
def config(static_root: Path) -> ServerConfig:
    """Test server configuration on a free localhost port."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        workers=4,
        static_root=str(static_root),
        log_level="WARNING",
    )


@pytest.fixture
def server(config: ServerConfig) -> Generator[SimpleWebServer, None, None]:
    """A running server; shut down after the test."""
    srv = SimpleWebServer(config)
    srv.start()
    yield srv
    srv.shutdown(timeout=5.0)


@pytest.fixture
def client(server: SimpleWebServer) -> RawClient:
    """RawClient pointed at the running server."""
    return RawClient(server.address)


@pytest.fixture
def occupied_port() -> Generator[int, None, None]:
    """A localhost port held by another listening socket."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        s.listen(1)
        yield s.getsockname()[1]
