"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Dict, Generator, List, Optional, Tuple
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tinyhttpd import HTTPServer, ServerConfig
from tinyhttpd.core.connection import Connection


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /echo/abc HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a 5-byte body."""
    body = b"hello"
    head = (
        b"POST /files/notes.txt HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"Content-Type: application/octet-stream\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
    )
    return head + body


@pytest.fixture
def socket_pair() -> Generator[Tuple[socket.socket, socket.socket], None, None]:
    """Connected (server side, client side) sockets."""
    server_side, client_side = socket.socketpair()
    yield server_side, client_side
    server_side.close()
    client_side.close()


@pytest.fixture
def connection(socket_pair) -> Tuple[Connection, socket.socket]:
    """A Connection over the server side of a socket pair, plus the client side."""
    server_side, client_side = socket_pair
    conn = Connection(socket=server_side, address=("127.0.0.1", 50000))
    return conn, client_side


# =============================================================================
# RAW CLIENT
# =============================================================================

class RawResponse:
    """A response as read off the wire."""

    def __init__(self, status_line: str, header_lines: List[str], body: bytes):
        self.status_line = status_line
        self.header_lines = header_lines
        self.body = body

    @property
    def status(self) -> int:
        return int(self.status_line.split()[1])

    @property
    def headers(self) -> Dict[str, str]:
        headers = {}
        for line in self.header_lines:
            name, _, value = line.partition(": ")
            headers[name] = value
        return headers


class RawClient:
    """Minimal blocking HTTP client over a plain socket."""

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self.sock.settimeout(5.0)
        self._buffer = b""

    def send(self, data: bytes):
        self.sock.sendall(data)

    def _fill(self) -> bool:
        chunk = self.sock.recv(65536)
        self._buffer += chunk
        return bool(chunk)

    def _read_line(self) -> str:
        while b"\r\n" not in self._buffer:
            if not self._fill():
                raise ConnectionError("Connection closed mid-response")
        line, self._buffer = self._buffer.split(b"\r\n", 1)
        return line.decode("iso-8859-1")

    def read_response(self) -> RawResponse:
        status_line = self._read_line()
        header_lines = []
        while True:
            line = self._read_line()
            if not line:
                break
            header_lines.append(line)

        length = 0
        for line in header_lines:
            if line.startswith("Content-Length: "):
                length = int(line.split(": ", 1)[1])

        while len(self._buffer) < length:
            if not self._fill():
                raise ConnectionError("Connection closed mid-body")
        body, self._buffer = self._buffer[:length], self._buffer[length:]
        return RawResponse(status_line, header_lines, body)

    def request(self, data: bytes) -> RawResponse:
        self.send(data)
        return self.read_response()

    def is_closed(self) -> bool:
        """True if the peer has closed (EOF with nothing left unread)."""
        if self._buffer:
            return False
        return not self._fill()

    def close(self):
        self.sock.close()


# =============================================================================
# TEST SERVER
# =============================================================================

class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def address(self) -> Tuple[str, int]:
        return self.server.address

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"banner": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def connect(self) -> RawClient:
        return RawClient(socket.create_connection(self.address, timeout=5.0))

    def stop(self):
        """Stop the server."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def test_server(tmp_path: Path) -> Generator[TestServer, None, None]:
    """A running server on an ephemeral port, storing files under tmp_path."""
    server = HTTPServer(ServerConfig(
        host="127.0.0.1",
        port=0,
        directory=str(tmp_path),
        log_level="WARNING",
    ))

    test_srv = TestServer(server)
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def client(test_server: TestServer) -> Generator[RawClient, None, None]:
    """A connected client for test_server."""
    raw = test_server.connect()
    yield raw
    raw.close()
