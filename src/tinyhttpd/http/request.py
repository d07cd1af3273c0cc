"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Reads one HTTP/1.1 request head off a Connection and turns it into an
HTTPRequest. The body is left on the connection for the handler.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  POST /files/notes.txt HTTP/1.1\r\n      ← request line              │
    │  ──┬─ ────────┬─────── ───┬────                                      │
    │    │          │           │                                          │
    │  method      path      version                                       │
    │                                                                      │
    │  Host: localhost:4221\r\n                ← header lines, kept raw    │
    │  Content-Length: 5\r\n                                               │
    │  \r\n                                    ← terminator                │
    │                                                                      │
    │  hello                                   ← body, NOT read here       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PARSING ALGORITHM
=============================================================================

    1. read_line() until a line equal to "\r\n"
       └── stream ends with nothing read      → EmptyRequest
       └── stream ends part-way               → ReadError
       └── first line is already "\r\n"       → EmptyRequest
    2. split the first line on whitespace
       └── fewer than 3 fields                → MalformedRequestLine (400)
    3. fields 0..2 → method, path, version
    4. every other line (CRLF included)       → headers, in arrival order

The head is decoded as ISO-8859-1: one byte, one character, so a path
segment or header value can be encoded back to the exact bytes the
client sent.

Extra request-line fields beyond the third are ignored. Header lines are
not validated; lookups work on the raw text (see headers.py).

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..core.connection import Connection, ConnectionClosed
from ..errors import EmptyRequest, MalformedRequestLine, ReadError
from . import headers as header_accessor


# Header bytes ↔ str, byte for byte.
HEADER_ENCODING = "iso-8859-1"

TERMINATOR = b"\r\n"


@dataclass
class HTTPRequest:
    """
    Represents a parsed HTTP request head.

    Attributes:
        method:         Request method token, as sent ("GET", "POST", ...).
        path:           Request target, as sent ("/echo/abc").
        version:        Protocol version token ("HTTP/1.1").
        headers:        Raw header lines, CRLF included, in arrival order.
        client_address: (ip, port) of the client, for logging.
        stream:         The connection the body is still waiting on.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: List[str] = field(default_factory=list)
    client_address: tuple[str, int] = ("", 0)
    stream: Optional[Connection] = field(default=None, repr=False)

    # =========================================================================
    # HEADER ACCESS
    # =========================================================================

    def get_header(self, name: str) -> Optional[str]:
        """Value of the first header line containing `name`, or None."""
        return header_accessor.lookup(self.headers, name)

    @property
    def user_agent(self) -> Optional[str]:
        return self.get_header("User-Agent")

    @property
    def close_requested(self) -> bool:
        """
        Check if the client asked to close the connection.

        HTTP/1.1 keeps connections open by default; only an explicit
        `Connection: close` ends the session after this response.
        """
        return header_accessor.is_close_requested(self.headers)

    @property
    def accepted_encodings(self) -> str:
        """Negotiated encodings ("gzip" or "")."""
        return header_accessor.accepted_encodings(self.headers)

    @property
    def content_length(self) -> int:
        """
        Declared body length.

        Raises:
            MissingHeader: No Content-Length header.
            InvalidContentLength: Not a non-negative integer.
        """
        return header_accessor.content_length(self.headers)

    # =========================================================================
    # BODY
    # =========================================================================

    def read_body(self, size: int) -> bytes:
        """
        Read exactly `size` body bytes from the connection.

        Blocks until they arrive.

        Raises:
            ReadError: The stream ended first, or there is no stream.
        """
        if size == 0:
            return b""
        if self.stream is None:
            raise ReadError("Request has no stream to read a body from")

        try:
            return self.stream.read_exact(size)
        except ConnectionClosed as e:
            raise ReadError(f"Incomplete body: expected {size} bytes, got {len(e.partial)}")


class RequestParser:
    """
    Parses a request head off a Connection.

    Stateless; one instance serves every connection.

        parser = RequestParser()
        with conn:
            while True:
                request = parser.parse(conn)   # blocks on the socket
                ...
    """

    def parse(self, conn: Connection) -> HTTPRequest:
        """
        Read and parse the next request head.

        Args:
            conn: Connection positioned at the start of a request.

        Returns:
            Parsed HTTPRequest, its body still unread on `conn`.

        Raises:
            EmptyRequest: Peer closed the idle connection, or sent a bare
                          terminator with no request line.
            ReadError: Stream ended before the terminator.
            MalformedRequestLine: Fewer than three request-line fields.
        """
        lines = self._read_head(conn)
        if not lines:
            raise EmptyRequest("Empty request: terminator with no request line")

        method, path, version = self._parse_request_line(lines[0])

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=lines[1:],
            client_address=conn.address,
            stream=conn,
        )

    def _read_head(self, conn: Connection) -> List[str]:
        """Read lines up to (not including) the "\\r\\n" terminator."""
        lines: List[str] = []

        while True:
            try:
                line = conn.read_line()
            except ConnectionClosed as e:
                if not lines and not e.partial:
                    raise EmptyRequest("Connection closed before a request arrived")
                raise ReadError(f"Stream ended after {len(lines)} lines of request head")

            if line == TERMINATOR:
                return lines
            lines.append(line.decode(HEADER_ENCODING))

    def _parse_request_line(self, line: str) -> tuple[str, str, str]:
        """
        Split the request line into (method, path, version).

            "GET /echo/abc HTTP/1.1\\r\\n" → ("GET", "/echo/abc", "HTTP/1.1")

        Raises:
            MalformedRequestLine: Fewer than three fields.
        """
        fields = line.split()
        if len(fields) < 3:
            raise MalformedRequestLine(f"Invalid request line: {line.rstrip()!r}")

        method, path, version = fields[:3]
        return method, path, version
