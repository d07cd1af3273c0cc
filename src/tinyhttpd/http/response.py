"""
=============================================================================
HTTP RESPONSE WRITER
=============================================================================

Builds HTTP/1.1 responses and writes them onto a Connection.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    HTTP RESPONSE STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  HTTP/1.1 200 OK\r\n                       ← status line             │
    │  Content-Type: text/plain\r\n              ← headers, in insertion   │
    │  Content-Encoding: gzip\r\n                  order                   │
    │  Content-Length: 23\r\n                                              │
    │  Connection: close\r\n                                               │
    │  \r\n                                      ← blank line              │
    │  <23 bytes>                                ← body (may be empty)     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT IS NOT ADDED AUTOMATICALLY
=============================================================================

No Date, no Server, and no Content-Length unless the handler set a body
through ResponseBuilder.body(). Responses without a body ("/" and every
error status) carry no content headers at all:

    HTTP/1.1 404 Not Found\r\n
    \r\n

=============================================================================
WRITE ORDER
=============================================================================

ResponseWriter sends each piece with its own send():

    status line → header line → header line → ... → blank line → body

A failed send is not retried; the writer reports False and the session
closes the connection.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, List, Union

from ..core.connection import Connection
from .status_codes import HTTPStatus


CRLF = "\r\n"

# Same byte-for-byte codec the parser uses for the request head.
HEADER_ENCODING = "iso-8859-1"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Use ResponseBuilder for a more convenient way to construct responses.

        Handler returns        ResponseWriter           Socket
        HTTPResponse   ─────►  .write()        ─────►   send() × N
    """

    status: HTTPStatus = HTTPStatus.OK            # HTTP status code (enum)
    headers: Dict[str, str] = field(default_factory=dict)  # Insertion-ordered
    body: bytes = b""                             # Bytes exactly as transmitted
    version: str = "HTTP/1.1"                     # Echoes the request's version

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def header_lines(self) -> List[str]:
        """One "Name: Value\\r\\n" string per header, in insertion order."""
        return [f"{name}: {value}{CRLF}" for name, value in self.headers.items()]

    def to_bytes(self) -> bytes:
        """
        Serialize the whole response in one piece.

        Produces exactly the bytes ResponseWriter.write() sends piecewise.
        """
        head = self.status_line + CRLF + "".join(self.header_lines()) + CRLF
        return head.encode(HEADER_ENCODING) + self.body


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

        response = (ResponseBuilder(version=request.version)
            .status(HTTPStatus.OK)
            .header("Content-Type", "text/plain")
            .body(b"abc")                  # also sets Content-Length: 3
            .build())

    Header order on the wire is the order of the calls, so content headers
    go before body().
    """

    def __init__(self, version: str = "HTTP/1.1"):
        self._response = HTTPResponse(version=version)

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._response.status = HTTPStatus(status)
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._response.headers[name] = value
        return self

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the body and its Content-Length.

        Strings are encoded as ISO-8859-1 so text taken from the request
        head goes back out byte for byte.
        """
        if isinstance(body, str):
            body = body.encode(HEADER_ENCODING)
        self._response.body = body
        self._response.headers["Content-Length"] = str(len(body))
        return self

    def build(self) -> HTTPResponse:
        return self._response


class ResponseWriter:
    """
    Writes an HTTPResponse onto a Connection, one piece per send().

        writer = ResponseWriter(conn)
        if not writer.write(response):
            ...  # connection lost, stop the session
    """

    def __init__(self, conn: Connection):
        self.conn = conn

    def write(self, response: HTTPResponse) -> bool:
        """
        Send status line, headers, blank line and body, in that order.

        Returns:
            True if every piece was sent, False as soon as one send fails.
        """
        pieces = [(response.status_line + CRLF).encode(HEADER_ENCODING)]
        pieces.extend(line.encode(HEADER_ENCODING) for line in response.header_lines())
        pieces.append(CRLF.encode(HEADER_ENCODING))
        if response.body:
            pieces.append(response.body)

        for piece in pieces:
            if not self.conn.send(piece):
                return False
        return True


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def empty(status: HTTPStatus, version: str = "HTTP/1.1") -> HTTPResponse:
    """
    A response with a status line and nothing else.

    Used for "/" (200) and every error status.
    """
    return ResponseBuilder(version).status(status).build()


def created(version: str = "HTTP/1.1") -> HTTPResponse:
    """201 Created, no body."""
    return empty(HTTPStatus.CREATED, version)


def not_found(version: str = "HTTP/1.1") -> HTTPResponse:
    """404 Not Found, no body."""
    return empty(HTTPStatus.NOT_FOUND, version)


def internal_error(version: str = "HTTP/1.1") -> HTTPResponse:
    """500 Internal Server Error, no body."""
    return empty(HTTPStatus.INTERNAL_SERVER_ERROR, version)
