"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket with the buffered reads and ordered
writes the HTTP layer needs.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does NOT preserve message boundaries. One recv() may return half a
request line, or a request line plus headers plus the first bytes of the
body:

    Client sends:
        GET /echo/abc HTTP/1.1\r\n
        Host: x\r\n
        \r\n

    Server might receive:
        recv() → "GET /echo/ab"
        recv() → "c HTTP/1.1\r\nHost: x\r\n\r\n"

So every read goes through _buffer:

    ┌─────────────────────────────────────────────────────────────────┐
    │                       Connection._buffer                         │
    ├─────────────────────────────────────────────────────────────────┤
    │                                                                  │
    │   socket ──recv()──► _buffer ──read_line()──►  "Host: x\r\n"     │
    │                         │                                        │
    │                         └────read_exact(n)──►  n body bytes      │
    │                                                                  │
    │   Bytes left over after one request stay in _buffer for the      │
    │   next one (keep-alive).                                         │
    │                                                                  │
    └─────────────────────────────────────────────────────────────────┘

The request parser consumes lines until the blank line; a handler that
needs the body calls read_exact() on the SAME buffer afterwards. Nothing
reads ahead past what was asked for, apart from what recv() happened to
deliver.

=============================================================================
NO TIMEOUTS
=============================================================================

Reads block until data arrives or the peer goes away. A silent peer holds
its worker thread for as long as it keeps the socket open.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► DISPATCHING ──► RESPONDING ──┐
              ▲                              │        │
              └──────── keep-alive ──────────┘        │
              │                                       ▼
              └────── (EOF / error) ──────────────► CLOSING ──► CLOSED

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
import uuid


logger = logging.getLogger(__name__)

CRLF = b"\r\n"


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    The session moves the connection through these; they show up in logs
    and in repr().
    """
    NEW = "new"                  # Just accepted, nothing read yet
    READING = "reading"          # Blocked parsing the next request
    DISPATCHING = "dispatching"  # Request parsed, router/handler running
    RESPONDING = "responding"    # Writing the response
    CLOSING = "closing"          # Shutdown sequence in progress
    CLOSED = "closed"            # Socket released


class ConnectionClosed(Exception):
    """The peer closed the stream (or it failed) before a read completed."""

    def __init__(self, message: str, partial: bytes = b""):
        super().__init__(message)
        self.partial = partial  # Bytes received before the stream ended


@dataclass
class Connection:
    """
    Represents a client connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. BUFFERED READING                                                 │
    │     └── read_line(): one CRLF-terminated line                        │
    │     └── read_exact(n): exactly n bytes (request body)               │
    │                                                                      │
    │  2. ORDERED WRITING                                                  │
    │     └── send(): sendall() one piece, report failure                  │
    │                                                                      │
    │  3. STATE + BOOKKEEPING                                              │
    │     └── state, requests_handled, last_activity                       │
    │                                                                      │
    │  4. GRACEFUL CLOSE                                                   │
    │     └── FIN, drain, release the file descriptor                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Unique connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when connection was accepted.
        last_activity: Timestamp of last successful read or write.
        requests_handled: Number of requests parsed on this connection.
    """

    # Required parameters
    socket: socket.socket
    address: tuple[str, int]

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)
    requests_handled: int = 0

    # Configuration (passed from ServerConfig)
    buffer_size: int = 8192  # How much to recv() at once

    # Internal state (not shown in repr for cleaner logs)
    _buffer: bytearray = field(default_factory=bytearray, repr=False)

    def __post_init__(self):
        # Fully blocking: no read timeouts on client connections.
        self.socket.settimeout(None)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0] if self.address else ""

    @property
    def pending(self) -> int:
        """Number of received bytes not consumed yet."""
        return len(self._buffer)

    # =========================================================================
    # READING
    # =========================================================================

    def read_line(self) -> bytes:
        """
        Read one line, terminator included.

        A line ends at the first b"\\n" (so b"\\r\\n" terminated lines keep
        their CRLF). Blocks until a full line is buffered.

        Returns:
            The line, including its line terminator.

        Raises:
            ConnectionClosed: The stream ended before a full line arrived.
                              `partial` holds whatever was buffered.
        """
        searched = 0
        while True:
            newline = self._buffer.find(b"\n", searched)
            if newline != -1:
                return self._take(newline + 1)

            searched = len(self._buffer)
            chunk = self._recv()
            if not chunk:
                raise ConnectionClosed("Stream ended before end of line", self._take_all())
            self._buffer += chunk

    def read_exact(self, size: int) -> bytes:
        """
        Read exactly `size` bytes.

        Used for Content-Length framed bodies. Bytes already buffered are
        consumed first; the rest is read from the socket.

        Raises:
            ConnectionClosed: The stream ended before `size` bytes arrived.
        """
        while len(self._buffer) < size:
            chunk = self._recv()
            if not chunk:
                partial = self._take_all()
                raise ConnectionClosed(
                    f"Stream ended after {len(partial)} of {size} bytes", partial
                )
            self._buffer += chunk

        return self._take(size)

    def _take(self, size: int) -> bytes:
        """Remove and return the first `size` buffered bytes."""
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    def _take_all(self) -> bytes:
        return self._take(len(self._buffer))

    def _recv(self) -> bytes:
        """
        Receive data from socket with error handling.

        Returns:
            Received bytes, or empty bytes if connection closed or reset.
        """
        try:
            data = self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            # Client disconnected abruptly
            return b""
        except OSError as e:
            logger.debug(f"[{self.id}] recv failed: {e}")
            return b""

        if data:
            self.last_activity = time.time()
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send(self, data: bytes) -> bool:
        """
        Send one piece of a response.

        Uses sendall() so the whole piece is written or an error is raised.
        Failures are not retried.

        Returns:
            True if send succeeded, False if connection lost.
        """
        try:
            self.socket.sendall(data)
        except OSError as e:
            # ConnectionResetError, BrokenPipeError, ...
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

        self.last_activity = time.time()
        return True

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN, we are done writing
        2. drain: discard whatever the client still sends
        3. close(): release the file descriptor

        Draining means bytes the client sent after the last request we
        answered are read and thrown away, never parsed.
        """
        if self.state == ConnectionState.CLOSED:
            return  # Already closed

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # socket.timeout is an OSError too

        try:
            self.socket.close()
        except OSError:
            pass

        self._buffer.clear()
        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.requests_handled} requests")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                request = parser.parse(conn)
                ...
            # Connection closed here, whatever happened inside
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False  # Don't suppress exceptions
