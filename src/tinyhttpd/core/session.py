"""
=============================================================================
CONNECTION SESSION
=============================================================================

Runs the request/response loop for one keep-alive connection.

=============================================================================
STATE MACHINE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │            ┌──────────┐                                              │
    │     ┌────► │ READING  │ ── parse error / EOF ─────────┐              │
    │     │      └────┬─────┘                               │              │
    │     │           │ request parsed                      │              │
    │     │      ┌────▼────────┐                            │              │
    │     │      │ DISPATCHING │ ── body read failed ───────┤              │
    │     │      └────┬────────┘                            │              │
    │     │           │ router.handle() → response          │              │
    │     │      ┌────▼───────┐                             │              │
    │     └───── │ RESPONDING │ ── Connection: close ───────┤              │
    │   keep-    └────────────┘    or write failed          │              │
    │   alive                                          ┌────▼────┐         │
    │                                                  │ CLOSING │         │
    │                                                  └────┬────┘         │
    │                                                  ┌────▼────┐         │
    │                                                  │ CLOSED  │         │
    │                                                  └─────────┘         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Requests on one connection are strictly sequential: the next request is
not read until the previous response has been written in full.

=============================================================================
FAILURE HANDLING
=============================================================================

    MalformedRequestLine   → 400 Bad Request, then close
    EmptyRequest           → close (peer hung up between requests)
    ReadError              → close (peer hung up mid-request or mid-body)
    unexpected exception   → 500 Internal Server Error, then close

HandlerErrors never reach the session; the router answers them.

=============================================================================
"""

import time
import logging
from typing import Optional

from ..errors import HTTPParseError
from ..http.request import RequestParser
from ..http.response import HTTPResponse, ResponseWriter, empty, internal_error
from ..http.router import Router
from ..http.status_codes import HTTPStatus
from .access_log import AccessLog
from .connection import Connection, ConnectionState


logger = logging.getLogger(__name__)

# The session drives the connection through the connection's own states.
SessionState = ConnectionState


class Session:
    """
    One connection's request/response loop.

        session = Session(conn, RequestParser(), router)
        session.run()        # returns once the connection is closed

    Attributes:
        conn: The connection being served. Closed when run() returns.
        parser: Request parser (stateless, shared).
        router: Router producing responses (shared).
        access_log: Receives one entry per response written, if set.
    """

    def __init__(
        self,
        conn: Connection,
        parser: RequestParser,
        router: Router,
        access_log: Optional[AccessLog] = None,
    ):
        self.conn = conn
        self.parser = parser
        self.router = router
        self.access_log = access_log
        self.writer = ResponseWriter(conn)

    @property
    def state(self) -> SessionState:
        return self.conn.state

    def run(self) -> None:
        """
        Serve requests until the connection has to close.

        The connection is closed on return, whatever happened.
        """
        with self.conn:
            logger.debug(f"[{self.conn.id}] Session started for {self.conn.client_ip}")
            while self._serve_one():
                pass

    def _serve_one(self) -> bool:
        """
        Read, dispatch and answer one request.

        Returns:
            True to keep the connection open for another request.
        """
        conn = self.conn

        # ─────────────────────────────────────────────────────────────────
        # READING
        # ─────────────────────────────────────────────────────────────────
        conn.state = SessionState.READING
        try:
            request = self.parser.parse(conn)
        except HTTPParseError as e:
            return self._parse_failed(e)

        conn.requests_handled += 1
        started = time.perf_counter()

        # ─────────────────────────────────────────────────────────────────
        # DISPATCHING
        # ─────────────────────────────────────────────────────────────────
        conn.state = SessionState.DISPATCHING
        keep_open = not request.close_requested
        try:
            response = self.router.handle(request)
        except HTTPParseError as e:
            # Body read failed; nothing can be answered on this stream
            logger.debug(f"[{conn.id}] {request.method} {request.path}: {e}")
            conn.state = SessionState.CLOSING
            return False
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error: {e}")
            response = internal_error(request.version)
            response.headers["Connection"] = "close"
            keep_open = False

        # ─────────────────────────────────────────────────────────────────
        # RESPONDING
        # ─────────────────────────────────────────────────────────────────
        if not self._respond(response):
            return False

        if self.access_log is not None:
            duration_ms = (time.perf_counter() - started) * 1000
            self.access_log.record(conn.id, request, response, duration_ms)

        if not keep_open:
            logger.debug(f"[{conn.id}] Closing after {request.method} {request.path}")
            conn.state = SessionState.CLOSING
            return False

        return True

    def _respond(self, response: HTTPResponse) -> bool:
        self.conn.state = SessionState.RESPONDING
        if self.writer.write(response):
            return True

        self.conn.state = SessionState.CLOSING
        return False

    def _parse_failed(self, error: HTTPParseError) -> bool:
        """Answer a parse failure if it has a status, then give up."""
        conn = self.conn

        if error.status_code is None:
            logger.debug(f"[{conn.id}] {type(error).__name__}: {error}")
        else:
            logger.warning(f"[{conn.id}] Bad request from {conn.client_ip}: {error}")
            self._respond(empty(HTTPStatus(error.status_code)))

        conn.state = SessionState.CLOSING
        return False
