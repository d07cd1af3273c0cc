"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

The listening half of the server: bind, listen, accept, hand off.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    SERVER SOCKET LIFECYCLE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   socket()       Create TCP socket (AF_INET, SOCK_STREAM)            │
    │      │                                                               │
    │   setsockopt()   SO_REUSEADDR, TCP_NODELAY                           │
    │      │                                                               │
    │   bind()         host:port   (failure → SetupError)                  │
    │      │                                                               │
    │   listen()       backlog                                             │
    │      │                                                               │
    │   ┌──▼──────────────────────────────────────────────┐               │
    │   │ accept()  ──► Connection ──► connection_handler │ ◄─┐           │
    │   └──┬──────────────────────────────────────────────┘   │           │
    │      │              (1 s timeout, re-check running) ────┘           │
    │      │                                                               │
    │   close()        after shutdown()                                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The accept loop never does protocol work. Whatever connection_handler
does with a Connection (HTTPServer spawns a thread per connection) happens
outside the loop, so a slow client never delays the next accept().

=============================================================================
SHUTDOWN
=============================================================================

accept() waits at most one second, then the loop re-checks the running
flag. shutdown() only clears the flag: the listening socket closes within
a second, while connections already handed off run to completion. An
accept() error while running is logged and the loop keeps going; when
the process is out of file descriptors it waits ACCEPT_RETRY_DELAY first.

SIGINT and SIGTERM trigger shutdown() when the server runs on the main
thread. Signal handlers cannot be installed from other threads, so a
server started from a test thread skips them.

=============================================================================
"""

import errno
import socket
import signal
import logging
import threading
from typing import Callable, Optional, Tuple

from ..errors import SetupError
from .connection import Connection


logger = logging.getLogger(__name__)

# Seconds to back off when accept() runs out of file descriptors
ACCEPT_RETRY_DELAY = 0.1


class SocketServer:
    """
    Low-level TCP socket server.

        def handle_connection(conn: Connection):
            ...

        server = SocketServer("0.0.0.0", 4221)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(
        self,
        host: str,
        port: int,
        backlog: int = 128,
        buffer_size: int = 8192,
    ):
        """
        Args:
            host: Address to bind.
            port: Port to bind; 0 for an ephemeral port.
            backlog: listen() queue length.
            buffer_size: recv() size given to each Connection.

        The socket is created in start(), not here.
        """
        self.host = host
        self.port = port
        self.backlog = backlog
        self.buffer_size = buffer_size

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once listen() succeeded
        self._ready_event = threading.Event()
        # Set by shutdown()
        self._shutdown_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        The bound (host, port).

        Reports the real port when started with port 0.
        """
        if self._socket is not None:
            host, port = self._socket.getsockname()[:2]
            return (host, port)
        return (self.host, self.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Rebind immediately after a restart (TIME_WAIT)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Responses go out as soon as they are written
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # accept() polls so the loop can notice shutdown()
        sock.settimeout(1.0)

        return sock

    def _setup_signals(self):
        """Install SIGTERM/SIGINT handlers (main thread only)."""
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, signal handlers not installed")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept connections until shutdown().

        Blocks the calling thread.

        Args:
            connection_handler: Called on the accept thread with each new
                                Connection. Must return quickly.

        Raises:
            SetupError: The address could not be bound or listened on.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.host, self.port))
            self._socket.listen(self.backlog)
        except OSError as e:
            logger.error(f"Failed to bind to {self.host}:{self.port}: {e}")
            self._socket.close()
            self._socket = None
            raise SetupError(f"Failed to bind to {self.host}:{self.port}: {e}") from e

        self._running = True
        self._shutdown_event.clear()
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._running:
                    break
                logger.error(f"Accept error: {e}")
                if e.errno in (errno.EMFILE, errno.ENFILE):
                    # Out of descriptors until some connection closes
                    self._shutdown_event.wait(ACCEPT_RETRY_DELAY)
                continue

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.buffer_size,
            )
            connection_handler(conn)

    def shutdown(self):
        """
        Stop accepting connections. Safe to call more than once and from
        any thread.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False
        self._shutdown_event.set()

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                logger.debug("Listening socket already closed")
            self._socket = None

        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the server is listening.

        Returns:
            True once listening, False on timeout.
        """
        return self._ready_event.wait(timeout)
