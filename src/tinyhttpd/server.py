"""
=============================================================================
MAIN HTTP SERVER
=============================================================================

Ties the components together: one accept loop, one thread per
connection, one shared router and file store.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    HTTP SERVER ARCHITECTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   HTTPServer    │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │            ┌────────────────────┼────────────────────┐              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐        │
    │    │ SocketServer │    │    Router    │    │  FileStore   │        │
    │    │  (accepts)   │    │  (shared)    │    │  (shared)    │        │
    │    └──────┬───────┘    └──────────────┘    └──────────────┘        │
    │           │ Connection                                              │
    │           ▼                                                         │
    │    ┌──────────────────────────────────────────┐                    │
    │    │ Thread "conn-<id>"  →  Session.run()     │   one per client   │
    │    └──────────────────────────────────────────┘                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. SocketServer accepts a TCP connection
    2. HTTPServer starts a daemon thread for it
    3. Session: parse → router.handle → ResponseWriter.write
    4. Repeat 3 until Connection: close, a parse failure or EOF
    5. Connection closed, thread exits

The number of connection threads is not bounded.

=============================================================================
"""

import logging
import threading
from typing import Optional, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection
from .core.access_log import AccessLog
from .core.session import Session
from .handlers import build_router
from .http import RequestParser, Router
from .store import FileStore


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    The HTTP server.

        server = HTTPServer(ServerConfig(port=4221, directory="/tmp/data"))
        server.run()          # blocks until SIGINT/SIGTERM or shutdown()

    From another thread (tests):

        thread = threading.Thread(target=server.run, daemon=True)
        thread.start()
        server.wait_until_ready()
        host, port = server.address
        ...
        server.shutdown()
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        router: Optional[Router] = None,
    ):
        """
        Args:
            config: Server configuration. Defaults to ServerConfig().
            router: Route table. Defaults to the built-in routes over a
                    FileStore rooted at config.directory.

        Raises:
            ValueError: Invalid configuration.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self.store = FileStore(self.config.directory)
        self.router = router or build_router(self.store)

        self._parser = RequestParser()
        self._access_log = AccessLog(log_format=self.config.log_format)
        self._socket_server = SocketServer(
            host=self.config.host,
            port=self.config.port,
            backlog=self.config.backlog,
            buffer_size=self.config.buffer_size,
        )

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    def run(self, banner: bool = True):
        """
        Start the server (blocking).

        Args:
            banner: Print the startup banner and route table.

        Raises:
            SetupError: The listening socket could not be bound.
        """
        self._setup_logging()
        logger.info(f"Starting HTTP server on {self.config.host}:{self.config.port}")
        logger.info(f"Serving files from {self.store.base_dir.resolve()}")

        if banner:
            self._print_startup_banner()

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """
        Stop accepting connections.

        Sessions already running are not interrupted.
        """
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is listening. False on timeout."""
        return self._socket_server.wait_until_ready(timeout)

    def _print_startup_banner(self):
        print()
        print("╔══════════════════════════════════════════════════════════════╗")
        print(f"║  tinyhttpd listening on http://{self.config.host}:{self.config.port}")
        print(f"║  Files: {self.config.directory}")
        print("║  Press Ctrl+C to stop")
        print("╚══════════════════════════════════════════════════════════════╝")

        self.router.print_routes()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("tinyhttpd").setLevel(level)

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Start a session thread for a new connection.

        Called on the accept thread by SocketServer.
        """
        session = Session(conn, self._parser, self.router, self._access_log)
        thread = threading.Thread(
            target=self._run_session,
            args=(session,),
            name=f"conn-{conn.id}",
            daemon=True,
        )

        try:
            thread.start()
        except RuntimeError as e:
            # Out of threads: drop this client, keep accepting
            logger.error(f"[{conn.id}] Cannot start session thread: {e}")
            conn.close()

    def _run_session(self, session: Session):
        try:
            session.run()
        except Exception as e:
            logger.exception(f"[{session.conn.id}] Session crashed: {e}")
