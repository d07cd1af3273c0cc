"""
=============================================================================
CORE MODULE
=============================================================================

TCP-level building blocks, with no knowledge of HTTP syntax:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CORE COMPONENTS                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   socket_server.py  Bind, listen, accept, hand off                   │
    │   connection.py     Buffered reads and ordered writes on one socket  │
    │                                                                      │
    │   session.py        Per-connection request/response loop             │
    │   access_log.py     One log line per answered request                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

session.py and access_log.py sit on top of the http package and are
imported from their modules directly:

    from tinyhttpd.core.session import Session

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState, ConnectionClosed

__all__ = [
    "SocketServer",       # Accept loop
    "Connection",         # Client socket wrapper
    "ConnectionState",    # Lifecycle states
    "ConnectionClosed",   # Stream ended mid-read
]
