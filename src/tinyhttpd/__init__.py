"""
=============================================================================
TINYHTTPD
=============================================================================

A small HTTP/1.1 server on raw sockets.

    GET  /                  200, empty
    GET  /echo/{value}      200, value as text/plain (gzip if accepted)
    GET  /user-agent        200, the User-Agent header
    GET  /files/{name}      200, file contents  | 404
    POST /files/{name}      201, body stored     | 400 | 500
    *                       404

Connections are persistent until the client sends `Connection: close`.
Each connection gets its own thread.

=============================================================================
QUICK START
=============================================================================

    from tinyhttpd import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=4221, directory="/tmp/data"))
    server.run()

or from a shell:

    python -m tinyhttpd --directory /tmp/data

=============================================================================
PACKAGE LAYOUT
=============================================================================

    tinyhttpd/
    ├── server.py        HTTPServer: accept loop + thread per connection
    ├── config.py        ServerConfig dataclass
    ├── errors.py        Exception hierarchy
    ├── store.py         FileStore behind /files/
    ├── core/            Sockets, connections, sessions, access log
    ├── http/            Parsing, headers, gzip, responses, routing
    └── handlers/        The route handlers

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
