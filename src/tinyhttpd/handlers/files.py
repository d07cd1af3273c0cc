"""
=============================================================================
FILES HANDLER
=============================================================================

Reads and writes entries of the FileStore over HTTP.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        /files/{name}                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET    → 200  application/octet-stream, raw file bytes             │
    │            404  no such file                                         │
    │            500  any other read failure                               │
    │                                                                      │
    │   POST   → 201  body stored under {name} (overwrites)                │
    │            400  Content-Length missing or invalid                    │
    │            500  write failure                                        │
    │            --   body shorter than declared: connection dropped       │
    │                                                                      │
    │   other  → 404                                                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The name is the path component right after /files/; anything after the
next "/" is ignored.

=============================================================================
POST BODY FRAMING
=============================================================================

The body is delimited by Content-Length only. The handler reads exactly
that many bytes off the connection, blocking until they arrive:

    POST /files/a.txt HTTP/1.1\\r\\n
    Content-Length: 5\\r\\n
    \\r\\n
    hello                     ← read_body(5)
    GET / HTTP/1.1\\r\\n       ← left on the stream for the next request

Chunked transfer encoding is not supported.

=============================================================================
"""

import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, created, not_found
from ..store import FileStore
from .base import content_response, path_segment


logger = logging.getLogger(__name__)


class FilesHandler:
    """
    Handler for /files/{name}, bound to one FileStore.

        files = FilesHandler(FileStore("/tmp/data"))
        router.prefix("/files/", files)
    """

    def __init__(self, store: FileStore):
        self.store = store

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        if request.method == "GET":
            return self.get(request)
        if request.method == "POST":
            return self.post(request)

        logger.debug(f"files: unsupported method {request.method}")
        return not_found(request.version)

    def get(self, request: HTTPRequest) -> HTTPResponse:
        """
        Serve a stored file.

        Raises:
            FileNotFound: → 404
            StoreIOError: → 500
        """
        name = path_segment(request.path)
        content = self.store.read(name)
        return content_response(request, "application/octet-stream", content)

    def post(self, request: HTTPRequest) -> HTTPResponse:
        """
        Store the request body under the file name.

        Raises:
            MissingHeader, InvalidContentLength: → 400
            StoreIOError: → 500
            ReadError: body cut short; the session closes without a response.
        """
        name = path_segment(request.path)
        size = request.content_length
        body = request.read_body(size)

        self.store.write(name, body)
        logger.info(f"Stored {len(body)} bytes as {name!r}")
        return created(request.version)
