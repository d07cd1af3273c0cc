"""
=============================================================================
ECHO HANDLER
=============================================================================

    GET /echo/{value}

Answers with {value} as text/plain, gzip-compressed when the client
accepts gzip:

    GET /echo/abc HTTP/1.1              HTTP/1.1 200 OK
    Host: x                     ──►     Content-Type: text/plain
                                        Content-Length: 3

                                        abc

    GET /echo/abc HTTP/1.1              HTTP/1.1 200 OK
    Accept-Encoding: gzip       ──►     Content-Type: text/plain
                                        Content-Encoding: gzip
                                        Content-Length: 23

                                        <gzip member of "abc">

If compression fails the response is a bare 500; no 200 headers follow it.

=============================================================================
"""

import logging

from ..http.encoding import gzip_encode
from ..http.request import HTTPRequest, HEADER_ENCODING
from ..http.response import HTTPResponse
from .base import content_response, path_segment


logger = logging.getLogger(__name__)


def echo(request: HTTPRequest) -> HTTPResponse:
    """
    Echo the path segment after /echo/.

    Raises:
        EncodingError: gzip failed (→ 500).
    """
    body = path_segment(request.path).encode(HEADER_ENCODING)

    if "gzip" in request.accepted_encodings:
        raw_size = len(body)
        body = gzip_encode(body)
        logger.debug(f"echo: gzip {raw_size} → {len(body)} bytes")

    return content_response(request, "text/plain", body)
