"""
Helpers shared by the route handlers, and the "/" handler itself.
"""

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, empty
from ..http.status_codes import HTTPStatus


def path_segment(path: str) -> str:
    """
    Second "/"-delimited component of a path.

        "/echo/abc"        → "abc"
        "/files/a.txt"     → "a.txt"
        "/echo/abc/def"    → "abc"     (the rest is ignored)
        "/echo/"           → ""
    """
    parts = path.split("/")
    return parts[2] if len(parts) > 2 else ""


def content_response(
    request: HTTPRequest,
    content_type: str,
    body: bytes,
) -> HTTPResponse:
    """
    200 OK with Content-Type, an optional Content-Encoding, and the body.

    Content-Encoding carries the negotiated encodings whenever there are
    any, whether or not `body` was actually encoded. Content-Length is the
    length of `body` as given.
    """
    builder = (ResponseBuilder(request.version)
        .status(HTTPStatus.OK)
        .header("Content-Type", content_type))

    encodings = request.accepted_encodings
    if encodings:
        builder.header("Content-Encoding", encodings)

    return builder.body(body).build()


def index(request: HTTPRequest) -> HTTPResponse:
    """GET / → 200 with no body and no content headers."""
    return empty(HTTPStatus.OK, request.version)
