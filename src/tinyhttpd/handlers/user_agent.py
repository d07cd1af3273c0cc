"""
User-Agent handler.

    GET /user-agent  →  200, body = the User-Agent header value
                        400 when the header is missing or empty

The body is never compressed, but Content-Encoding is still declared
when the client negotiated an encoding, matching the shape of the echo
response. Content-Length is the length of the raw value.
"""

from ..errors import MissingHeader
from ..http.request import HTTPRequest, HEADER_ENCODING
from ..http.response import HTTPResponse
from .base import content_response


def user_agent(request: HTTPRequest) -> HTTPResponse:
    value = request.user_agent
    if not value:
        raise MissingHeader("User-Agent")

    return content_response(request, "text/plain", value.encode(HEADER_ENCODING))
