"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything that knows about HTTP/1.1 syntax, with no knowledge of routes
or storage:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    HTTP MODULE COMPONENTS                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   request.py       Request head parser → HTTPRequest                 │
    │   headers.py       Header lookup, Connection/Accept-Encoding rules   │
    │   encoding.py      gzip content encoder                              │
    │   response.py      HTTPResponse, ResponseBuilder, ResponseWriter     │
    │   router.py        Ordered first-match router                        │
    │   status_codes.py  HTTPStatus enum and reason phrases                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .status_codes import HTTPStatus
from .request import HTTPRequest, RequestParser
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ResponseWriter,
    empty,
    created,
    not_found,
    internal_error,
)
from .encoding import gzip_encode
from .router import Router, Route, RouteType

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",

    # Responses
    "HTTPResponse",
    "ResponseBuilder",
    "ResponseWriter",
    "empty",
    "created",
    "not_found",
    "internal_error",

    # Encoding
    "gzip_encode",

    # Routing
    "Router",
    "Route",
    "RouteType",

    # Status codes
    "HTTPStatus",
]
