"""
=============================================================================
URL ROUTER
=============================================================================

Maps a request path to a handler with an ordered list of rules.

=============================================================================
ROUTING ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTING FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /files/notes.txt                                               │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  #  kind    pattern        handler                           │   │
    │   │  1  EXACT   /              index          ✗                  │   │
    │   │  2  PREFIX  /echo/         echo           ✗                  │   │
    │   │  3  PREFIX  /user-agent    user_agent     ✗                  │   │
    │   │  4  PREFIX  /files/        files          ✓ ← first match    │   │
    │   │  -  default                not_found                         │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   files(request) → HTTPResponse                                      │
    │        │                                                             │
    │        ▼                                                             │
    │   + "Connection: close" if the client asked for it                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Rules are tried top to bottom; the first one that matches wins. Order is
the whole priority scheme: "/" is EXACT so it never shadows the prefixes
below it, and anything unmatched falls through to the default handler.

=============================================================================
HANDLER ERRORS
=============================================================================

Handlers signal failures by raising HandlerError subclasses. The router
turns them into a bare status response:

    raise MissingHeader("User-Agent")   →   HTTP/1.1 400 Bad Request
    raise FileNotFound("notes.txt")     →   HTTP/1.1 404 Not Found
    raise EncodingError(...)            →   HTTP/1.1 500 Internal Server Error

Nothing the handler built before raising is sent.

=============================================================================
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from ..errors import HandlerError
from .request import HTTPRequest
from .response import HTTPResponse, empty, not_found
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)

# Handler: takes a request, returns a response (or raises HandlerError)
Handler = Callable[[HTTPRequest], HTTPResponse]


class RouteType(Enum):
    """How a route's pattern is compared with the request path."""
    EXACT = "exact"     # path == pattern
    PREFIX = "prefix"   # path.startswith(pattern)


@dataclass
class Route:
    """
    A registered (matcher, handler) pair.

        Route(pattern="/echo/", kind=RouteType.PREFIX, handler=echo, name="echo")
    """

    pattern: str
    kind: RouteType
    handler: Handler
    name: Optional[str] = None

    def matches(self, path: str) -> bool:
        if self.kind is RouteType.EXACT:
            return path == self.pattern
        return path.startswith(self.pattern)


def default_handler(request: HTTPRequest) -> HTTPResponse:
    """404 for anything no route claims."""
    return not_found(request.version)


class Router:
    """
    Ordered first-match router.

        router = Router()
        router.exact("/", index)
        router.prefix("/echo/", echo)
        router.prefix("/user-agent", user_agent)

        response = router.handle(request)
    """

    def __init__(self, default: Handler = default_handler):
        self._routes: List[Route] = []
        self._default = default

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        pattern: str,
        handler: Handler,
        kind: RouteType = RouteType.EXACT,
        name: Optional[str] = None,
    ) -> Route:
        """
        Append a route. Later routes have lower priority.

        Args:
            pattern: Exact path or path prefix.
            handler: Called with the request when the pattern matches.
            kind: EXACT or PREFIX comparison.
            name: Label for logs and print_routes(); defaults to the
                  handler's __name__.

        Returns:
            The registered Route.
        """
        route = Route(
            pattern=pattern,
            kind=kind,
            handler=handler,
            name=name or getattr(handler, "__name__", type(handler).__name__),
        )
        self._routes.append(route)
        return route

    def exact(self, pattern: str, handler: Handler, name: Optional[str] = None) -> Route:
        return self.add_route(pattern, handler, RouteType.EXACT, name)

    def prefix(self, pattern: str, handler: Handler, name: Optional[str] = None) -> Route:
        return self.add_route(pattern, handler, RouteType.PREFIX, name)

    # =========================================================================
    # MATCHING & DISPATCH
    # =========================================================================

    def match(self, path: str) -> Optional[Route]:
        """First route whose pattern matches `path`, or None."""
        for route in self._routes:
            if route.matches(path):
                return route
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request and produce its response.

        1. Find the first matching route (or the default handler)
        2. Call the handler; HandlerError → bare status response
        3. Append "Connection: close" when the client requested it

        Exceptions other than HandlerError propagate to the caller.
        """
        route = self.match(request.path)
        handler = route.handler if route else self._default

        try:
            response = handler(request)
        except HandlerError as e:
            status = HTTPStatus(e.status_code)
            logger.warning(f"{request.method} {request.path} → {int(status)}: {e}")
            response = empty(status, request.version)

        if request.close_requested:
            response.headers["Connection"] = "close"

        return response

    @property
    def routes(self) -> List[Route]:
        """Registered routes in priority order."""
        return list(self._routes)

    def print_routes(self) -> None:
        """
        Print the route table.

            Registered Routes:
            ------------------------------------------------------------
              EXACT    /                index
              PREFIX   /echo/           echo
            ------------------------------------------------------------
        """
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self._routes:
            print(f"  {route.kind.name:8} {route.pattern:16} {route.name}")
        print("-" * 60)
