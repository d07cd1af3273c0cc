"""
Unit tests for URL router.
"""

import pytest

from tinyhttpd.errors import FileNotFound, MissingHeader
from tinyhttpd.http.request import HTTPRequest
from tinyhttpd.http.response import HTTPResponse, ResponseBuilder
from tinyhttpd.http.router import Route, RouteType, Router
from tinyhttpd.http.status_codes import HTTPStatus


def make_request(path: str, method: str = "GET", headers=None) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path, headers=headers or [])


def dummy_handler(request: HTTPRequest) -> HTTPResponse:
    """Dummy handler for testing."""
    return ResponseBuilder(request.version).body(request.path).build()


class TestRoute:
    """Tests for Route matching."""

    def test_exact(self):
        route = Route("/", RouteType.EXACT, dummy_handler)
        assert route.matches("/")
        assert not route.matches("/x")

    def test_prefix(self):
        route = Route("/echo/", RouteType.PREFIX, dummy_handler)
        assert route.matches("/echo/")
        assert route.matches("/echo/abc/def")
        assert not route.matches("/echo")


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        """Test adding routes."""
        router = Router()
        route = router.add_route("/users", dummy_handler)

        assert router.routes == [route]
        assert route.kind is RouteType.EXACT
        assert route.name == "dummy_handler"

    def test_first_match_wins(self):
        """Routes are tried in registration order."""
        router = Router()
        first = router.prefix("/a", dummy_handler, name="first")
        router.prefix("/ab", dummy_handler, name="second")

        assert router.match("/abc") is first

    def test_exact_root_does_not_shadow(self):
        """An exact "/" never claims longer paths."""
        router = Router()
        router.exact("/", dummy_handler, name="index")
        echo = router.prefix("/echo/", dummy_handler, name="echo")

        assert router.match("/echo/x") is echo
        assert router.match("/").name == "index"

    def test_no_match(self):
        router = Router()
        router.exact("/", dummy_handler)
        assert router.match("/nothing") is None

    def test_handle_success(self):
        router = Router()
        router.prefix("/echo/", dummy_handler)

        response = router.handle(make_request("/echo/abc"))
        assert response.status == HTTPStatus.OK
        assert response.body == b"/echo/abc"

    def test_handle_not_found(self):
        """Unmatched paths get a bare 404 echoing the request version."""
        router = Router()
        request = HTTPRequest("GET", "/missing", version="HTTP/1.0")

        response = router.handle(request)
        assert response.to_bytes() == b"HTTP/1.0 404 Not Found\r\n\r\n"

    def test_custom_default(self):
        router = Router(default=dummy_handler)
        assert router.handle(make_request("/anything")).body == b"/anything"

    @pytest.mark.parametrize("error, status", [
        (MissingHeader("User-Agent"), HTTPStatus.BAD_REQUEST),
        (FileNotFound("x"), HTTPStatus.NOT_FOUND),
    ])
    def test_handler_error_becomes_status(self, error, status):
        """HandlerErrors turn into empty responses with their status."""
        def failing(request):
            raise error

        router = Router()
        router.exact("/", failing)

        response = router.handle(make_request("/"))
        assert response.status == status
        assert response.headers == {}
        assert response.body == b""

    def test_other_errors_propagate(self):
        def broken(request):
            raise RuntimeError("boom")

        router = Router()
        router.exact("/", broken)

        with pytest.raises(RuntimeError):
            router.handle(make_request("/"))

    def test_connection_close_appended(self):
        """Connection: close goes after the handler's own headers."""
        router = Router()
        router.prefix("/echo/", dummy_handler)

        request = make_request("/echo/x", headers=["Connection: close\r\n"])
        response = router.handle(request)

        assert list(response.headers) == ["Content-Length", "Connection"]
        assert response.headers["Connection"] == "close"

    def test_connection_close_on_error_response(self):
        router = Router()
        request = make_request("/missing", headers=["Connection: close\r\n"])

        response = router.handle(request)
        assert response.to_bytes() == b"HTTP/1.1 404 Not Found\r\nConnection: close\r\n\r\n"

    def test_no_connection_header_on_keep_alive(self):
        router = Router()
        response = router.handle(make_request("/missing"))
        assert "Connection" not in response.headers


class TestRouteTable:
    """Tests for the printed route table."""

    def test_print_routes(self, capsys):
        router = Router()
        router.exact("/", dummy_handler, name="index")
        router.print_routes()

        out = capsys.readouterr().out
        assert "EXACT" in out
        assert "index" in out
