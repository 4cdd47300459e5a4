"""
Unit tests for the URL router and the server's routing table.
"""

import pytest

from minihttp.fileaccess import MemoryFileStore
from minihttp.http.router import Router, RouteContext
from minihttp.http.request import HTTPRequest, Method
from minihttp.http.response import HTTPResponse, ResponseBuilder, ok
from minihttp.http.status_codes import HTTPStatus
from minihttp.routes import ROUTES, SUPPORTED_METHODS, build_router, dispatch


def make_request(method: str, path: str, headers=None, body=None) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=Method(method), path=path, headers=headers or {}, body=body)


def dummy_handler(request: HTTPRequest, context: RouteContext) -> HTTPResponse:
    """Dummy handler for testing."""
    return ResponseBuilder().text(request.path).build()


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        """Test adding routes."""
        router = Router()
        router.add_route("/users", dummy_handler, method="GET")

        assert len(router._routes) == 1
        assert router._routes[0].path == "/users"
        assert router._routes[0].method == "GET"
        assert router._routes[0].handler is dummy_handler

    def test_add_route_rejects_unknown_method(self):
        with pytest.raises(ValueError):
            Router().add_route("/users", dummy_handler, method="PATCH")

    def test_match_static_path(self):
        """Test matching static paths."""
        router = Router()
        router.add_route("/users", dummy_handler, method="GET")
        router.add_route("/posts", dummy_handler, method="GET")

        match = router.match("GET", "/users")
        assert match is not None
        assert match.route.path == "/users"

        match = router.match("GET", "/posts")
        assert match is not None
        assert match.route.path == "/posts"

    def test_match_with_method(self):
        """Test method-based routing."""
        router = Router()
        router.add_route("/users", dummy_handler, method="GET")
        router.add_route("/users", dummy_handler, method=Method.POST)

        get_match = router.match(Method.GET, "/users")
        post_match = router.match("POST", "/users")

        assert get_match.route.method == "GET"
        assert post_match.route.method == "POST"

    def test_match_root_only(self):
        router = Router()
        router.add_route("/", dummy_handler, method="GET")

        assert router.match("GET", "/") is not None
        assert router.match("GET", "/x") is None
        assert router.match("GET", "//") is None

    def test_match_wildcard(self):
        """Test wildcard path matching."""
        router = Router()
        router.add_route("/static/*path", dummy_handler, method="GET")

        match = router.match("GET", "/static/css/style.css")
        assert match.params == {"path": "css/style.css"}

        match = router.match("GET", "/static/")
        assert match.params == {"path": ""}

        assert router.match("GET", "/static") is None

    def test_no_trailing_slash_normalization(self):
        router = Router()
        router.add_route("/user-agent", dummy_handler, method="GET")

        assert router.match("GET", "/user-agent/") is None

    def test_no_match(self):
        """Test when no route matches."""
        router = Router()
        router.add_route("/users", dummy_handler, method="GET")

        assert router.match("GET", "/posts") is None
        assert router.match("POST", "/users") is None  # Wrong method

    def test_first_match_wins(self):
        router = Router()
        router.add_route("/a/*rest", lambda r, c: ok("first"), method="GET")
        router.add_route("/a/b", lambda r, c: ok("second"), method="GET")

        response = router.dispatch(make_request("GET", "/a/b"), "", None, None)
        assert response.body == b"first"

    def test_dispatch_passes_context(self):
        """Test that captured params and capabilities reach the handler."""
        router = Router()
        store = MemoryFileStore()
        captured = {}

        def get_user(request, context):
            captured["context"] = context
            return ok()

        router.add_route("/users/*id", get_user, method="GET")
        router.dispatch(make_request("GET", "/users/42"), "data", store.reader(), store.writer())

        context = captured["context"]
        assert context.params == {"id": "42"}
        assert context.serve_dir == "data"
        assert context.reader.store is store

    def test_dispatch_not_found(self):
        """Test 404 handling."""
        router = Router()
        router.add_route("/users", dummy_handler, method="GET")

        response = router.dispatch(make_request("GET", "/posts"), "", None, None)

        assert response.status_code == HTTPStatus.NOT_FOUND

    def test_dispatch_unsupported_method(self):
        """Methods outside supported_methods get 501 before matching."""
        router = Router(supported_methods=[Method.GET])
        router.add_route("/users", dummy_handler, method="GET")

        response = router.dispatch(make_request("DELETE", "/users"), "", None, None)

        assert response.status_code == HTTPStatus.NOT_IMPLEMENTED


class TestRoutingTable:
    """Tests for the server's fixed routes, dispatched with in-memory files."""

    @pytest.fixture
    def store(self) -> MemoryFileStore:
        return MemoryFileStore({"public/a.txt": b"hello"})

    def _dispatch(self, store, request, serve_dir="public"):
        return dispatch(request, serve_dir, store.reader(), store.writer())

    def test_table_order(self):
        assert [(m.value, p) for m, p, _ in ROUTES] == [
            ("GET", "/"),
            ("GET", "/user-agent"),
            ("GET", "/echo/*text"),
            ("GET", "/files/*name"),
            ("POST", "/files/*name"),
        ]
        assert SUPPORTED_METHODS == (Method.GET, Method.POST)
        assert [(r.method, r.path) for r in build_router()._routes] == [
            (m.value, p) for m, p, _ in ROUTES
        ]

    def test_root(self, store):
        response = self._dispatch(store, make_request("GET", "/"))

        assert response.to_wire() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_echo(self, store):
        response = self._dispatch(store, make_request("GET", "/echo/abc"))

        assert response.to_wire() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"abc"
        )

    def test_echo_keeps_slashes(self, store):
        response = self._dispatch(store, make_request("GET", "/echo/a/b/"))

        assert response.body == b"a/b/"

    def test_echo_empty(self, store):
        """An empty echo is still a text/plain response."""
        response = self._dispatch(store, make_request("GET", "/echo/"))

        assert response.to_wire() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 0\r\n"
            b"\r\n"
        )

    def test_user_agent_empty_value(self, store):
        request = make_request("GET", "/user-agent", headers={"User-Agent": ""})
        response = self._dispatch(store, request)

        assert response.headers == {"Content-Type": "text/plain", "Content-Length": "0"}
        assert response.body == b""

    def test_get_empty_file(self, store):
        store.files["public/empty"] = b""
        response = self._dispatch(store, make_request("GET", "/files/empty"))

        assert response.to_wire() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: application/octet-stream\r\n"
            b"Content-Length: 0\r\n"
            b"\r\n"
        )

    def test_user_agent(self, store):
        request = make_request("GET", "/user-agent", headers={"User-Agent": "foobar/1.2.3"})
        response = self._dispatch(store, request)

        assert response.body == b"foobar/1.2.3"
        assert response.headers["Content-Length"] == "12"

    def test_get_file(self, store):
        response = self._dispatch(store, make_request("GET", "/files/a.txt"))

        assert response.to_wire() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: application/octet-stream\r\n"
            b"Content-Length: 5\r\n"
            b"\r\n"
            b"hello"
        )

    def test_post_file(self, store):
        request = make_request(
            "POST", "/files/b.txt",
            headers={"Content-Length": "5"},
            body=b"12345",
        )
        response = self._dispatch(store, request)

        assert response.to_wire() == b"HTTP/1.1 201 Created\r\n\r\n"
        assert store.files["public/b.txt"] == b"12345"

    @pytest.mark.parametrize("method, path", [
        ("GET", "/unknown"),
        ("GET", "/files"),
        ("GET", "/echo"),
        ("POST", "/"),
        ("POST", "/echo/abc"),
    ])
    def test_unmatched_is_not_found(self, store, method: str, path: str):
        response = self._dispatch(store, make_request(method, path))

        assert response.to_wire() == b"HTTP/1.1 404 Not Found\r\n\r\n"

    @pytest.mark.parametrize("method", ["PUT", "DELETE"])
    def test_other_methods_not_implemented(self, store, method: str):
        response = self._dispatch(store, make_request(method, "/files/a.txt"))

        assert response.to_wire() == b"HTTP/1.1 501 Not Implemented\r\n\r\n"
        assert store.files == {"public/a.txt": b"hello"}

    def test_dispatch_is_deterministic(self, store):
        request = make_request("GET", "/echo/same")

        first = self._dispatch(store, request).to_wire()
        second = self._dispatch(store, request).to_wire()

        assert first == second

    def test_post_then_get_round_trip(self):
        store = MemoryFileStore()
        body = b"\x00binary\xffdata"
        post = make_request(
            "POST", "/files/blob",
            headers={"Content-Length": str(len(body))},
            body=body,
        )

        assert self._dispatch(store, post, serve_dir="").status_code == HTTPStatus.CREATED
        response = self._dispatch(store, make_request("GET", "/files/blob"), serve_dir="")

        assert response.body == body
        assert store.files == {"blob": body}
