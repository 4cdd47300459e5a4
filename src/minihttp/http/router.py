"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) to a handler function. Routes are plain data held in
an ordered list and evaluated top-down; the first match wins.

=============================================================================
EVALUATION ORDER
=============================================================================

    dispatch(request, serve_dir, reader, writer)
        │
        ├──► method not in supported_methods?  → 501 Not Implemented
        │
        ├──► for route in routes (registration order):
        │        method matches and pattern matches?
        │            → handler(request, RouteContext(...))
        │
        └──► nothing matched                   → 404 Not Found

=============================================================================
PATTERNS
=============================================================================

    "/"              exact root
    "/user-agent"    static path, exact match
    "/echo/*text"    *param captures the rest of the path, may be empty

    "/echo/*text" against "/echo/abc/def" → {"text": "abc/def"}
    "/echo/*text" against "/echo/"        → {"text": ""}

Paths are matched exactly as sent. There is no trailing-slash
normalization, because a wildcard must see the precise remainder.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional
import re

from .request import HTTPRequest, Method
from .response import HTTPResponse, not_found, not_implemented
from ..fileaccess import FileReader, FileWriter


@dataclass(frozen=True)
class RouteContext:
    """
    Everything a handler needs besides the request itself.

    Attributes:
        serve_dir: Root directory for /files/* names (read-only config).
        reader:    FileReader capability.
        writer:    FileWriter capability.
        params:    Values captured by the route pattern.
    """

    serve_dir: str
    reader: FileReader
    writer: FileWriter
    params: Dict[str, str] = field(default_factory=dict)


# A handler takes the request plus its context and returns a response
Handler = Callable[[HTTPRequest, RouteContext], HTTPResponse]


@dataclass
class Route:
    """
    One row of the routing table.

        Route(method="GET", path="/echo/*text", handler=echo)
    """

    method: str
    path: str
    handler: Handler

    # Compiled from ``path`` by the router
    _pattern: Optional[re.Pattern] = field(default=None, repr=False)


@dataclass
class RouteMatch:
    """A matched route and the parameters captured from the path."""

    route: Route
    params: Dict[str, str]


class Router:
    """
    Ordered routing table.

    ==========================================================================
    USAGE
    ==========================================================================

        router = Router(supported_methods=[Method.GET, Method.POST])
        router.add_route("/echo/*text", echo, Method.GET)

        response = router.dispatch(request, "public", reader, writer)

    ==========================================================================
    """

    def __init__(self, supported_methods: Optional[Iterable[str]] = None):
        """
        Args:
            supported_methods: Methods this router serves at all. A request
                               with any other method gets 501 before route
                               matching. Defaults to every Method.
        """
        if supported_methods is None:
            supported_methods = list(Method)
        self.supported_methods = {_method_name(m) for m in supported_methods}
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(self, path: str, handler: Handler, method: str) -> Route:
        """Append a route to the end of the table."""
        pattern = self._compile_pattern(path)
        route = Route(
            method=Method(_method_name(method)).value,
            path=path,
            handler=handler,
            _pattern=pattern,
        )
        self._routes.append(route)
        return route

    def _compile_pattern(self, path: str) -> re.Pattern:
        """
        Compile a route path into an anchored regex.

            "/files/*name"  →  ^/files/(?P<name>.*)$
            "/"             →  ^/$
        """
        regex_parts = ["^"]

        segments = path.split("/")
        for segment in segments:
            if not segment:
                continue

            regex_parts.append("/")

            if segment.startswith("*"):
                name = segment[1:] or "wildcard"
                regex_parts.append(f"(?P<{name}>.*)")
                break  # wildcard swallows the rest
            else:
                regex_parts.append(re.escape(segment))

        if len(regex_parts) == 1:
            regex_parts.append("/")  # the root path

        regex_parts.append("$")
        return re.compile("".join(regex_parts))

    # =========================================================================
    # MATCHING AND DISPATCH
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """First route whose method and pattern both match, or None."""
        method = _method_name(method)
        for route in self._routes:
            if route.method != method:
                continue
            found = route._pattern.match(path) if route._pattern else None
            if found:
                return RouteMatch(route=route, params=found.groupdict())
        return None

    def dispatch(
        self,
        request: HTTPRequest,
        serve_dir: str,
        reader: FileReader,
        writer: FileWriter,
    ) -> HTTPResponse:
        """
        Route a request to its handler.

        Pure with respect to the router: the only side effects are the ones
        the handler performs through ``reader`` and ``writer``.
        """
        method = _method_name(request.method)
        if method not in self.supported_methods:
            return not_implemented()

        found = self.match(method, request.path)
        if found is None:
            return not_found()

        context = RouteContext(
            serve_dir=serve_dir,
            reader=reader,
            writer=writer,
            params=found.params,
        )
        return found.route.handler(request, context)


def _method_name(method: str) -> str:
    """``Method.GET`` and ``"GET"`` both become ``"GET"``."""
    return method.value if isinstance(method, Method) else str(method)
