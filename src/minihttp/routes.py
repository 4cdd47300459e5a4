"""
=============================================================================
ROUTING TABLE
=============================================================================

The server's routes, as data, in evaluation order:

    ┌────────┬──────────────────┬─────────────────────────────────────────┐
    │ Method │ Pattern          │ Handler                                 │
    ├────────┼──────────────────┼─────────────────────────────────────────┤
    │ GET    │ /                │ handlers.root                           │
    │ GET    │ /user-agent      │ handlers.user_agent                     │
    │ GET    │ /echo/*text      │ handlers.echo                           │
    │ GET    │ /files/*name     │ handlers.get_file                       │
    │ POST   │ /files/*name     │ handlers.post_file                      │
    └────────┴──────────────────┴─────────────────────────────────────────┘

Methods other than GET and POST are answered with 501 before the table is
consulted. Anything the table does not match is 404.

=============================================================================
"""

from typing import List, Tuple

from . import handlers
from .fileaccess import FileReader, FileWriter
from .http.request import HTTPRequest, Method
from .http.response import HTTPResponse
from .http.router import Handler, Router

SUPPORTED_METHODS = (Method.GET, Method.POST)

ROUTES: List[Tuple[Method, str, Handler]] = [
    (Method.GET, "/", handlers.root),
    (Method.GET, "/user-agent", handlers.user_agent),
    (Method.GET, "/echo/*text", handlers.echo),
    (Method.GET, "/files/*name", handlers.get_file),
    (Method.POST, "/files/*name", handlers.post_file),
]


def build_router() -> Router:
    """Fresh Router loaded with ROUTES."""
    router = Router(supported_methods=SUPPORTED_METHODS)
    for method, path, handler in ROUTES:
        router.add_route(path, handler, method)
    return router


# Read-only after import; safe to share between worker threads
_router = build_router()


def dispatch(
    request: HTTPRequest,
    serve_dir: str,
    reader: FileReader,
    writer: FileWriter,
) -> HTTPResponse:
    """
    Map a parsed request to its response.

    Args:
        request:   Parsed request.
        serve_dir: Root for /files/* names.
        reader:    Capability used by GET /files/*.
        writer:    Capability used by POST /files/*.
    """
    return _router.dispatch(request, serve_dir, reader, writer)
