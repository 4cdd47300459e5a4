"""
Handlers for the routes that never touch storage: the root page, the
User-Agent echo and the path echo.
"""

import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, bad_request, ok
from ..http.router import RouteContext

logger = logging.getLogger(__name__)


def root(request: HTTPRequest, context: RouteContext) -> HTTPResponse:
    """GET / → 200 with an empty body."""
    return ok()


def user_agent(request: HTTPRequest, context: RouteContext) -> HTTPResponse:
    """
    GET /user-agent → the client's User-Agent as text/plain.

    A request without the header gets 400 Bad Request.
    """
    agent = request.user_agent
    if agent is None:
        logger.debug("GET /user-agent without a User-Agent header")
        return bad_request()
    return ok(agent)


def echo(request: HTTPRequest, context: RouteContext) -> HTTPResponse:
    """
    GET /echo/{text} → ``text`` as text/plain.

    ``/echo/`` echoes the empty string: 200 with text/plain and
    ``Content-Length: 0``.
    """
    return ok(context.params.get("text", ""))
