"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

    request.py       raw bytes → HTTPRequest (or HTTPParseError)
    response.py      HTTPResponse, ResponseBuilder, canonical constructors
    router.py        ordered routing table and dispatch
    status_codes.py  HTTPStatus enum with reason phrases

=============================================================================
"""

from .request import (
    HTTPRequest,
    Method,
    RequestParser,
    HTTPParseError,
    MalformedRequestError,
    UnsupportedMethodError,
    parse_request,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,                 # 200 OK
    created,            # 201 Created
    bad_request,        # 400 Bad Request
    not_found,          # 404 Not Found
    internal_error,     # 500 Internal Server Error
    not_implemented,    # 501 Not Implemented
)
from .router import Router, Route, RouteContext, RouteMatch
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "Method",
    "RequestParser",
    "HTTPParseError",
    "MalformedRequestError",
    "UnsupportedMethodError",
    "parse_request",

    # Responses
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "created",
    "bad_request",
    "not_found",
    "internal_error",
    "not_implemented",

    # Routing
    "Router",
    "Route",
    "RouteContext",
    "RouteMatch",

    # Status codes
    "HTTPStatus",
]
