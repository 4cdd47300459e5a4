"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes this server can answer with, plus their
reason phrases (RFC 7231).

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── Reason phrase (HTTPStatus.phrase)
              └───────── Status code (int value of the enum)

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the router and the connection handler.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    # 2xx SUCCESS
    OK = 200                        # Request served
    CREATED = 201                   # File written (POST /files/...)

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400               # Malformed request or missing header
    NOT_FOUND = 404                 # No route, or storage failure

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500     # Handler raised unexpectedly
    NOT_IMPLEMENTED = 501           # Method outside GET/POST

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
}
