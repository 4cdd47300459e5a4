"""
=============================================================================
HTTP RESPONSE MODEL
=============================================================================

HTTPResponse holds a status, ordered headers and a body, and serializes
itself to wire bytes with to_wire().

=============================================================================
WIRE FORMAT
=============================================================================

    HTTP/1.1 200 OK\r\n                  ← status line
    Content-Type: text/plain\r\n         ← headers, in insertion order
    Content-Length: 3\r\n
    \r\n                                 ← empty line
    abc                                  ← body bytes

Headers are written in the order they were added, so the same response
always serializes to the same bytes.

The serializer adds nothing on its own (no Date, no Server, no
Content-Length). Keeping Content-Length in step with the body is the job
of whoever builds the response: ResponseBuilder.build() and the canonical
constructors below do it for you.

=============================================================================
CANONICAL CONSTRUCTORS
=============================================================================

    ok()               200 OK
    created()          201 Created
    bad_request()      400 Bad Request
    not_found()        404 Not Found
    internal_error()   500 Internal Server Error
    not_implemented()  501 Not Implemented

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .status_codes import HTTPStatus


TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"


@dataclass
class HTTPResponse:
    """
    An HTTP response ready to be serialized.

    Build it through ResponseBuilder or one of the canonical constructors
    rather than by hand, so the Content-Length header matches the body.
    """

    status_code: int = HTTPStatus.OK
    status_text: str = HTTPStatus.OK.phrase
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """``HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE``"""
        return f"{self.version} {int(self.status_code)} {self.status_text}"

    def to_wire(self) -> bytes:
        """
        Serialize to bytes for socket.sendall().

        Returns:
            Status line, one line per header, an empty line, then the body.
        """
        head = self.status_line + "\r\n"
        for name, value in self.headers.items():
            head += f"{name}: {value}\r\n"
        head += "\r\n"
        return head.encode("utf-8") + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

    ==========================================================================
    USAGE
    ==========================================================================

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .text("hello")
            .build())

    build() appends Content-Length after the other headers whenever a
    body was set, even an empty one, so a builder-made response always
    satisfies the Content-Length invariant. A response that never had a
    body set (status-only responses) carries no headers at all.

    ==========================================================================
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: Optional[bytes] = None

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Add one header. Order of calls is the order on the wire."""
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def text(self, text: str, content_type: str = TEXT_PLAIN) -> "ResponseBuilder":
        """UTF-8 encoded text body with a Content-Type."""
        self._body = text.encode("utf-8")
        return self.content_type(content_type)

    def octets(self, data: bytes, content_type: str = OCTET_STREAM) -> "ResponseBuilder":
        """Raw bytes body with a Content-Type."""
        self._body = bytes(data)
        return self.content_type(content_type)

    def build(self) -> HTTPResponse:
        headers = dict(self._headers)
        if self._body is not None:
            headers["Content-Length"] = str(len(self._body))
        return HTTPResponse(
            status_code=self._status,
            status_text=self._status.phrase,
            headers=headers,
            body=self._body or b"",
        )


# =============================================================================
# CANONICAL CONSTRUCTORS
# =============================================================================


def ok(body: Union[str, bytes] = b"", content_type: Optional[str] = None) -> HTTPResponse:
    """
    200 OK.

    A ``str`` body is text/plain, a ``bytes`` body application/octet-stream,
    unless ``content_type`` says otherwise. Both carry Content-Type and
    Content-Length even when empty:

        ok("")                            → Content-Type: text/plain
                                            Content-Length: 0
        ok(b"", content_type=OCTET_STREAM) → same with octet-stream

    Only ``ok()`` with no body and no content type is a bare
    ``HTTP/1.1 200 OK`` with no headers.
    """
    builder = ResponseBuilder().status(HTTPStatus.OK)
    if isinstance(body, str):
        builder.text(body, content_type or TEXT_PLAIN)
    elif body or content_type:
        builder.octets(body, content_type or OCTET_STREAM)
    return builder.build()


def created() -> HTTPResponse:
    """201 Created, sent after a successful file write."""
    return ResponseBuilder().status(HTTPStatus.CREATED).build()


def bad_request() -> HTTPResponse:
    """400 Bad Request."""
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).build()


def not_found() -> HTTPResponse:
    """404 Not Found. Also used for every storage failure."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).build()


def internal_error() -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).build()


def not_implemented() -> HTTPResponse:
    """501 Not Implemented, for methods the router does not serve."""
    return ResponseBuilder().status(HTTPStatus.NOT_IMPLEMENTED).build()


def from_status(status: HTTPStatus) -> HTTPResponse:
    """Empty-bodied response for an arbitrary status (parse errors)."""
    return ResponseBuilder().status(HTTPStatus(status)).build()
