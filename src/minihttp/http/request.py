"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes of one socket read into a structured HTTPRequest.

=============================================================================
WHAT THE PARSER SEES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   POST /files/notes.txt HTTP/1.1\r\n      ← start line              │
    │   Host: localhost:4221\r\n                ← header lines            │
    │   Content-Length: 5\r\n                                              │
    │   \r\n                                    ← empty line              │
    │   hello                                   ← body (raw bytes)        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The server performs a single bounded read per connection, so the parser
gets whatever arrived in that read. A request larger than the read buffer
is truncated before the parser ever sees it.

=============================================================================
FAILURE KINDS
=============================================================================

    MalformedRequestError    → 400 Bad Request
        - empty buffer
        - start line without exactly three tokens
        - path not starting with "/"

    UnsupportedMethodError   → 501 Not Implemented
        - method token other than GET, POST, PUT, DELETE

Header lines are parsed leniently: a line without a colon is dropped, it
never fails the request.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union
import re

from .status_codes import HTTPStatus


class Method(str, Enum):
    """
    The request methods the parser accepts.

    Mixing in ``str`` keeps ``Method.GET == "GET"`` true, which is handy
    in the router and in logs.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class HTTPParseError(Exception):
    """
    Raised when a raw buffer cannot be turned into an HTTPRequest.

    Carries the HTTP status the connection handler should answer with,
    so callers never need to inspect the message text.
    """

    status_code: HTTPStatus = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str, status_code: Optional[HTTPStatus] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class MalformedRequestError(HTTPParseError):
    """Structurally invalid request (empty buffer, bad start line)."""

    status_code = HTTPStatus.BAD_REQUEST


class UnsupportedMethodError(HTTPParseError):
    """Start line is well formed but the method is not one we know."""

    status_code = HTTPStatus.NOT_IMPLEMENTED

    def __init__(self, method: str):
        super().__init__(f"Unsupported method: {method}")
        self.method = method


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:     Method enum member (GET, POST, PUT, DELETE)
        path:       Request target exactly as sent, always starts with "/"
        version:    Protocol token from the start line ("HTTP/1.1")
        headers:    Header name → value, names kept exactly as received
        body:       Bytes after the empty line, or None when nothing
                    followed it

    Frozen: a request is built once by the parser and only read afterwards.

    =========================================================================
    HEADER CASE
    =========================================================================

    Header names are stored as the client sent them, but HTTP says names
    are case-insensitive. Use get_header() for lookups:

        request.headers["user-agent"]        # KeyError if sent as User-Agent
        request.get_header("USER-AGENT")     # works for any spelling

    =========================================================================
    """

    method: Method
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Case-insensitive header lookup.

        An exact match wins; otherwise the first header whose name matches
        ignoring case is returned.
        """
        if name in self.headers:
            return self.headers[name]
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default

    @property
    def user_agent(self) -> Optional[str]:
        return self.get_header("User-Agent")

    @property
    def content_length(self) -> Optional[int]:
        """
        Content-Length as an int.

        None when the header is missing or is not a plain non-negative
        decimal number ("5" is fine, "five", "-1" and "+5" are not).
        """
        value = self.get_header("Content-Length")
        if value is None:
            return None
        value = value.strip()
        if not _DIGITS_PATTERN.fullmatch(value):
            return None
        return int(value)


_DIGITS_PATTERN = re.compile(r"[0-9]+")


class RequestParser:
    """
    Parses one raw request buffer into an HTTPRequest.

    ==========================================================================
    PARSING STEPS
    ==========================================================================

        raw bytes
            │
            ├──► 1. Size check (optional max_request_size)
            ├──► 2. Split at the first empty line → header text | body bytes
            ├──► 3. Split header text into lines (CRLF or bare LF)
            ├──► 4. Start line → method, path, version
            ├──► 5. Remaining lines → headers (first colon splits)
            │
            ▼
        HTTPRequest

    ==========================================================================
    """

    SUPPORTED_METHODS = {method.value: method for method in Method}

    # Empty line between headers and body, most specific first
    HEADER_TERMINATORS = (b"\r\n\r\n", b"\n\n")

    def __init__(self, max_request_size: Optional[int] = None):
        """
        Args:
            max_request_size: Reject buffers larger than this many bytes.
                              None disables the check; the socket read is
                              already bounded by the server's buffer size.
        """
        self.max_request_size = max_request_size

    def parse(self, data: Union[bytes, str]) -> HTTPRequest:
        """
        Parse a raw request.

        Args:
            data: Raw request as received. ``str`` input is encoded as UTF-8.

        Returns:
            The parsed HTTPRequest.

        Raises:
            MalformedRequestError: Empty buffer or bad start line.
            UnsupportedMethodError: Unknown method token.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")

        # ─────────────────────────────────────────────────────────────────
        # STEP 1: Size guard
        # ─────────────────────────────────────────────────────────────────
        if self.max_request_size is not None and len(data) > self.max_request_size:
            raise MalformedRequestError(f"Request too large: {len(data)} bytes")

        # ─────────────────────────────────────────────────────────────────
        # STEP 2: Header section and body
        # ─────────────────────────────────────────────────────────────────
        header_bytes, body = self._split_head(data)

        # Invalid UTF-8 is replaced, never fatal
        header_section = header_bytes.decode("utf-8", errors="replace")

        # ─────────────────────────────────────────────────────────────────
        # STEP 3: Lines
        # ─────────────────────────────────────────────────────────────────
        lines = [line.rstrip("\r") for line in header_section.split("\n")]
        if not header_section.strip():
            raise MalformedRequestError("Empty request")

        # ─────────────────────────────────────────────────────────────────
        # STEP 4: Start line
        # ─────────────────────────────────────────────────────────────────
        method, path, version = self._parse_start_line(lines[0])

        # ─────────────────────────────────────────────────────────────────
        # STEP 5: Headers
        # ─────────────────────────────────────────────────────────────────
        headers = self._parse_headers(lines[1:])

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            body=body,
        )

    def _split_head(self, data: bytes) -> tuple[bytes, Optional[bytes]]:
        """
        Split at the first empty line.

        Returns (header bytes, body). The body is None when there is no
        empty line or nothing follows it.
        """
        best_index = -1
        best_length = 0
        for terminator in self.HEADER_TERMINATORS:
            index = data.find(terminator)
            if index != -1 and (best_index == -1 or index < best_index):
                best_index = index
                best_length = len(terminator)

        if best_index == -1:
            return data, None

        body = data[best_index + best_length:]
        return data[:best_index], body or None

    def _parse_start_line(self, line: str) -> tuple[Method, str, str]:
        """
        Parse ``METHOD SP PATH SP VERSION``.

        The token count is checked before the method, so ``FOO /`` is
        malformed rather than unsupported.
        """
        tokens = line.split()
        if len(tokens) != 3:
            raise MalformedRequestError(f"Invalid start line: {line!r}")

        method_token, path, version = tokens

        if not path.startswith("/"):
            raise MalformedRequestError(f"Invalid request path: {path!r}")

        method = self.SUPPORTED_METHODS.get(method_token)
        if method is None:
            raise UnsupportedMethodError(method_token)

        return method, path, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse ``Name: Value`` lines.

        Split on the first colon only, so ``Host: localhost:4221`` keeps
        its port. Lines without a colon are skipped. A repeated name keeps
        the last value.
        """
        headers: Dict[str, str] = {}
        for line in lines:
            name, sep, value = line.partition(":")
            if not sep:
                continue  # lenient: drop lines that are not headers
            headers[name.strip()] = value.strip()
        return headers


def parse_request(
    data: Union[bytes, str],
    max_size: Optional[int] = None,
) -> HTTPRequest:
    """Parse with a throwaway RequestParser."""
    return RequestParser(max_request_size=max_size).parse(data)
