"""
=============================================================================
FILE HANDLERS
=============================================================================

    GET  /files/{name}   read serve_dir/name through the FileReader
    POST /files/{name}   write the request body to serve_dir/name through
                         the FileWriter

=============================================================================
STATUS MAPPING
=============================================================================

    ┌─────────────────────────────────────────────┬───────────────────────┐
    │ Situation                                   │ Response              │
    ├─────────────────────────────────────────────┼───────────────────────┤
    │ empty name ("/files/")                      │ 400 Bad Request       │
    │ absolute name or ".." segment               │ 400 Bad Request       │
    │ POST without body                           │ 400 Bad Request       │
    │ POST with missing / non-numeric length      │ 400 Bad Request       │
    │ POST with length larger than received body  │ 400 Bad Request       │
    │ storage raised OSError (any cause)          │ 404 Not Found         │
    │ GET succeeded                               │ 200 OK                │
    │ POST succeeded                              │ 201 Created           │
    └─────────────────────────────────────────────┴───────────────────────┘

The client cannot tell "missing" from "permission denied" or a disk
error; the cause is only visible in the server log.

The ".." / absolute-name row is checked before any storage call. Every
other non-empty name goes to the reader or writer as
join(serve_dir, name), with no further normalization. A plain join
would otherwise let "/files/../x" address a file outside serve_dir.

=============================================================================
"""

import logging
import os
from typing import Optional

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, bad_request, created, not_found, ok, OCTET_STREAM
from ..http.router import RouteContext

logger = logging.getLogger(__name__)


def get_file(request: HTTPRequest, context: RouteContext) -> HTTPResponse:
    """GET /files/{name} → file contents as application/octet-stream."""
    path = _resolve(context)
    if path is None:
        return bad_request()

    try:
        contents = context.reader.read(path)
    except OSError as e:
        logger.warning(f"Read failed for {path}: {type(e).__name__}: {e}")
        return not_found()

    return ok(contents, content_type=OCTET_STREAM)


def post_file(request: HTTPRequest, context: RouteContext) -> HTTPResponse:
    """
    POST /files/{name} → store exactly Content-Length bytes of the body.

    The body may carry trailing bytes beyond Content-Length; only the
    declared length is written.
    """
    path = _resolve(context)
    if path is None:
        return bad_request()

    if request.body is None:
        logger.debug(f"POST {request.path} without a body")
        return bad_request()

    length = request.content_length
    if length is None:
        logger.debug(f"POST {request.path} with missing or invalid Content-Length")
        return bad_request()

    if length > len(request.body):
        # Body was cut short by the single bounded read
        logger.warning(
            f"POST {request.path}: Content-Length {length} exceeds "
            f"{len(request.body)} received bytes"
        )
        return bad_request()

    try:
        context.writer.write(path, request.body[:length])
    except OSError as e:
        logger.warning(f"Write failed for {path}: {type(e).__name__}: {e}")
        return not_found()

    return created()


def _resolve(context: RouteContext) -> Optional[str]:
    """
    Join the captured file name onto the serve directory.

    Returns None for names that are empty, absolute, or contain a ".."
    segment, so nothing outside serve_dir is reachable.
    """
    name = context.params.get("name", "")
    if not name:
        return None

    segments = name.replace("\\", "/").split("/")
    if name.startswith("/") or os.path.isabs(name) or ".." in segments:
        logger.warning(f"Rejected file name outside serve directory: {name!r}")
        return None

    return os.path.join(context.serve_dir, name)
