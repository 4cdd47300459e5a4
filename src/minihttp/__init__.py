"""
=============================================================================
MINIHTTP - Minimal HTTP/1.1 File Server
=============================================================================

A small HTTP/1.1 server on raw sockets. It parses one request per
connection, routes it through a fixed table and writes back one response.

=============================================================================
ROUTES
=============================================================================

    GET  /               200, empty body
    GET  /user-agent     200, echoes the User-Agent header (400 if missing)
    GET  /echo/{text}    200, echoes {text}
    GET  /files/{name}   200 with file contents, 404 if unreadable
    POST /files/{name}   201 after writing the body, 404 if unwritable

    Other GET/POST paths → 404. Other methods → 501.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m minihttp)
    ├── server.py            # HTTPServer: thread per connection
    ├── config.py            # ServerConfig dataclass
    ├── routes.py            # Routing table + dispatch()
    ├── fileaccess.py        # FileReader / FileWriter capabilities
    ├── access_log.py        # Per-request access log entries
    ├── core/
    │   ├── socket_server.py # Listening socket, accept loop
    │   └── connection.py    # One-read / one-write client connection
    ├── http/
    │   ├── request.py       # Request parser
    │   ├── response.py      # Response model + serializer
    │   ├── router.py        # Routing engine
    │   └── status_codes.py  # HTTPStatus enum
    └── handlers/
        ├── basic.py         # /, /user-agent, /echo
        └── files.py         # /files

=============================================================================
QUICK START
=============================================================================

    from minihttp import HTTPServer, ServerConfig

    HTTPServer(ServerConfig(directory="/tmp/files")).run()

Or from a shell:

    python -m minihttp --directory /tmp/files

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig
from .routes import dispatch

__all__ = ["HTTPServer", "ServerConfig", "dispatch", "__version__"]
