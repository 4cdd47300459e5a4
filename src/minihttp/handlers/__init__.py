"""
=============================================================================
REQUEST HANDLERS
=============================================================================

Every handler has the same shape:

    def handler(request: HTTPRequest, context: RouteContext) -> HTTPResponse

``context`` carries the serve directory, the file capabilities and the
parameters captured from the route pattern. Handlers return a response
for every outcome; they do not raise for client mistakes.

    basic.py   GET /, GET /user-agent, GET /echo/{text}
    files.py   GET /files/{name}, POST /files/{name}

=============================================================================
"""

from .basic import echo, root, user_agent
from .files import get_file, post_file

__all__ = [
    "root",
    "user_agent",
    "echo",
    "get_file",
    "post_file",
]
