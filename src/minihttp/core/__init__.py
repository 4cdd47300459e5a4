"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking plumbing under the HTTP layer:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  SOCKET SERVER                                                       │
    │  • Creates the listening socket and runs the accept() loop          │
    │  • Wraps each client socket in a Connection                         │
    │  • Handles SIGINT/SIGTERM for graceful shutdown                     │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ one Connection per client
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │  CONNECTION                                                          │
    │  • One bounded read, one sendall(), then close                      │
    │  • Tracks state for debug logging                                   │
    └─────────────────────────────────────────────────────────────────────┘

HTTPServer (server.py) spawns one worker thread per Connection.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # Listening socket + accept loop
    "Connection",       # Client socket wrapper
    "ConnectionState",  # Connection lifecycle states
]
