"""
=============================================================================
CONNECTION WRAPPER
=============================================================================

Wraps one accepted client socket for its whole (short) life:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED             │
    │            │                                                         │
    │            └─ exactly one recv(buffer_size)                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no keep-alive and no read loop. Whatever the first recv()
returns is the request; a request larger than buffer_size is truncated.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Lifecycle states, used in debug logs."""

    NEW = "new"                # Accepted, nothing read yet
    READING = "reading"        # Waiting on recv()
    PROCESSING = "processing"  # Parse + dispatch
    WRITING = "writing"        # sendall() in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket:      The accepted client socket.
        address:     Client (ip, port).
        id:          Short random id for correlating log lines.
        buffer_size: Size of the one read.
        timeout:     Socket timeout for the read; None blocks.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 4096
    timeout: Optional[float] = None

    def __post_init__(self):
        self.socket.settimeout(self.timeout)

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    def read_request(self) -> Optional[bytes]:
        """
        Perform the single bounded read.

        Returns:
            The bytes received, or None if the client closed the connection
            without sending anything.

        Raises:
            TimeoutError: ``timeout`` elapsed with no data.
        """
        self.state = ConnectionState.READING
        try:
            data = self.socket.recv(self.buffer_size)
        except socket.timeout:
            raise TimeoutError("Request read timeout") from None
        except (ConnectionResetError, BrokenPipeError):
            data = b""

        if not data:
            logger.debug(f"[{self.id}] Client closed before sending a request")
            return None

        if len(data) == self.buffer_size:
            logger.debug(f"[{self.id}] Read filled the buffer; request may be truncated")

        self.state = ConnectionState.PROCESSING
        return data

    def send_response(self, data: bytes) -> bool:
        """
        Send the whole response with sendall().

        Returns:
            True on success, False if the client went away.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def close(self) -> None:
        """Shut down and close the socket. Safe to call twice."""
        if self.state == ConnectionState.CLOSED:
            return
        try:
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # peer already gone
        try:
            self.socket.close()
        except OSError:
            pass
        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Closed after {self.age * 1000:.1f}ms")

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
