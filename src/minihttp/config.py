"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All settings live in one dataclass. Three ways to fill it:

    ServerConfig(port=8080, directory="/srv/files")    # in code
    ServerConfig.from_env()                           # MINIHTTP_* variables
    python -m minihttp --port 8080 --directory ...    # CLI (__main__.py)

The config is read-only once the server starts; every worker thread reads
the same instance.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK
    - host, port, backlog

    REQUEST READING
    - buffer_size, timeout

    SHUTDOWN
    - shutdown_timeout

    FILES
    - directory

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """Address to bind. Use "0.0.0.0" inside containers."""

    port: int = 4221
    """TCP port to listen on. 0 lets the OS pick a free one."""

    backlog: int = 128
    """Pending connections the OS queues before refusing new ones."""

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST READING
    # ─────────────────────────────────────────────────────────────────────

    buffer_size: int = 4096
    """
    Size of the single read performed per connection.
    Anything the client sends beyond this is never seen.
    """

    timeout: Optional[float] = None
    """
    Socket timeout for the read, in seconds.
    None = block until the client sends something.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SHUTDOWN
    # ─────────────────────────────────────────────────────────────────────

    shutdown_timeout: float = 30.0
    """
    Seconds run() waits for in-flight connections after shutdown().
    Workers still running after that are abandoned when the process exits.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    directory: str = "public"
    """Root directory that /files/{name} is resolved against."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    log_format: str = "text"
    """Access log format: 'text' (one line per request) or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        MINIHTTP_HOST         Bind address (default: 127.0.0.1)
        MINIHTTP_PORT         Port (default: 4221)
        MINIHTTP_DIRECTORY    Serve directory (default: public)
        MINIHTTP_BUFFER_SIZE  Read size in bytes (default: 4096)
        MINIHTTP_TIMEOUT      Read timeout in seconds (default: none)
        MINIHTTP_LOG_LEVEL    Logging level (default: INFO)
        MINIHTTP_LOG_FORMAT   text or json (default: text)

        =====================================================================
        """
        timeout = os.getenv("MINIHTTP_TIMEOUT")
        return cls(
            host=os.getenv("MINIHTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("MINIHTTP_PORT", "4221")),
            directory=os.getenv("MINIHTTP_DIRECTORY", "public"),
            buffer_size=int(os.getenv("MINIHTTP_BUFFER_SIZE", "4096")),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("MINIHTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("MINIHTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Check settings at startup, not on the first request.

        Raises:
            ValueError: On the first invalid setting found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 64:
            raise ValueError("buffer_size must be >= 64")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.shutdown_timeout < 0:
            raise ValueError("shutdown_timeout must be >= 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}")
