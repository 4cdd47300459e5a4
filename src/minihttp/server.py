"""
=============================================================================
HTTP SERVER
=============================================================================

Glues the pieces together. For every accepted connection:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  worker thread (one per connection)                                  │
    │                                                                      │
    │   conn.read_request()        one bounded read                        │
    │        │                                                             │
    │   RequestParser.parse()      HTTPParseError → 400 / 501              │
    │        │                                                             │
    │   routes.dispatch()          unexpected exception → 500              │
    │        │                                                             │
    │   response.to_wire()                                                 │
    │        │                                                             │
    │   conn.send_response()  →  access log  →  conn.close()               │
    └─────────────────────────────────────────────────────────────────────┘

Workers share nothing but the read-only config and the stateless file
adapters, so they need no locks. After shutdown(), run() waits up to
config.shutdown_timeout seconds for workers still writing a response.

=============================================================================
"""

import logging
import threading
import time
from typing import List, Optional, Tuple

from .access_log import RequestLog, log_request
from .config import ServerConfig
from .core import Connection, SocketServer
from .fileaccess import DiskFileReader, DiskFileWriter, FileReader, FileWriter
from .http.request import HTTPParseError, HTTPRequest, RequestParser
from .http.response import HTTPResponse, from_status, internal_error
from .routes import dispatch

logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Thread-per-connection HTTP/1.1 server.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(port=4221, directory="/tmp/files"))
        server.run()  # blocks until Ctrl+C

    Tests can inject in-memory file capabilities:

        store = MemoryFileStore()
        server = HTTPServer(config, reader=store.reader(), writer=store.writer())

    =========================================================================
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        reader: Optional[FileReader] = None,
        writer: Optional[FileWriter] = None,
    ):
        """
        Args:
            config: Server configuration. Defaults to ServerConfig().
            reader: File reading capability. Defaults to disk access.
            writer: File writing capability. Defaults to disk access.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # fail fast on bad settings

        self.reader = reader or DiskFileReader()
        self.writer = writer or DiskFileWriter()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(max_request_size=self.config.buffer_size)
        self._running = False

        # Only touched from the accept loop thread and, after it ends, run()
        self._workers: List[threading.Thread] = []

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port) once running."""
        return self._socket_server.address

    def run(self, setup_logging: bool = True) -> None:
        """
        Start the server (blocking).

        Args:
            setup_logging: Configure the root logger from config.log_level.
                           Pass False when the caller owns logging.
        """
        if setup_logging:
            self._setup_logging()

        self._running = True
        logger.info(
            f"Starting HTTP server on {self.config.host}:{self.config.port}, "
            f"serving files from {self.config.directory!r}"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            self._drain_workers(self.config.shutdown_timeout)
            logger.info("Server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def shutdown(self) -> None:
        """Stop accepting connections. run() then waits for in-flight workers."""
        self._socket_server.shutdown()

    def _setup_logging(self) -> None:
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("minihttp").setLevel(level)

    def _drain_workers(self, timeout: float) -> None:
        """Join live workers, sharing one deadline between them."""
        deadline = time.time() + timeout
        for worker in self._workers:
            worker.join(max(0.0, deadline - time.time()))

        abandoned = [w.name for w in self._workers if w.is_alive()]
        if abandoned:
            logger.warning(f"{len(abandoned)} connection(s) still busy after {timeout}s: {abandoned}")
        self._workers = []

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection) -> None:
        """Called by SocketServer in the accept loop: spawn the worker."""
        self._workers = [w for w in self._workers if w.is_alive()]
        worker = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        self._workers.append(worker)
        worker.start()

    def _process_connection(self, conn: Connection) -> None:
        """Worker body: read, handle, write, close."""
        with conn:
            try:
                raw_request = conn.read_request()
            except TimeoutError:
                logger.info(f"[{conn.id}] Read timed out, closing")
                return
            except OSError as e:
                logger.warning(f"[{conn.id}] Read failed: {e}")
                return

            if raw_request is None:
                return

            start_time = time.time()
            request, response = self.handle_request_bytes(raw_request)
            conn.send_response(response.to_wire())
            duration_ms = (time.time() - start_time) * 1000

            log_request(
                RequestLog.build(conn.address, request, response, duration_ms),
                self.config.log_format,
            )

    def handle_request_bytes(self, raw: bytes) -> Tuple[Optional[HTTPRequest], HTTPResponse]:
        """
        Parse and dispatch one raw request. No socket involved.

        Returns:
            (request, response). ``request`` is None when parsing failed.
        """
        try:
            request = self._parser.parse(raw)
        except HTTPParseError as e:
            logger.info(f"Rejected request ({int(e.status_code)}): {e}")
            return None, from_status(e.status_code)

        try:
            response = dispatch(request, self.config.directory, self.reader, self.writer)
        except Exception as e:
            logger.exception(f"Handler error for {request.method.value} {request.path}: {e}")
            response = internal_error()

        return request, response
