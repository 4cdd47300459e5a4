"""
Integration tests: a real server on a loopback socket.
"""

import socket
import threading
import time
from pathlib import Path

from minihttp import HTTPServer, ServerConfig


class TestSocketRoundTrip:
    """One request per connection, answered and closed."""

    def test_root(self, test_server):
        assert test_server.send(b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n") == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_echo(self, test_server):
        response = test_server.send(b"GET /echo/abc HTTP/1.1\r\n\r\n")

        assert response == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"abc"
        )

    def test_user_agent(self, test_server, sample_get_request: bytes):
        response = test_server.send(sample_get_request)

        assert response.startswith(b"HTTP/1.1 200 OK\r\n")
        assert response.endswith(b"\r\n\r\npytest/8.0")

    def test_unknown_path(self, test_server):
        assert test_server.send(b"GET /nope HTTP/1.1\r\n\r\n") == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_malformed(self, test_server):
        assert test_server.send(b"hello\r\n\r\n") == b"HTTP/1.1 400 Bad Request\r\n\r\n"

    def test_unsupported_method(self, test_server):
        assert test_server.send(b"DELETE / HTTP/1.1\r\n\r\n") == b"HTTP/1.1 501 Not Implemented\r\n\r\n"

    def test_file_round_trip(self, test_server, sample_post_request: bytes, tmp_path: Path):
        posted = test_server.send(sample_post_request)
        fetched = test_server.send(b"GET /files/notes.txt HTTP/1.1\r\n\r\n")

        assert posted == b"HTTP/1.1 201 Created\r\n\r\n"
        assert (tmp_path / "notes.txt").read_bytes() == b"hello world"
        assert fetched.endswith(b"\r\n\r\nhello world")
        assert b"Content-Type: application/octet-stream\r\n" in fetched

    def test_existing_file(self, test_server, tmp_path: Path):
        (tmp_path / "data.bin").write_bytes(b"\x00\x01\x02")

        response = test_server.send(b"GET /files/data.bin HTTP/1.1\r\n\r\n")

        assert response.endswith(b"Content-Length: 3\r\n\r\n\x00\x01\x02")

    def test_missing_file(self, test_server):
        assert test_server.send(b"GET /files/missing HTTP/1.1\r\n\r\n") == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_client_closes_without_sending(self, test_server):
        """A silent client must not take the server down."""
        with socket.create_connection(test_server.address, timeout=5.0):
            pass

        assert test_server.send(b"GET / HTTP/1.1\r\n\r\n") == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_concurrent_connections(self, test_server):
        """Each connection is handled on its own thread."""
        results = {}

        def fetch(i: int):
            results[i] = test_server.send(f"GET /echo/{i} HTTP/1.1\r\n\r\n".encode())

        threads = [threading.Thread(target=fetch, args=(i,)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10.0)

        for i in range(10):
            assert results[i].endswith(f"\r\n\r\n{i}".encode())


class TestServerLifecycle:
    def test_binds_configured_port(self, free_port: int, tmp_path: Path):
        server = HTTPServer(ServerConfig(port=free_port, directory=str(tmp_path)))
        thread = threading.Thread(target=server.run, kwargs={"setup_logging": False}, daemon=True)
        thread.start()

        try:
            assert server.wait_until_ready(timeout=5.0)
            assert server.is_running
            assert server.address == ("127.0.0.1", free_port)
        finally:
            server.shutdown()
            thread.join(timeout=5.0)

        assert not thread.is_alive()
        assert not server.is_running

    def test_run_waits_for_in_flight_workers(self, tmp_path: Path):
        """shutdown() during a slow request: run() returns only after it is answered."""
        started = threading.Event()
        finished = []

        class SlowServer(HTTPServer):
            def _process_connection(self, conn):
                started.set()
                time.sleep(0.5)
                super()._process_connection(conn)
                finished.append(conn.id)

        server = SlowServer(ServerConfig(port=0, directory=str(tmp_path)))
        thread = threading.Thread(target=server.run, kwargs={"setup_logging": False}, daemon=True)
        thread.start()
        assert server.wait_until_ready(timeout=5.0)

        with socket.create_connection(server.address, timeout=5.0) as client:
            client.sendall(b"GET / HTTP/1.1\r\n\r\n")
            assert started.wait(timeout=5.0)

            server.shutdown()
            thread.join(timeout=10.0)

            assert not thread.is_alive()
            assert len(finished) == 1
            assert client.recv(4096) == b"HTTP/1.1 200 OK\r\n\r\n"
