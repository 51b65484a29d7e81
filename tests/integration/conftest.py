from __future__ import annotations

import json
import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import TYPE_CHECKING
from urllib.parse import parse_qs, urlparse

import pytest

if TYPE_CHECKING:
    from collections.abc import Generator


class _Handler(BaseHTTPRequestHandler):
    """Small HTTP API used by the integration tests.

    Routes:
        - ``/json``: echo of the method, query and headers as JSON
        - ``/echo``: echo of the request body with its content type
        - ``/status/<code>``: empty response with the given status
        - ``/flaky/<key>/<failures>``: status 500 for the first
          ``failures`` requests of ``key``, then 200
        - ``/slow/<ms>``: response delayed by ``ms`` milliseconds
        - ``/chunks/<n>``: chunked body with ``n`` lines
    """

    protocol_version = "HTTP/1.1"
    counters: dict[str, int] = {}
    lock = threading.Lock()

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        pass

    def _send(self, status: int, body: bytes = b"", content_type: str = "text/plain") -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _read_body(self) -> bytes:
        length = int(self.headers.get("Content-Length", 0))
        return self.rfile.read(length) if length else b""

    def _route(self) -> None:
        url = urlparse(self.path)
        parts = url.path.strip("/").split("/")
        body = self._read_body()
        if parts[0] == "json":
            payload = {
                "method": self.command,
                "query": {key: values[0] for key, values in parse_qs(url.query).items()},
                "headers": {key.lower(): value for key, value in self.headers.items()},
            }
            self._send(200, json.dumps(payload).encode(), "application/json")
        elif parts[0] == "echo":
            self._send(200, body, self.headers.get("Content-Type", "text/plain"))
        elif parts[0] == "status":
            self._send(int(parts[1]), f"status {parts[1]}".encode())
        elif parts[0] == "flaky":
            with self.lock:
                count = self.counters.get(parts[1], 0)
                self.counters[parts[1]] = count + 1
            self._send(500 if count < int(parts[2]) else 200, f"attempt {count + 1}".encode())
        elif parts[0] == "slow":
            time.sleep(int(parts[1]) / 1000)
            self._send(200, b"slow")
        elif parts[0] == "chunks":
            self.send_response(200)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
            self.send_header("Transfer-Encoding", "chunked")
            self.end_headers()
            for index in range(int(parts[1])):
                chunk = f"line {index}\n".encode()
                self.wfile.write(f"{len(chunk):x}\r\n".encode() + chunk + b"\r\n")
                self.wfile.flush()
            self.wfile.write(b"0\r\n\r\n")
        else:
            self._send(404, b"not found")

    do_GET = _route  # noqa: N815
    do_POST = _route  # noqa: N815
    do_PUT = _route  # noqa: N815


class _Server(ThreadingHTTPServer):
    daemon_threads = True

    def handle_error(self, request: object, client_address: object) -> None:
        # Clients giving up on slow responses close their connection early
        pass


@pytest.fixture(scope="module")
def server_url() -> Generator[str, None, None]:
    """Start a local HTTP server for the duration of a test module."""
    server = _Server(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def closed_port_url() -> str:
    """Return the URL of a local port nothing listens on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"
