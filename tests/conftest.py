"""
pytest configuration and fixtures.
"""

import socket
import threading
import time
from typing import Generator, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fileserver import InMemoryFilesystem, Listener, create_listening_socket


OK_PREFIX = b"HTTP/1.0 200 OK\r\nServer: FileServer\r\n\r\n"
NOT_FOUND = b"HTTP/1.0 404 Not Found\r\nServer: FileServer\r\n\r\n"


@pytest.fixture
def resolver() -> InMemoryFilesystem:
    """In-memory filesystem with a couple of files."""
    return InMemoryFilesystem({
        "/index.html": "hello",
        "/docs/readme.txt": b"read me\r\n\x00binary\xff",
    })


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


def send_request(port: int, raw: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes to the server and read the response until EOF."""
    with socket.create_connection(('127.0.0.1', port), timeout=timeout) as s:
        s.sendall(raw)
        chunks = []
        while True:
            chunk = s.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class TestServer:
    """Test server helper that runs a Listener in a background thread."""

    __test__ = False  # Not a test class, despite the name

    def __init__(self, listener: Listener):
        self.listener = listener
        self.port = listener.address[1]
        self.error: Optional[BaseException] = None
        self._thread: Optional[threading.Thread] = None

    def start(self):
        """Start the accept loop in a background thread."""
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self):
        try:
            self.listener.run()
        except BaseException as e:
            self.error = e

    def request(self, raw: bytes) -> bytes:
        return send_request(self.port, raw)

    def stop(self, timeout: float = 5.0):
        """Close the listening socket and wait for the loop to exit."""
        self.listener.close()
        self.join(timeout)

    def join(self, timeout: float = 5.0):
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


@pytest.fixture
def test_server(resolver: InMemoryFilesystem) -> Generator[TestServer, None, None]:
    """A running listener on an ephemeral port, serving ``resolver``."""
    sock = create_listening_socket("127.0.0.1", 0)
    listener = Listener(sock, resolver, poll_interval=0.1, linger_timeout=0.2)

    srv = TestServer(listener)
    srv.start()

    yield srv

    srv.stop()


def wait_until(predicate, timeout: float = 5.0, interval: float = 0.01) -> bool:
    """Poll ``predicate`` until it returns True or ``timeout`` expires."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


class FakeSocket:
    """
    In-memory stand-in for a connected client socket.

    ``incoming`` is what the client "sent"; recv() hands it out at most
    ``chunk_size`` bytes at a time, then returns b"" (EOF).
    """

    def __init__(
        self,
        incoming: bytes = b"",
        chunk_size: int = 4096,
        send_error: Optional[OSError] = None,
        recv_error: Optional[OSError] = None,
    ):
        self._incoming = incoming
        self.chunk_size = chunk_size
        self.send_error = send_error
        self.recv_error = recv_error
        self.sent = b""
        self.recv_calls = 0
        self.close_calls = 0
        self.shutdown_calls = []
        self.timeouts = []

    def recv(self, bufsize: int) -> bytes:
        self.recv_calls += 1
        if self.recv_error is not None:
            raise self.recv_error
        n = min(bufsize, self.chunk_size)
        data, self._incoming = self._incoming[:n], self._incoming[n:]
        return data

    def sendall(self, data: bytes) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent += data

    def shutdown(self, how: int) -> None:
        self.shutdown_calls.append(how)

    def settimeout(self, value) -> None:
        self.timeouts.append(value)

    def close(self) -> None:
        self.close_calls += 1

    @property
    def unread(self) -> bytes:
        return self._incoming
