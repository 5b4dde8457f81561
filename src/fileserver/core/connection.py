"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

This module wraps an accepted client socket with the small API the
connection handler needs: read one line, send bytes, close properly.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does NOT preserve message boundaries. A client that sends

    "GET /index.html HTTP/1.0\r\n"

may arrive as ANY split of those bytes:

    recv() → "GET /ind"
    recv() → "ex.html HTTP/1.0\r\n"

So we buffer received data and look for the delimiter we care about.
For this server that delimiter is the first LF: everything up to it is
the request line, everything after it is never looked at.

=============================================================================
ONE EXCHANGE PER CONNECTION (HTTP/1.0)
=============================================================================

    ┌─────────────────────────────────────────────────────────────────┐
    │                                                                  │
    │   TCP Connect → Send request line → Receive response → Close    │
    │                                                                  │
    │   No keep-alive: the server closes after every response, and    │
    │   the close is what tells the client the body has ended.        │
    │                                                                  │
    └─────────────────────────────────────────────────────────────────┘

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    ACCEPTED ──► READING_REQUEST ──► DISPATCHING ──► WRITING_RESPONSE
        │               │                 │                  │
        └───────────────┴─────────────────┴──────────────────┴──► CLOSED

CLOSED is the only terminal state and every path reaches it, including
errors while reading or writing.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Used for logging and to make close() idempotent.
    """
    ACCEPTED = "accepted"                  # Just accepted, nothing read yet
    READING_REQUEST = "reading_request"    # Reading the request line
    DISPATCHING = "dispatching"            # Request parsed, resolving path
    WRITING_RESPONSE = "writing_response"  # Sending response bytes
    CLOSED = "closed"                      # Socket released


class LineTooLongError(ValueError):
    """Raised when the request line exceeds the configured limit."""


@dataclass
class Connection:
    """
    Represents one accepted client connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. BUFFERED LINE READING                                            │
    │     └── recv() until the first LF (or EOF)                           │
    │     └── Bytes after the LF stay in _buffer, unread                   │
    │                                                                      │
    │  2. FULL WRITES                                                      │
    │     └── sendall(), never a partial send()                            │
    │                                                                      │
    │  3. STATE TRACKING                                                   │
    │     └── Which phase of the exchange we're in                         │
    │                                                                      │
    │  4. GRACEFUL, EXACTLY-ONCE CLOSE                                     │
    │     └── FIN first, drain, then release the descriptor                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    There is deliberately no read timeout on the request: a client that
    connects and never sends a line holds the (single-threaded) server.

    Attributes:
        socket: The client socket.
        address: Client's address (a (host, port) tuple for TCP).
        id: Short connection identifier for log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
    """

    # Required parameters
    socket: socket.socket
    address: tuple = ("-", 0)

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.ACCEPTED
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 4096           # How much to read at once
    max_line_length: int = 8192       # Longest request line we accept
    linger_timeout: float = 0.5       # How long close() drains for

    # Internal state (not shown in repr for cleaner logs)
    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        """
        Put the socket in plain blocking mode.

        Sockets accepted from a listener with a timeout could otherwise
        inherit it, depending on the platform.
        """
        self.socket.settimeout(None)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        """Get the client IP address, or "-" for non-IP sockets."""
        if isinstance(self.address, tuple) and self.address:
            return str(self.address[0])
        return "-"

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def is_closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # READING
    # =========================================================================

    def read_line(self) -> bytes:
        """
        Read exactly one line from the socket.

        ┌─────────────────────────────────────────────────────────────────┐
        │                    read_line() Flow                              │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │   while no LF in buffer:                                         │
        │       recv() → buffer                                            │
        │       EOF?          → return what we have (may be b"")           │
        │       too long?     → LineTooLongError                           │
        │                                                                  │
        │   split at the first LF                                          │
        │   return the line (LF included), keep the rest unread            │
        │                                                                  │
        └─────────────────────────────────────────────────────────────────┘

        Returns:
            The line including its terminator. A line cut short by EOF is
            returned without one; b"" means the client sent nothing.

        Raises:
            LineTooLongError: If no LF shows up within max_line_length bytes.
            OSError: If the socket fails.
        """
        self.state = ConnectionState.READING_REQUEST

        while b"\n" not in self._buffer:
            if len(self._buffer) > self.max_line_length:
                raise LineTooLongError(
                    f"Request line longer than {self.max_line_length} bytes"
                )

            chunk = self.socket.recv(self.buffer_size)
            if not chunk:
                # EOF before LF: use what we got
                line, self._buffer = self._buffer, b""
                return line

            self._buffer += chunk

        end = self._buffer.index(b"\n") + 1
        if end > self.max_line_length + 1:
            raise LineTooLongError(
                f"Request line longer than {self.max_line_length} bytes"
            )

        line, self._buffer = self._buffer[:end], self._buffer[end:]
        return line

    # =========================================================================
    # WRITING
    # =========================================================================

    def send(self, data: bytes) -> None:
        """
        Send all of ``data`` to the client.

        sendall() blocks until every byte is handed to the kernel, so
        there is nothing left to flush afterwards.

        Raises:
            OSError: If the client went away (BrokenPipeError,
                     ConnectionResetError, ...).
        """
        self.state = ConnectionState.WRITING_RESPONSE
        self.socket.sendall(data)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully. Safe to call more than once; the
        socket is only closed the first time.

        ┌─────────────────────────────────────────────────────────────────┐
        │                    TCP Close Sequence                            │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │   1. shutdown(SHUT_WR)   FIN → client sees end of body           │
        │   2. drain               read (and drop) any unread request      │
        │                          bytes for up to linger_timeout          │
        │   3. close()             release the file descriptor             │
        │                                                                  │
        └─────────────────────────────────────────────────────────────────┘

        Step 2 matters here more than usual: we only ever read the request
        line, so headers are usually still sitting in the kernel buffer.
        Closing with unread data makes the kernel send RST instead of FIN,
        and the client can lose the response it hasn't read yet.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected, that's fine

        deadline = time.monotonic() + self.linger_timeout
        try:
            # The whole drain is bounded, not each recv: a client that keeps
            # sending must not hold the connection open
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                if not self.socket.recv(self.buffer_size):
                    break
        except OSError:
            pass  # Includes socket.timeout; we're closing anyway

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.2f}ms")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows ``with conn:`` for automatic cleanup:

            with conn:
                line = conn.read_line()
                conn.send(response)
            # Connection closed here, even if an exception was raised
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
