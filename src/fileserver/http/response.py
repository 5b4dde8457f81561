"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds the two HTTP/1.0 responses the file server can send.

=============================================================================
RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP/1.0 RESPONSE STRUCTURE                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.0 200 OK\r\n              ← Status line                   │
    │    Server: FileServer\r\n           ← The only header we send       │
    │    \r\n                             ← Empty line (separator)        │
    │    <file content>                   ← Body, byte for byte           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The exact bytes on the wire:

    200: "HTTP/1.0 200 OK\r\nServer: FileServer\r\n\r\n" + <content>
    404: "HTTP/1.0 404 Not Found\r\nServer: FileServer\r\n\r\n"

=============================================================================
WHERE DOES THE BODY END?
=============================================================================

There is no Content-Length header. In HTTP/1.0 a server may signal the end
of the body by closing the connection, and every connection here carries
exactly one exchange:

    Server                                   Client
       │   status line + header + body ───►    │
       │   FIN ────────────────────────────►   │  recv() returns b""
       │                                       │  → body is complete

The client reads until EOF and everything after the blank line is the body.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .status_codes import HTTPStatus


HTTP_VERSION = "HTTP/1.0"
SERVER_NAME = "FileServer"

Content = Union[bytes, str]


def _encode_body(body: Optional[Content]) -> bytes:
    """Encode a body to bytes. Strings become UTF-8, bytes pass through."""
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    A plain data container; ``to_bytes()`` does the serialization.

        Handler builds          to_bytes()              Connection sends
        HTTPResponse    ─────►  serializes    ─────►    raw bytes
    """

    status: HTTPStatus = HTTPStatus.OK
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=lambda: {"Server": SERVER_NAME})
    version: str = HTTP_VERSION

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.0 200 OK"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for ``socket.sendall()``.

        Headers are written in insertion order, each as ``Name: value``,
        followed by the empty separator line and the body verbatim.
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        head = "\r\n".join(lines).encode("latin-1") + b"\r\n"
        return head + self.body


def build_response(status: Union[HTTPStatus, int], body: Optional[Content] = None) -> bytes:
    """
    Build the literal bytes of a response.

    This is a pure function: same input, same bytes, no I/O.

    Args:
        status: 200 or 404. Anything else raises ValueError.
        body: Content for a 200 response. Strings are UTF-8 encoded,
              bytes are emitted unchanged. Must be empty for 404.

    Returns:
        Complete response bytes.

    Raises:
        ValueError: For an unsupported status or a body on a 404.
    """
    status = HTTPStatus(status)

    if status == HTTPStatus.NOT_FOUND:
        if body:
            raise ValueError("404 responses carry no body")
        return not_found().to_bytes()

    return ok(body).to_bytes()


def ok(content: Optional[Content] = None) -> HTTPResponse:
    """Create a 200 OK response whose body is exactly ``content``."""
    return HTTPResponse(status=HTTPStatus.OK, body=_encode_body(content))


def not_found() -> HTTPResponse:
    """Create a 404 Not Found response with an empty body."""
    return HTTPResponse(status=HTTPStatus.NOT_FOUND)
