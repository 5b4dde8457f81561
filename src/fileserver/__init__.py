"""
=============================================================================
FILESERVER - A Minimal HTTP/1.0 File Server on Raw Sockets
=============================================================================

Accepts TCP connections one at a time, reads a single request line,
looks the path up in a pluggable read-only store, and writes back a
minimal HTTP/1.0 response.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       FILESERVER ARCHITECTURE                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Listener.accept()                                                  │
    │        │                                                             │
    │        ▼                                                             │
    │   ConnectionHandler ── read one line ── "GET /index.html HTTP/1.0"  │
    │        │                                                             │
    │        ├── GET? ──► PathResolver.lookup("/index.html")              │
    │        │                 │                                           │
    │        │                 ├── content ──► 200 + content              │
    │        │                 └── None    ──► 404                        │
    │        │                                                             │
    │        ├── anything else ──────────────► 404                        │
    │        │                                                             │
    │        └── write, close ── back to accept()                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT IT DOESN'T DO
=============================================================================

No keep-alive, no chunked transfer, no request headers or bodies, no
concurrency, no TLS, no auth, no caching. One connection, one exchange,
then close.

=============================================================================
QUICK START
=============================================================================

    from fileserver import FileServer, InMemoryFilesystem, create_listening_socket

    sock = create_listening_socket("127.0.0.1", 8080)
    FileServer().run(sock, InMemoryFilesystem({"/index.html": "hello"}))

    # $ curl -0 http://127.0.0.1:8080/index.html
    # hello

Or from the command line:

    python -m fileserver --root ./public --port 8080

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import FileServer, setup_logging
from .access_log import AccessLog, RequestLog
from .core import (
    Connection,
    ConnectionState,
    ConnectionHandler,
    Listener,
    create_listening_socket,
    handle_connection,
)
from .http import HTTPStatus, HTTPResponse, Request, build_response, parse_request_line
from .storage import PathResolver, InMemoryFilesystem, DirectoryFilesystem, normalize_path

__all__ = [
    "__version__",

    # Server
    "FileServer",
    "ServerConfig",
    "setup_logging",

    # Logging
    "AccessLog",
    "RequestLog",

    # Core
    "Connection",
    "ConnectionState",
    "ConnectionHandler",
    "Listener",
    "create_listening_socket",
    "handle_connection",

    # HTTP
    "HTTPStatus",
    "HTTPResponse",
    "Request",
    "build_response",
    "parse_request_line",

    # Storage
    "PathResolver",
    "InMemoryFilesystem",
    "DirectoryFilesystem",
    "normalize_path",
]
