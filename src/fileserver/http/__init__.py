"""
=============================================================================
HTTP MODULE
=============================================================================

The wire-protocol layer of the file server: a minimal HTTP/1.0 subset.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     ONE CONNECTION, ONE EXCHANGE                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Client ──► "GET /index.html HTTP/1.0\r\n"                         │
    │                     │                                                │
    │                     ▼                                                │
    │              parse_request_line()  → Request("GET", "/index.html")  │
    │                     │                                                │
    │                     ▼                                                │
    │              build_response()      → b"HTTP/1.0 200 OK\r\n..."      │
    │                     │                                                │
    │   Client ◄──────────┘  then the server closes the connection        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Only the request line is read. No headers are parsed, no body is read,
and responses carry a single Server header.

=============================================================================
"""

from .request import Request, parse_request_line, decode_request_line
from .response import (
    HTTPResponse,
    build_response,
    ok,             # 200 OK
    not_found,      # 404 Not Found
    HTTP_VERSION,
    SERVER_NAME,
)
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "Request",
    "parse_request_line",
    "decode_request_line",

    # Response building
    "HTTPResponse",
    "build_response",
    "ok",
    "not_found",
    "HTTP_VERSION",
    "SERVER_NAME",

    # Status codes
    "HTTPStatus",
]
