"""
=============================================================================
HTTP REQUEST LINE PARSER
=============================================================================

The file server reads exactly ONE line from each connection: the request
line. Headers and bodies are never read.

=============================================================================
REQUEST LINE FORMAT
=============================================================================

    METHOD SP TARGET [SP anything-else] LF

    Example: "GET /index.html HTTP/1.0\r\n"
              ─┬─ ─────┬───── ────┬───
               │       │          │
             Method  Target    Ignored

Only the first two whitespace-separated tokens matter:

    - The method is case-insensitive and normalized to uppercase
      ("get" and "GET" are the same request).
    - The target is passed on unchanged; normalizing it is the job of
      whatever resolves paths to content.

=============================================================================
MALFORMED INPUT
=============================================================================

A naive split-and-index parser crashes on "" or "GET" because there is no
second token. Instead ``parse_request_line`` returns ``None`` for anything
it cannot split into at least two tokens, and the connection handler answers
that with the same 404 it uses for any request with no route:

    ┌───────────────────────────┬───────────────────────────────────────┐
    │ Request line              │ parse_request_line()                  │
    ├───────────────────────────┼───────────────────────────────────────┤
    │ "GET /a.txt HTTP/1.0"     │ Request(method="GET", path="/a.txt") │
    │ "get /a.txt"              │ Request(method="GET", path="/a.txt") │
    │ "POST /a.txt"             │ Request(method="POST", path="/a.txt")│
    │ "GET"                     │ None                                  │
    │ ""                        │ None                                  │
    └───────────────────────────┴───────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional


# Encoding used to turn the raw request line into text.
# Undecodable bytes are replaced rather than rejected.
REQUEST_LINE_ENCODING = "utf-8"


@dataclass(frozen=True)
class Request:
    """
    A parsed request line.

    Lives only for the duration of one connection; never stored or reused.

    Attributes:
        method: Uppercased first token (e.g. "GET").
        path: Second token, exactly as the client sent it.
    """

    method: str
    path: str

    @property
    def is_get(self) -> bool:
        """Check if this is a GET request."""
        return self.method == "GET"


def decode_request_line(raw: bytes) -> str:
    """Decode raw request line bytes to text."""
    return raw.decode(REQUEST_LINE_ENCODING, errors="replace")


def parse_request_line(line: str) -> Optional[Request]:
    """
    Parse an HTTP request line.

    Args:
        line: The request line, with or without its trailing CRLF/LF.

    Returns:
        The parsed Request, or None if the line has fewer than two
        whitespace-separated tokens.
    """
    # str.split() with no argument splits on any run of whitespace and
    # drops leading/trailing whitespace, including the line terminator
    tokens = line.split()
    if len(tokens) < 2:
        return None

    return Request(method=tokens[0].upper(), path=tokens[1])
