"""
=============================================================================
CONNECTION HANDLER
=============================================================================

Owns one accepted connection end to end:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         handle(conn)                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. read_line()            "GET /index.html HTTP/1.0\r\n"          │
    │   2. parse_request_line()   Request("GET", "/index.html") or None   │
    │   3. dispatch()                                                      │
    │        GET + content     →  200, body = content                     │
    │        GET + absent      →  404                                      │
    │        not GET           →  404  (no route)                          │
    │        unparseable       →  404  (no route)                          │
    │   4. send()                 all bytes, or an OSError                │
    │   5. close()                ALWAYS, via `with conn:`                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FAILURE CONTAINMENT
=============================================================================

Nothing that goes wrong on one connection may reach the accept loop:

    - Socket errors while reading or writing (client reset, broken pipe)
      are logged and the connection is dropped. No retry, no partial
      response recovery.
    - A resolver that raises is logged with its traceback and answered
      with 404: no content could be resolved for the path.

=============================================================================
"""

import logging
from typing import Optional

from ..access_log import AccessLog
from ..http.request import Request, decode_request_line, parse_request_line
from ..http.response import HTTPResponse, build_response, not_found, ok
from ..storage.base import PathResolver
from .connection import Connection, ConnectionState, LineTooLongError


logger = logging.getLogger(__name__)


class ConnectionHandler:
    """
    Handles one connection at a time, synchronously.

    Usage:
        handler = ConnectionHandler(InMemoryFilesystem({"/": "hi"}))
        handler.handle(conn)   # returns once conn is closed
    """

    def __init__(self, resolver: PathResolver, access_log: Optional[AccessLog] = None):
        """
        Args:
            resolver: Where request paths are looked up. Only ever read.
            access_log: Where to record each request, or None to skip.
        """
        self.resolver = resolver
        self.access_log = access_log

    def handle(self, conn: Connection) -> None:
        """
        Run one request/response exchange and close the connection.

        Never raises for per-connection failures.
        """
        request: Optional[Request] = None
        response: Optional[HTTPResponse] = None

        # Closed on leaving the block, whatever happened inside it
        with conn:
            try:
                # ─────────────────────────────────────────────────────────
                # READ + PARSE
                # ─────────────────────────────────────────────────────────
                try:
                    raw_line = conn.read_line()
                except LineTooLongError as e:
                    logger.warning(f"[{conn.id}] {e}")
                    raw_line = b""

                request = parse_request_line(decode_request_line(raw_line))
                if request is None:
                    logger.debug(f"[{conn.id}] Unparseable request line: {raw_line[:80]!r}")

                # ─────────────────────────────────────────────────────────
                # DISPATCH
                # ─────────────────────────────────────────────────────────
                conn.state = ConnectionState.DISPATCHING
                response = self.dispatch(request)

                # ─────────────────────────────────────────────────────────
                # WRITE
                # ─────────────────────────────────────────────────────────
                conn.send(build_response(response.status, response.body))

            except OSError as e:
                logger.warning(f"[{conn.id}] Connection error from {conn.client_ip}: {e}")

            except Exception as e:
                logger.exception(f"[{conn.id}] Unexpected error: {e}")

        self._log_request(conn, request, response)

    def dispatch(self, request: Optional[Request]) -> HTTPResponse:
        """
        Decide the response for a parsed request.

        Args:
            request: The parsed request, or None if the line was unparseable.

        Returns:
            A 200 response with the resolved content, or a 404.
        """
        if request is None or not request.is_get:
            return not_found()

        try:
            content = self.resolver.lookup(request.path)
        except Exception:
            logger.exception(f"{self.resolver.name} failed to look up {request.path!r}")
            return not_found()

        if content is None:
            return not_found()

        return ok(content)

    def _log_request(
        self,
        conn: Connection,
        request: Optional[Request],
        response: Optional[HTTPResponse],
    ) -> None:
        if self.access_log is None or response is None:
            return

        self.access_log.record(
            client_ip=conn.client_ip,
            method=request.method if request else None,
            path=request.path if request else None,
            status_code=response.status,
            content_length=len(response.body),
            started_at=conn.created_at,
        )


def handle_connection(
    conn: Connection,
    resolver: PathResolver,
    access_log: Optional[AccessLog] = None,
) -> None:
    """Handle a single connection with a one-off ConnectionHandler."""
    ConnectionHandler(resolver, access_log).handle(conn)
