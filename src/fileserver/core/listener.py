"""
=============================================================================
LISTENER: THE ACCEPT LOOP
=============================================================================

The listener owns the bound listening socket and runs the accept loop.

=============================================================================
ONE CONNECTION AT A TIME
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   accept() ──► handle(conn) ──► accept() ──► handle(conn) ──► ...   │
    │                 │                                                    │
    │                 └── read, dispatch, write, close: ALL of it runs    │
    │                     before the next accept()                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

One connection at a time, one thread. Clients that arrive while a request
is being handled wait in the kernel's listen backlog. A stalled client
stalls everyone; this is a known limit of the design.

=============================================================================
SHUTTING DOWN = CLOSING THE SOCKET
=============================================================================

There is no stop flag and no shutdown message. The loop ends when the
listening socket is closed, from another thread or from a signal handler:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Event while blocked in accept()        │ Result                     │
    ├────────────────────────────────────────┼────────────────────────────┤
    │ Listener.close()                       │ accept() wakes, run()      │
    │   (shutdown + close)                   │ returns normally           │
    │ sock.close() by the owner              │ run() returns normally     │
    │                                        │ within poll_interval       │
    │ Accept timeout (poll_interval)         │ Not an error, loop again   │
    │ Any other OSError                      │ Fatal: logged and raised   │
    └────────────────────────────────────────┴────────────────────────────┘

Why both shutdown() and a poll interval? On Linux, closing a socket in one
thread does NOT wake another thread blocked in accept() on it; the kernel
keeps the open file alive until the call returns. shutdown(SHUT_RDWR) on a
listening socket does wake it. When the owner calls plain close(), the
accept timeout makes the loop notice within poll_interval seconds.

Whatever way the loop exits, the listening socket is closed.

=============================================================================
"""

import logging
import socket
from typing import Optional

from ..access_log import AccessLog
from ..storage.base import PathResolver
from .connection import Connection
from .handler import ConnectionHandler


logger = logging.getLogger(__name__)


def create_listening_socket(host: str = "127.0.0.1", port: int = 0, backlog: int = 128) -> socket.socket:
    """
    Create, bind and listen on a TCP socket.

    Args:
        host: Address to bind ("0.0.0.0" for all interfaces).
        port: Port to bind, 0 for any free port.
        backlog: How many connections the kernel queues while we are busy
                 handling one. The only queuing this server has.

    Returns:
        A listening socket.

    Raises:
        OSError: If the address can't be bound (in use, no permission).
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

    # SO_REUSEADDR: restart without waiting out TIME_WAIT on the port
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

    try:
        sock.bind((host, port))
        sock.listen(backlog)
    except OSError as e:
        logger.error(f"Failed to bind to {host}:{port}: {e}")
        sock.close()
        raise

    return sock


class Listener:
    """
    Serial accept loop over an already-bound listening socket.

    Usage:
        sock = create_listening_socket("127.0.0.1", 8080)
        listener = Listener(sock, DirectoryFilesystem("./public"))

        # Blocks until the socket is closed
        listener.run()

        # From another thread or a signal handler:
        listener.close()
    """

    def __init__(
        self,
        sock: socket.socket,
        resolver: PathResolver,
        handler: Optional[ConnectionHandler] = None,
        poll_interval: Optional[float] = 1.0,
        max_line_length: int = 8192,
        linger_timeout: float = 0.5,
        access_log: Optional[AccessLog] = None,
    ):
        """
        Args:
            sock: Bound, listening socket. The listener closes it when
                  run() exits.
            resolver: Path resolver handed to the connection handler.
            handler: Connection handler; built from resolver if None.
            poll_interval: Accept timeout in seconds, so a plain close()
                           of sock is noticed. None blocks indefinitely.
            max_line_length: Longest request line accepted per connection.
            linger_timeout: How long a closing connection drains unread input.
            access_log: Access logger for the default handler.
        """
        self._socket = sock
        self.handler = handler or ConnectionHandler(resolver, access_log=access_log)
        self.poll_interval = poll_interval
        self.max_line_length = max_line_length
        self.linger_timeout = linger_timeout

        # Set by close(); the loop also checks the socket itself
        self._closing = False
        self.connections_handled = 0

    @property
    def socket(self) -> socket.socket:
        return self._socket

    @property
    def closed(self) -> bool:
        """True once the listening socket has been closed."""
        return self._closing or self._socket.fileno() == -1

    @property
    def address(self):
        """The bound address, e.g. ("127.0.0.1", 8080)."""
        return self._socket.getsockname()

    def run(self) -> None:
        """
        Accept and handle connections until the socket is closed.

        Returns normally when the listening socket is closed.

        Raises:
            OSError: Any accept failure that isn't the socket being closed.
        """
        if self.closed:
            return

        # Closes the listening socket on every exit path
        with self._socket:
            try:
                self._socket.settimeout(self.poll_interval)
            except OSError:
                if self.closed:
                    return
                raise

            logger.info(f"Listening on {self._format_address()}")

            while not self.closed:
                try:
                    client_socket, client_address = self._socket.accept()
                except socket.timeout:
                    # Normal: lets us notice a close() we weren't woken for
                    continue
                except OSError as e:
                    if self.closed:
                        break
                    logger.error(f"Accept failed: {e}")
                    raise

                conn = Connection(
                    socket=client_socket,
                    address=client_address,
                    max_line_length=self.max_line_length,
                    linger_timeout=self.linger_timeout,
                )
                logger.debug(f"[{conn.id}] Accepted connection from {conn.client_ip}")

                self.handler.handle(conn)
                self.connections_handled += 1

        logger.info(f"Listener stopped after {self.connections_handled} connections")

    def close(self) -> None:
        """
        Close the listening socket, ending run().

        Safe to call from another thread, from a signal handler, or more
        than once. A connection already being handled runs to completion.
        """
        self._closing = True

        try:
            # Wakes a thread blocked in accept() (see module docstring)
            self._socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # Not connected / already closed

        self._socket.close()

    def _format_address(self) -> str:
        try:
            host, port = self.address[:2]
        except (OSError, ValueError):
            return "<unbound>"
        return f"{host}:{port}"
