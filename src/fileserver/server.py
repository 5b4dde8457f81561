"""
=============================================================================
FILE SERVER
=============================================================================

Ties the pieces together:

    FileServer.serve(resolver)
        │
        ├──► create_listening_socket()   bind + listen from config
        ├──► install signal handlers     SIGINT/SIGTERM close the socket
        │
        └──► FileServer.run(sock, resolver)
                 │
                 └──► Listener.run()     blocks until the socket closes

``run()`` is the core entry point: give it a bound socket and a path
resolver and it serves until the socket is closed. ``serve()`` is the
convenience the CLI uses.

=============================================================================
GRACEFUL SHUTDOWN
=============================================================================

SIGINT (Ctrl+C) and SIGTERM (docker stop, kill) both do the same thing:
close the listening socket. That is the only way to stop the server.
A request already being handled finishes first; then run() returns.

=============================================================================
"""

import logging
import signal
import threading
from typing import Optional

from .access_log import AccessLog
from .config import ServerConfig
from .core.listener import Listener, create_listening_socket
from .storage.base import PathResolver


logger = logging.getLogger(__name__)


def setup_logging(config: ServerConfig) -> None:
    """Configure logging based on config."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("fileserver").setLevel(level)


class FileServer:
    """
    A basic and deliberately limited file server that answers GET requests.

    Usage:
        server = FileServer(ServerConfig(port=8080))
        server.serve(DirectoryFilesystem("./public"))   # blocks

    Or, with a socket you bound yourself:
        sock = create_listening_socket("127.0.0.1", 0)
        FileServer().run(sock, InMemoryFilesystem({"/": "hi"}))
    """

    def __init__(self, config: Optional[ServerConfig] = None, access_log: Optional[AccessLog] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.
            access_log: Access logger. Built from config.log_format if None.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self.access_log = access_log or AccessLog(log_format=self.config.log_format)

        self._listener: Optional[Listener] = None
        self._original_handlers: dict = {}

    @property
    def listener(self) -> Optional[Listener]:
        """The active listener, while run() is executing."""
        return self._listener

    def run(self, sock, resolver: PathResolver) -> None:
        """
        Serve connections on an already-bound socket until it is closed.

        Args:
            sock: Bound, listening socket. Closed when this returns.
            resolver: Where request paths are looked up.

        Raises:
            OSError: A fatal accept failure. The socket is still closed.
        """
        self._listener = Listener(
            sock,
            resolver,
            poll_interval=self.config.accept_poll_interval,
            max_line_length=self.config.max_line_length,
            linger_timeout=self.config.linger_timeout,
            access_log=self.access_log,
        )

        logger.info(f"Serving from {resolver.name}")

        try:
            self._listener.run()
        finally:
            self._listener = None

    def serve(self, resolver: PathResolver) -> None:
        """
        Bind from config and serve until SIGINT/SIGTERM (blocking).

        Signal handlers are only installed when called from the main
        thread, and are restored afterwards.
        """
        sock = create_listening_socket(self.config.host, self.config.port, self.config.backlog)

        self._setup_signals()
        try:
            self.run(sock, resolver)
        finally:
            self._restore_signals()

        logger.info("Server stopped")

    def close(self) -> None:
        """Close the listening socket, which stops run()."""
        listener = self._listener
        if listener is not None:
            listener.close()

    # =========================================================================
    # SIGNALS
    # =========================================================================

    def _setup_signals(self):
        """Install SIGTERM/SIGINT handlers that close the listening socket."""
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, closing listening socket...")
            self.close()

        # Save original handlers so they can be restored
        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()
