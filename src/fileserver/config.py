"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the file server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m fileserver --port 3000                          │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── FILESERVER_PORT=3000 python -m fileserver                 │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Note what is NOT configurable: the response format. Status lines, the
Server header and the HTTP version are fixed by the wire protocol.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

from .access_log import LOG_FORMATS


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog

    CONNECTION SETTINGS
    - max_line_length, accept_poll_interval, linger_timeout

    CONTENT
    - root_dir, index_file

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """The port number to listen on. 0 lets the OS pick a free port."""

    backlog: int = 128
    """
    Connections the kernel queues while one is being handled.
    The server handles one connection at a time, so this is the only queue.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONNECTION SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    max_line_length: int = 8192
    """Longest request line accepted; longer lines are answered with 404."""

    accept_poll_interval: Optional[float] = 1.0
    """
    Accept timeout in seconds. Bounds how long a plain close() of the
    listening socket takes to stop the loop. None = block indefinitely.
    """

    linger_timeout: float = 0.5
    """Seconds a closing connection spends draining unread request bytes."""

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    root_dir: str = "."
    """Directory served by the CLI."""

    index_file: Optional[str] = "index.html"
    """File served for directory paths. None disables it."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'text' (Apache-style) or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        FILESERVER_HOST        Server host (default: 127.0.0.1)
        FILESERVER_PORT        Server port (default: 8080)
        FILESERVER_BACKLOG     Listen backlog (default: 128)
        FILESERVER_ROOT        Directory to serve (default: .)
        FILESERVER_LOG_LEVEL   Logging level (default: INFO)
        FILESERVER_LOG_FORMAT  Access log format (default: text)

        =====================================================================
        """
        return cls(
            host=os.getenv("FILESERVER_HOST", "127.0.0.1"),
            port=int(os.getenv("FILESERVER_PORT", "8080")),
            backlog=int(os.getenv("FILESERVER_BACKLOG", "128")),
            root_dir=os.getenv("FILESERVER_ROOT", "."),
            log_level=os.getenv("FILESERVER_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("FILESERVER_LOG_FORMAT", "text").lower(),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad value fails immediately, not on the
        first request.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.max_line_length < 16:
            raise ValueError("max_line_length must be >= 16")

        if self.accept_poll_interval is not None and self.accept_poll_interval <= 0:
            raise ValueError("accept_poll_interval must be > 0 or None")

        if self.linger_timeout < 0:
            raise ValueError("linger_timeout must be >= 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log format: {self.log_format}. Must be one of {LOG_FORMATS}.")
