"""
=============================================================================
CORE MODULE
=============================================================================

The socket side of the file server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Listener                                                           │
    │     │  owns the listening socket, runs the accept loop              │
    │     ▼                                                                │
    │   Connection                                                         │
    │     │  wraps one accepted socket: read_line / send / close          │
    │     ▼                                                                │
    │   ConnectionHandler                                                  │
    │        one request line in, one response out, always closes         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Everything runs on the caller's thread. The listener hands each connection
to the handler and waits for it to finish before accepting the next one.

=============================================================================
"""

from .connection import Connection, ConnectionState, LineTooLongError
from .handler import ConnectionHandler, handle_connection
from .listener import Listener, create_listening_socket

__all__ = [
    "Connection",               # Wrapper for client socket
    "ConnectionState",          # Connection lifecycle states
    "LineTooLongError",         # Request line over the limit
    "ConnectionHandler",        # One exchange per connection
    "handle_connection",
    "Listener",                 # Serial accept loop
    "create_listening_socket",  # bind + listen helper
]
