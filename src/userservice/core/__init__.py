"""
=============================================================================
CORE NETWORKING
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  SocketServer                                                       │
    │  - bind/listen on 0.0.0.0:8080                                      │
    │  - accept loop, one connection at a time                            │
    │  - SIGINT/SIGTERM → graceful stop                                   │
    │                                                                     │
    │  Connection                                                         │
    │  - read_once(): a single bounded recv()                             │
    │  - send_response(): sendall(), failures logged not raised           │
    │  - close(): FIN, drain, release                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer

__all__ = [
    "SocketServer",     # Listening socket + accept loop
    "Connection",       # One client socket
    "ConnectionState",  # Lifecycle states for logging
]
