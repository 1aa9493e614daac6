"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps an accepted client socket with the three operations the dispatcher
needs: one read, one write, close.

=============================================================================
ONE READ, NO FRAMING
=============================================================================

TCP is a byte stream. A client that sends

    PUT /users/1 HTTP/1.1\r\n ... \r\n\r\n{"name": ...}

may have it arrive in one chunk or in several. A full HTTP server loops on
recv() until it sees \r\n\r\n and then Content-Length bytes of body.

This service does not. read_once() calls recv() exactly once with a fixed
upper bound and hands back whatever came in:

    ┌─────────────────────────────────────────────────────────────────┐
    │   client ──► [ kernel buffer ] ──► recv(buffer_size) ──► bytes  │
    │                                       │                         │
    │                                       └── called ONCE           │
    └─────────────────────────────────────────────────────────────────┘

Small requests from well-behaved clients arrive in a single segment, so
this works in practice. Requests bigger than the buffer are truncated.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──────► READING ──────► PROCESSING ──────► WRITING
     │             │                                  │
     │             ▼                                  │
     └──────────► CLOSING ◄───────────────────────────┘
                    │
                    ▼
                  CLOSED

No KEEP_ALIVE state: every connection carries exactly one request.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, mostly for logging."""
    NEW = "new"                # Just accepted
    READING = "reading"        # Inside read_once()
    PROCESSING = "processing"  # Handler is running
    WRITING = "writing"        # Inside send_response()
    CLOSING = "closing"        # Shutdown sequence started
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    A single accepted client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier used as a log prefix.
        state: Current lifecycle state.
        buffer_size: Upper bound of the single recv().
        timeout: Socket timeout in seconds, None for blocking.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 1024
    timeout: Optional[float] = None

    # Upper bounds for draining leftover request bytes in close()
    DRAIN_TIMEOUT: ClassVar[float] = 0.5
    DRAIN_LIMIT: ClassVar[int] = 64 * 1024

    def __post_init__(self):
        # accept() can hand back a socket that inherited the listening
        # socket's accept-poll timeout; reset it to what we were asked for.
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_once(self) -> bytes:
        """
        Read at most buffer_size bytes in a single recv() call.

        Returns:
            The bytes received. b"" if the client closed without sending.

        Raises:
            TimeoutError: if a timeout is configured and nothing arrived.
            OSError: on any other socket failure.
        """
        self.state = ConnectionState.READING

        try:
            data = self.socket.recv(self.buffer_size)
        except socket.timeout:
            raise TimeoutError("Request read timeout")

        logger.debug(f"[{self.id}] Read {len(data)} bytes")
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send the whole response with sendall().

        Returns:
            True if the bytes were handed to the kernel, False if the
            client went away. A failed write is logged, never raised.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR): send FIN, the client sees end-of-response
        2. drain whatever the client still sent (a request longer than
           buffer_size leaves bytes behind; closing with unread data makes
           the kernel send RST, which can eat our response)
        3. close(): release the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # client already gone

        self._drain()

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.2f}ms")

    def _drain(self):
        """
        Discard unread client bytes, bounded by DRAIN_TIMEOUT in total and
        DRAIN_LIMIT bytes, so a client that keeps trickling data cannot
        hold the accept loop.
        """
        deadline = time.monotonic() + self.DRAIN_TIMEOUT
        drained = 0

        try:
            while drained < self.DRAIN_LIMIT:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                chunk = self.socket.recv(1024)
                if not chunk:
                    return
                drained += len(chunk)
        except OSError:
            # includes socket.timeout
            return

        logger.debug(f"[{self.id}] Stopped draining after {drained} bytes")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
