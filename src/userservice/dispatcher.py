"""
=============================================================================
REQUEST DISPATCHER
=============================================================================

Serves one connection from start to finish:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   conn.read_once()          single recv(), at most buffer_size       │
    │         │                                                            │
    │         ▼                                                            │
    │   RequestParser.parse()     lossy decode, never raises               │
    │         │                                                            │
    │         ▼                                                            │
    │   classify by prefix        first match wins                         │
    │         │                                                            │
    │         ├── "POST /users"      → create_user                         │
    │         ├── "PUT /users/"      → update_user                         │
    │         ├── "DELETE /users/"   → delete_user                         │
    │         └── anything else      → 404 "404 Not Found"                 │
    │         │                                                            │
    │         ▼                                                            │
    │   conn.send_response()      one sendall(), failure is logged         │
    │         │                                                            │
    │         ▼                                                            │
    │   conn.close()              no keep-alive                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Classification is a literal prefix test on the decoded text, not a route
table. "POST /users" therefore also matches "POST /users/7" and
"POST /usersXYZ"; both end up in create_user.

=============================================================================
"""

import logging
import time
from typing import Callable, Optional

from .core.connection import Connection, ConnectionState
from .database import Database
from .handlers import create_user, delete_user, update_user
from .http.request import HTTPRequest, RequestParser
from .http.response import HTTPResponse, internal_error, not_found


logger = logging.getLogger(__name__)


Handler = Callable[[HTTPRequest, Database], HTTPResponse]

# Order matters: first match wins.
ROUTES: tuple[tuple[str, Handler], ...] = (
    ("POST /users", create_user),
    ("PUT /users/", update_user),
    ("DELETE /users/", delete_user),
)


class Dispatcher:
    """
    Connection handler plugged into SocketServer.start().

        dispatcher = Dispatcher(Database(url))
        socket_server.start(dispatcher.handle)
    """

    def __init__(self, db: Database, parser: Optional[RequestParser] = None):
        self.db = db
        self.parser = parser or RequestParser()

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """Route a parsed request to its handler."""
        for prefix, handler in ROUTES:
            if request.starts_with(prefix):
                return handler(request, self.db)
        return not_found()

    def handle(self, conn: Connection) -> None:
        """
        Read, dispatch, write, close. Never raises.
        """
        start_time = time.time()

        with conn:
            try:
                data = conn.read_once()
            except OSError as e:
                # includes TimeoutError; nothing to answer
                logger.warning(f"[{conn.id}] Read failed: {e}")
                return

            request = self.parser.parse(data, conn.address)
            conn.state = ConnectionState.PROCESSING

            try:
                response = self.dispatch(request)
            except Exception as e:
                logger.exception(f"[{conn.id}] Handler error: {e}")
                response = internal_error()

            sent = conn.send_response(response.to_bytes())

        self._log_access(conn, request, response, start_time, sent)

    def _log_access(
        self,
        conn: Connection,
        request: HTTPRequest,
        response: HTTPResponse,
        start_time: float,
        sent: bool,
    ) -> None:
        """Apache-style access line: ip - - [time] "METHOD target" status size duration"""
        duration_ms = (time.time() - start_time) * 1000
        line = request.request_line or "-"
        suffix = "" if sent else " (not delivered)"
        logger.info(
            f'{conn.client_ip} - - [{time.strftime("%d/%b/%Y:%H:%M:%S %z")}] '
            f'"{line}" {int(response.status)} {len(response.body)} '
            f'{duration_ms:.2f}ms{suffix}'
        )
