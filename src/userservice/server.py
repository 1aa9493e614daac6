"""
=============================================================================
USER SERVICE SERVER
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │                        ┌─────────────────┐                           │
    │                        │   UserServer    │                           │
    │                        └────────┬────────┘                           │
    │                                 │                                    │
    │            ┌────────────────────┼────────────────────┐               │
    │            ▼                    ▼                    ▼               │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐          │
    │    │ SocketServer │───►│  Dispatcher  │───►│   Database   │          │
    │    │ accept loop  │    │ parse, route │    │ one statement│          │
    │    └──────────────┘    └──────────────┘    └──────────────┘          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
STARTUP ORDER
=============================================================================

    1. configure logging
    2. create the users table if needed   ← failure aborts here
    3. bind + listen                      ← only reached with a schema
    4. accept loop (blocks)

=============================================================================
"""

import logging
from typing import Optional, Tuple

from .config import ServerConfig
from .core import SocketServer
from .database import Database
from .dispatcher import Dispatcher


logger = logging.getLogger(__name__)


class UserServer:
    """
    The user CRUD service.

        server = UserServer(ServerConfig.from_env())
        server.run()  # blocks until SIGINT/SIGTERM
    """

    def __init__(self, config: Optional[ServerConfig] = None, db: Optional[Database] = None):
        self.config = config or ServerConfig.from_env()
        self.config.validate()

        self.db = db or Database(self.config.database_url)
        self.dispatcher = Dispatcher(self.db)
        self._socket_server = SocketServer(self.config)

    @property
    def address(self) -> Tuple[str, int]:
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    def run(self, configure_logging: bool = True):
        """
        Bootstrap the schema, then serve until shutdown.

        Raises:
            SchemaBootstrapError: if the users table cannot be created.
                                  The listener is never bound in that case.
            OSError: if the address cannot be bound.
        """
        if configure_logging:
            self._setup_logging()

        self.db.bootstrap_schema()

        logger.info(f"Starting {self.config.server_name} on {self.config.host}:{self.config.port}")

        try:
            self._socket_server.start(self.dispatcher.handle)
        finally:
            self.db.dispose()
            logger.info("Server stopped")

    def shutdown(self):
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        level = self.config.log_level_number

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("userservice").setLevel(level)
