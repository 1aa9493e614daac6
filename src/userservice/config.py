"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the user service.

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
    │      └── python -m userservice --port 3000                         │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_PORT=3000 DB_URL=postgresql://... python -m ...      │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The database location is the one setting without a default. It follows
the 12-factor rule: secrets such as database credentials live in the
environment (DB_URL), never in the source tree.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional


DB_URL_ENV = "DB_URL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass
class ServerConfig:
    """
    Configuration for the user service.

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    DATABASE
    - database_url

    LOGGING
    - log_level
    """

    host: str = "0.0.0.0"
    """
    The IP address to bind to. All interfaces by default.
    """

    port: int = 8080
    """
    The port number to listen on.
    """

    backlog: int = 128
    """
    Maximum number of queued connections waiting for accept().
    """

    buffer_size: int = 1024
    """
    Upper bound for the single recv() performed per connection.
    Requests longer than this are truncated; there is no second read.
    """

    timeout: Optional[float] = None
    """
    Socket timeout for the client read and write, in seconds.
    None = blocking. A silent client stalls the whole accept loop.
    """

    database_url: Optional[str] = None
    """
    SQLAlchemy database URL, e.g. postgresql+psycopg2://user:pw@host/db
    """

    log_level: str = "INFO"

    server_name: str = "userservice/1.0"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        HTTP_HOST         Server host (default: 0.0.0.0)
        HTTP_PORT         Server port (default: 8080)
        HTTP_BACKLOG      Listen backlog (default: 128)
        HTTP_BUFFER_SIZE  Single-read buffer in bytes (default: 1024)
        HTTP_TIMEOUT      Client socket timeout in seconds (default: none)
        HTTP_LOG_LEVEL    Logging level (default: INFO)
        DB_URL            Database URL (required)
        """
        return cls(
            host=os.getenv("HTTP_HOST", "0.0.0.0"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            backlog=int(os.getenv("HTTP_BACKLOG", "128")),
            buffer_size=int(os.getenv("HTTP_BUFFER_SIZE", "1024")),
            timeout=_optional_float(os.getenv("HTTP_TIMEOUT")),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            database_url=os.getenv(DB_URL_ENV),
        )

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad deployment fails before the listener
        binds, not on the first request.
        """
        # port 0 lets the OS pick a free port (used by the tests)
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 64:
            raise ValueError("buffer_size must be >= 64")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

        if not self.database_url:
            raise ValueError(
                f"No database configured. Set {DB_URL_ENV} or pass --database-url."
            )
