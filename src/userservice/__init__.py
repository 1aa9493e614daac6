"""
=============================================================================
USERSERVICE
=============================================================================

A minimal network service exposing create/update/delete on a single
"users" table, spoken over raw TCP with an HTTP-like request line.

    POST   /users        {"name": ..., "email": ...}   → 200 User created
    PUT    /users/<id>   {"name": ..., "email": ...}   → 200 User updated
    DELETE /users/<id>                                 → 200 User deleted
                                                         404 User not found
    anything else                                      → 404 Not Found
    any failure                                        → 500 Error

=============================================================================
PACKAGE LAYOUT
=============================================================================

    userservice/
    ├── __main__.py      CLI: python -m userservice
    ├── config.py        ServerConfig (env + defaults + validation)
    ├── errors.py        Error taxonomy
    ├── models.py        User (pydantic) and body parsing
    ├── database.py      users table, fresh connection per statement
    ├── dispatcher.py    read → classify → handler → write
    ├── server.py        UserServer: schema bootstrap + accept loop
    ├── core/            SocketServer, Connection
    ├── http/            request parsing, responses, status codes
    └── handlers/        create_user, update_user, delete_user

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .database import Database
from .dispatcher import Dispatcher
from .errors import (
    ConnectionFailure,
    InvalidId,
    MalformedBody,
    NotFound,
    SchemaBootstrapError,
    StatementFailure,
    UserServiceError,
)
from .models import User
from .server import UserServer

__all__ = [
    "__version__",
    "ServerConfig",
    "Database",
    "Dispatcher",
    "UserServer",
    "User",
    "UserServiceError",
    "MalformedBody",
    "InvalidId",
    "ConnectionFailure",
    "StatementFailure",
    "NotFound",
    "SchemaBootstrapError",
]
