"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every failure the service knows about is a subclass of UserServiceError.

    UserServiceError
     ├── MalformedBody          body missing / bad JSON / missing field
     ├── InvalidId              /users/<id> segment is not an integer
     ├── ConnectionFailure      database unreachable, credentials rejected
     ├── StatementFailure       SQL execution error
     ├── NotFound               delete target does not exist
     └── SchemaBootstrapError   table creation failed at startup

Handlers catch UserServiceError at their boundary. NotFound becomes a 404,
everything else collapses into the same generic 500 "Error" response so
callers cannot tell a validation problem from a connectivity problem.

SchemaBootstrapError is the exception to the rule: it is raised before the
listener binds and carries its cause (``raise ... from exc``) so the CLI
can log it and exit.

=============================================================================
"""


class UserServiceError(Exception):
    """Base class for all service errors."""


class MalformedBody(UserServiceError):
    """Request body is absent, not JSON, or lacks a required field."""


class InvalidId(UserServiceError):
    """Path id segment could not be parsed as an integer."""

    def __init__(self, raw_id: str):
        super().__init__(f"Invalid user id: {raw_id!r}")
        self.raw_id = raw_id


class ConnectionFailure(UserServiceError):
    """The database could not be reached."""


class StatementFailure(UserServiceError):
    """A SQL statement failed to execute."""


class NotFound(UserServiceError):
    """The targeted user row does not exist."""

    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class SchemaBootstrapError(UserServiceError):
    """Creating the users table failed. Fatal at startup."""
