"""
=============================================================================
USER RESOURCE HANDLERS
=============================================================================

Three independent handlers, one per write operation.

    ┌──────────┬──────────────────────────────────────┬──────────────────┐
    │ Handler  │ Steps                                │ Outcomes         │
    ├──────────┼──────────────────────────────────────┼──────────────────┤
    │ create   │ body → connect → INSERT              │ 200 User created │
    │          │                                      │ 500 Error        │
    ├──────────┼──────────────────────────────────────┼──────────────────┤
    │ update   │ id → body → connect → UPDATE         │ 200 User updated │
    │          │                                      │ 500 Error        │
    ├──────────┼──────────────────────────────────────┼──────────────────┤
    │ delete   │ id → connect → DELETE → rowcount?    │ 200 User deleted │
    │          │                                      │ 404 not found    │
    │          │                                      │ 500 Error        │
    └──────────┴──────────────────────────────────────┴──────────────────┘

Inputs are parsed BEFORE the database is touched, so a bad id or a bad
body never opens a connection.

All values reach the database as bound parameters. The statements are
SQLAlchemy Core constructs, which compile to

    INSERT INTO users (name, email) VALUES (:name, :email)
    UPDATE users SET name=:name, email=:email WHERE users.id = :id_1
    DELETE FROM users WHERE users.id = :id_1

=============================================================================
ERROR COLLAPSING
=============================================================================

Every UserServiceError except NotFound becomes the same 500 "Error"
response. The cause is logged here and nowhere else; the client never
learns whether the JSON was bad or the database was down.

Update does not look at the row count. PUT on an id that does not exist
still answers 200 "User updated".

=============================================================================
"""

import logging

from ..database import Database, users_table
from ..errors import NotFound, UserServiceError
from ..http.request import HTTPRequest, parse_id
from ..http.response import HTTPResponse, internal_error, not_found, ok
from ..models import parse_user


logger = logging.getLogger(__name__)


def create_user(request: HTTPRequest, db: Database) -> HTTPResponse:
    """POST /users"""
    try:
        user = parse_user(request.body_text)
        db.execute(
            users_table.insert().values(name=user.name, email=user.email)
        )
    except UserServiceError as e:
        logger.warning(f"Create failed: {type(e).__name__}: {e}")
        return internal_error()

    logger.info(f"Created user {user.name!r}")
    return ok("User created")


def update_user(request: HTTPRequest, db: Database) -> HTTPResponse:
    """PUT /users/<id>"""
    try:
        user_id = parse_id(request.text)
        user = parse_user(request.body_text)
        db.execute(
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(name=user.name, email=user.email)
        )
    except UserServiceError as e:
        logger.warning(f"Update failed: {type(e).__name__}: {e}")
        return internal_error()

    logger.info(f"Updated user {user_id}")
    return ok("User updated")


def delete_user(request: HTTPRequest, db: Database) -> HTTPResponse:
    """DELETE /users/<id>"""
    try:
        user_id = parse_id(request.text)
        deleted = db.execute(
            users_table.delete().where(users_table.c.id == user_id)
        )
        if deleted == 0:
            raise NotFound(user_id)
    except NotFound as e:
        logger.info(str(e))
        return not_found("User not found")
    except UserServiceError as e:
        logger.warning(f"Delete failed: {type(e).__name__}: {e}")
        return internal_error()

    logger.info(f"Deleted user {user_id}")
    return ok("User deleted")
