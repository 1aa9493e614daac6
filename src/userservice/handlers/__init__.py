"""
=============================================================================
REQUEST HANDLERS
=============================================================================

Handlers take the parsed request plus the Database and return an
HTTPResponse. They never raise: every failure is mapped to a response
inside the handler.

    from userservice.handlers import create_user

    response = create_user(request, db)
    conn.send_response(response.to_bytes())

=============================================================================
"""

from .users import create_user, delete_user, update_user

__all__ = [
    "create_user",
    "update_user",
    "delete_user",
]
