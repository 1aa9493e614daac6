"""
User model
"""

from typing import Annotated, Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import MalformedBody


# Range of a signed 32-bit integer, the id column type.
ID_MIN = -(2 ** 31)
ID_MAX = 2 ** 31 - 1


class User(BaseModel):
    """A row of the users table, as sent in request bodies."""

    # assigned by the store on create. Strict: "7", 1.0 and true are rejected.
    id: Optional[Annotated[int, Field(strict=True, ge=ID_MIN, le=ID_MAX)]] = None
    name: str
    email: str


def parse_user(body_text: str) -> User:
    """
    Deserialize a JSON request body into a User.

    Raises:
        MalformedBody: if the body is empty, not valid JSON, not an object,
                       or is missing name/email.
    """
    if not body_text:
        raise MalformedBody("Request body is empty")

    try:
        return User.model_validate_json(body_text)
    except ValidationError as e:
        raise MalformedBody(f"Invalid user body: {e.error_count()} error(s)") from e
