"""
=============================================================================
HTTP LAYER
=============================================================================

Just enough HTTP to talk to curl and the existing clients:

    request.py       bytes → HTTPRequest (lenient, lossy decoding)
                     extract_id / extract_body / parse_id
    response.py      HTTPResponse → bytes, plus ok/not_found/internal_error
    status_codes.py  the three status codes and their fixed phrases

This is not an HTTP/1.1 implementation. Headers are parsed for logging
only, there is no keep-alive, no chunked encoding, no Content-Length.

=============================================================================
"""

from .request import (
    HTTPRequest,
    RequestParser,
    extract_body,
    extract_id,
    parse_id,
    parse_request,
)
from .response import (
    HTTPResponse,
    internal_error,
    not_found,
    ok,
)
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "parse_request",
    "extract_id",
    "extract_body",
    "parse_id",

    # Responses
    "HTTPResponse",
    "ok",
    "not_found",
    "internal_error",

    # Status codes
    "HTTPStatus",
]
