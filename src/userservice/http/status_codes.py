"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The service only ever answers with three status codes:

    ┌────────┬──────────────────────────┬────────────────────────────────┐
    │  Code  │  Status line             │  When                          │
    ├────────┼──────────────────────────┼────────────────────────────────┤
    │  200   │  HTTP/1.1 200 OK         │  create/update/delete worked   │
    │  404   │  HTTP/1.1 404 NOT FOUND  │  unknown route, missing user   │
    │  500   │  HTTP/1.1 500 INTERNAL   │  anything else went wrong      │
    │        │  SERVER ERROR            │                                │
    └────────┴──────────────────────────┴────────────────────────────────┘

The reason phrases are fixed literals, upper-cased for the error codes.
Clients that compare status lines byte for byte depend on them.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    Status codes used by the service.

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'NOT FOUND'
    """

    OK = 200
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase that follows the code in the status line."""
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "NOT FOUND",
    HTTPStatus.INTERNAL_SERVER_ERROR: "INTERNAL SERVER ERROR",
}
