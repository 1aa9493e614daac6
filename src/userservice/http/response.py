"""
=============================================================================
HTTP RESPONSE
=============================================================================

Builds the byte strings written back to clients.

=============================================================================
RESPONSE ANATOMY
=============================================================================

Responses are deliberately minimal. There is no Content-Length, no Date,
no Server header. The client reads until the server closes the socket.

    ┌─────────────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 200 OK\r\n                        ← status line           │
    │  Content-Type: application/json\r\n         ← success only          │
    │  \r\n                                       ← separator             │
    │  User created                               ← plain text body       │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 500 INTERNAL SERVER ERROR\r\n     ← status line           │
    │  \r\n                                       ← no headers at all     │
    │  Error                                      ← body                  │
    └─────────────────────────────────────────────────────────────────────┘

Success responses advertise application/json even though the body is a
short text message. Existing clients were written against that, so the
header stays.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from .status_codes import HTTPStatus


JSON_CONTENT_TYPE = "application/json"

NOT_FOUND_BODY = "404 Not Found"
ERROR_BODY = "Error"


@dataclass
class HTTPResponse:
    """
    A response to be written to the client.

        Handler returns          to_bytes()              Connection sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 404 NOT FOUND"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def text(self) -> str:
        """Body decoded as UTF-8, for logging and tests."""
        return self.body.decode("utf-8", errors="replace")

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        self.headers[name] = value
        return self

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = body
        return self

    def head_bytes(self) -> bytes:
        """
        Status line, headers and the blank separator line.

            "HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n\r\n"
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")
        return ("\r\n".join(lines) + "\r\n").encode("utf-8")

    def to_bytes(self) -> bytes:
        """Serialize the full response, ready for socket.sendall()."""
        return self.head_bytes() + self.body


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# Handlers never build responses by hand. Each of the four possible
# outcomes has exactly one constructor:
#
#     return ok("User created")
#     return not_found("User not found")
#     return not_found()                  # unknown route
#     return internal_error()             # always "Error"
#
# =============================================================================

def ok(message: str) -> HTTPResponse:
    """200 with the JSON content type and a short text message."""
    return HTTPResponse(
        status=HTTPStatus.OK,
        headers={"Content-Type": JSON_CONTENT_TYPE},
    ).set_body(message)


def not_found(message: str = NOT_FOUND_BODY) -> HTTPResponse:
    """404 without headers."""
    return HTTPResponse(status=HTTPStatus.NOT_FOUND).set_body(message)


def internal_error() -> HTTPResponse:
    """
    500 with the generic body.

    The cause is never sent to the client. Callers log it instead.
    """
    return HTTPResponse(status=HTTPStatus.INTERNAL_SERVER_ERROR).set_body(ERROR_BODY)
