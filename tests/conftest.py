"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Callable, Generator, List, Tuple

import pytest
from sqlalchemy import select

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from userservice import Database, ServerConfig, UserServer
from userservice.database import users_table
from userservice.http import HTTPRequest, parse_request


@pytest.fixture
def sample_post_request() -> bytes:
    """Create request with a JSON body."""
    body = b'{"name": "Ada", "email": "ada@example.com"}'
    return (
        b"POST /users HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )


@pytest.fixture
def sample_put_request() -> bytes:
    """Update request for user 1."""
    body = b'{"name": "Ada Lovelace", "email": "ada@example.org"}'
    return (
        b"PUT /users/1 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        b"\r\n"
    ) + body


@pytest.fixture
def sample_delete_request() -> bytes:
    return (
        b"DELETE /users/1 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"\r\n"
    )


@pytest.fixture
def make_request() -> Callable[[str], HTTPRequest]:
    """Parse a request written as a str."""
    def parse(raw: str) -> HTTPRequest:
        return parse_request(raw.encode("utf-8"))
    return parse


# =============================================================================
# DATABASE
# =============================================================================

@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite file private to the test."""
    return f"sqlite:///{tmp_path / 'users.db'}"


@pytest.fixture
def unreachable_url(tmp_path: Path) -> str:
    """A SQLite URL whose directory does not exist, so connect() fails."""
    return f"sqlite:///{tmp_path / 'missing' / 'nested' / 'users.db'}"


@pytest.fixture
def db(database_url: str) -> Generator[Database, None, None]:
    """Database with the users table already created."""
    database = Database(database_url)
    database.bootstrap_schema()
    yield database
    database.dispose()


@pytest.fixture
def rows(db: Database) -> Callable[[], List[Tuple[int, str, str]]]:
    """Return a function listing (id, name, email) for every user, by id."""
    def fetch() -> List[Tuple[int, str, str]]:
        with db.connect() as conn:
            result = conn.execute(select(users_table).order_by(users_table.c.id))
            return [tuple(row) for row in result]
    return fetch


class UntouchableDatabase:
    """Stands in for Database where the code under test must not reach it."""

    def execute(self, statement):
        raise AssertionError(f"database was used: {statement}")

    def connect(self):
        raise AssertionError("database was used")


@pytest.fixture
def untouchable_db() -> UntouchableDatabase:
    return UntouchableDatabase()


# =============================================================================
# NETWORK
# =============================================================================

def send_raw(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """
    Send raw bytes, half-close, and read until the server closes.
    """
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as s:
        s.sendall(data)
        s.shutdown(socket.SHUT_WR)

        chunks = []
        while True:
            chunk = s.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False

    def __init__(self, server: UserServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"configure_logging": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def send(self, data: bytes) -> bytes:
        return send_raw(self.port, data)

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def server_config(database_url: str) -> ServerConfig:
    """Test configuration: loopback, OS-picked port, short timeout."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,
        timeout=5.0,
        database_url=database_url,
        log_level="WARNING",
    )


@pytest.fixture
def test_server(server_config: ServerConfig) -> Generator[TestServer, None, None]:
    """A running UserServer backed by a fresh SQLite file."""
    test_srv = TestServer(UserServer(server_config))
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def start_server() -> Generator[Callable[[ServerConfig], TestServer], None, None]:
    """Start extra servers inside a test; all are stopped at teardown."""
    started: List[TestServer] = []

    def start(config: ServerConfig) -> TestServer:
        test_srv = TestServer(UserServer(config))
        test_srv.start()
        started.append(test_srv)
        return test_srv

    yield start

    for test_srv in started:
        test_srv.stop()
