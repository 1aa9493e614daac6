"""
=============================================================================
DATABASE ACCESS
=============================================================================

Owns the users table definition and the connection lifecycle.

=============================================================================
ONE STATEMENT, ONE CONNECTION
=============================================================================

Every handler call opens a brand-new DBAPI connection, runs exactly one
statement inside one transaction, commits and lets the connection go:

    handler                Database.execute()               database
       │                          │                             │
       │  statement ────────────► │                             │
       │                          ├── engine.connect() ───────► │  (new socket)
       │                          ├── conn.execute(stmt) ─────► │  bound params
       │                          ├── conn.commit() ──────────► │
       │                          └── conn.close() ───────────► │  (released)
       │  ◄──────────── rowcount  │                             │

The engine uses NullPool, so connect() really does open a fresh
connection each time. Pooling would be the obvious next step for
throughput; it is left out so each request stays fully self-contained.

=============================================================================
ERROR TRANSLATION
=============================================================================

    engine creation / connect() fails   →  ConnectionFailure
    execute() / commit() fails          →  StatementFailure
    create_all() at startup fails       →  SchemaBootstrapError

The original SQLAlchemy exception is always chained as __cause__.

=============================================================================
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool
from sqlalchemy.sql.expression import Executable

from .errors import ConnectionFailure, SchemaBootstrapError, StatementFailure


logger = logging.getLogger(__name__)


metadata = MetaData()

# Renders as "id SERIAL PRIMARY KEY, name VARCHAR NOT NULL, email VARCHAR NOT NULL"
# on PostgreSQL.
users_table = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("email", String, nullable=False),
)


class Database:
    """Lazily builds an unpooled engine and runs single statements on it."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        self._echo = echo
        self._engine: Optional[Engine] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            try:
                self._engine = create_engine(
                    self.url,
                    echo=self._echo,
                    poolclass=NullPool,
                )
            except (SQLAlchemyError, ImportError) as e:
                # bad URL or missing DBAPI driver
                raise ConnectionFailure(f"Cannot create engine: {e}") from e
        return self._engine

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """
        Open a fresh connection and close it on exit.

        Raises:
            ConnectionFailure: if the database cannot be reached.
        """
        try:
            conn = self.engine.connect()
        except SQLAlchemyError as e:
            raise ConnectionFailure(f"Cannot connect to database: {e}") from e

        try:
            yield conn
        finally:
            conn.close()

    def execute(self, statement: Executable) -> int:
        """
        Run one statement on a fresh connection and commit it.

        Returns:
            The number of rows affected.

        Raises:
            ConnectionFailure: if the connection could not be opened.
            StatementFailure: if the statement or the commit failed.
        """
        with self.connect() as conn:
            try:
                result = conn.execute(statement)
                conn.commit()
            except SQLAlchemyError as e:
                raise StatementFailure(f"Statement failed: {e}") from e

            logger.debug(f"Statement affected {result.rowcount} row(s)")
            return result.rowcount

    def bootstrap_schema(self) -> None:
        """
        Create the users table if it does not exist yet.

        Safe to run against an already initialized database.

        Raises:
            SchemaBootstrapError: with the underlying failure as its cause.
        """
        try:
            with self.connect() as conn:
                metadata.create_all(conn, checkfirst=True)
                conn.commit()
        except (ConnectionFailure, SQLAlchemyError) as e:
            raise SchemaBootstrapError(f"Error setting up database: {e}") from e

        logger.info("Database schema ready")

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
