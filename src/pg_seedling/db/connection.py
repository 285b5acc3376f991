"""PostgreSQL connection utilities."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import psycopg


class DatabaseConnectionError(RuntimeError):
    """Raised when a PostgreSQL connection cannot be established."""


@contextmanager
def connect_readonly(postgres_dsn: str) -> Iterator[psycopg.Connection]:
    """Open a PostgreSQL connection configured as read-only by default."""
    try:
        conn = psycopg.connect(
            postgres_dsn,
            connect_timeout=5,
            options="-c default_transaction_read_only=on",
        )
    except psycopg.Error as exc:
        raise DatabaseConnectionError(
            f"Could not connect to PostgreSQL with provided DSN: {exc}"
        ) from exc

    with conn:
        yield conn


@contextmanager
def connect_readwrite(postgres_dsn: str) -> Iterator[psycopg.Connection]:
    """Open an autocommit connection; callers scope writes with ``transaction()``."""
    try:
        conn = psycopg.connect(postgres_dsn, connect_timeout=5, autocommit=True)
    except psycopg.Error as exc:
        raise DatabaseConnectionError(
            f"Could not connect to PostgreSQL with provided DSN: {exc}"
        ) from exc

    with conn:
        yield conn
