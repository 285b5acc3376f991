"""Transactional bulk inserts into PostgreSQL."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Sequence

import psycopg
from psycopg import sql
from psycopg.types.json import Jsonb

from pg_seedling.db.connection import connect_readwrite
from pg_seedling.db.queries import COLUMNS_QUERY
from pg_seedling.schema.provider import ModelHandle
from pg_seedling.seeding.persistence import PersistenceEngine, TransactionScope

logger = logging.getLogger(__name__)

JSON_TYPES = frozenset({"json", "jsonb"})
DEFAULT_BATCH_SIZE = 100


def _adapt_value(value: Any, data_type: str | None) -> Any:
    if isinstance(value, dict):
        return Jsonb(value)
    if isinstance(value, list) and data_type in JSON_TYPES:
        return Jsonb(value)
    return value


def _insert_statement(model: ModelHandle, columns: Sequence[str], row_count: int) -> sql.Composed:
    row = sql.SQL("({})").format(sql.SQL(", ").join(sql.Placeholder() * len(columns)))
    return sql.SQL("INSERT INTO {table} ({columns}) VALUES {rows}").format(
        table=sql.Identifier(model.schema, model.storage_name),
        columns=sql.SQL(", ").join(sql.Identifier(column) for column in columns),
        rows=sql.SQL(", ").join([row] * row_count),
    )


class PostgresTransactionScope(TransactionScope):
    """Insert records on a connection that already has a transaction open."""

    def __init__(self, conn: psycopg.Connection, batch_size: int = DEFAULT_BATCH_SIZE):
        self._conn = conn
        self._batch_size = batch_size

    def _column_types(self, model: ModelHandle) -> dict[str, str]:
        with self._conn.cursor() as cur:
            cur.execute(COLUMNS_QUERY, {"schema": model.schema, "table": model.storage_name})
            return {row[0]: row[1] for row in cur.fetchall()}

    def bulk_insert(
        self,
        model: ModelHandle,
        records: Sequence[Mapping[str, Any]],
    ) -> int:
        if not records:
            return 0

        column_types = self._column_types(model)
        ordering = {name: index for index, name in enumerate(column_types)}

        # Records may omit different columns; each key set becomes its own statement.
        groups: dict[tuple[str, ...], list[Mapping[str, Any]]] = {}
        for record in records:
            columns = tuple(
                sorted(record, key=lambda name: (ordering.get(name, len(ordering)), name))
            )
            groups.setdefault(columns, []).append(record)

        with self._conn.cursor() as cur:
            for columns, rows in groups.items():
                if not columns:
                    default_insert = sql.SQL("INSERT INTO {table} DEFAULT VALUES").format(
                        table=sql.Identifier(model.schema, model.storage_name)
                    )
                    for _ in rows:
                        cur.execute(default_insert)
                    continue

                for start in range(0, len(rows), self._batch_size):
                    batch = rows[start : start + self._batch_size]
                    values = [
                        _adapt_value(row[column], column_types.get(column))
                        for row in batch
                        for column in columns
                    ]
                    cur.execute(_insert_statement(model, columns, len(batch)), values)

        logger.debug(
            "Inserted %d rows into %s.%s in %d statement group(s)",
            len(records),
            model.schema,
            model.storage_name,
            len(groups),
        )
        return len(records)


class PostgresPersistence(PersistenceEngine):
    """Persistence engine backed by a read-write PostgreSQL connection."""

    def __init__(self, postgres_dsn: str, batch_size: int = DEFAULT_BATCH_SIZE):
        self.postgres_dsn = postgres_dsn
        self.batch_size = batch_size

    @contextmanager
    def begin_transaction(self) -> Iterator[TransactionScope]:
        with connect_readwrite(self.postgres_dsn) as conn:
            with conn.transaction():
                yield PostgresTransactionScope(conn, batch_size=self.batch_size)
