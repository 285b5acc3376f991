"""PostgreSQL single-table introspection with normalized output models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import psycopg
from psycopg import sql

from pg_seedling.db.connection import DatabaseConnectionError, connect_readonly
from pg_seedling.db.queries import (
    CHECK_CONSTRAINTS_QUERY,
    COLUMNS_QUERY,
    INCOMING_FOREIGN_KEYS_QUERY,
    OUTGOING_FOREIGN_KEYS_QUERY,
    PRIMARY_KEY_QUERY,
    RELATIONS_QUERY,
    UNIQUE_CONSTRAINTS_QUERY,
)


class IntrospectionError(RuntimeError):
    """Raised when schema introspection fails."""


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    data_type: str
    nullable: bool
    has_default: bool = False
    max_length: int | None = None


@dataclass(frozen=True)
class ForeignKeyReference:
    schema: str
    table: str
    columns: list[str]


@dataclass(frozen=True)
class ForeignKeyInfo:
    name: str
    columns: list[str]
    references: ForeignKeyReference


@dataclass(frozen=True)
class IncomingForeignKeyInfo:
    """A single-column foreign key on another table pointing at this one."""

    name: str
    schema: str
    table: str
    column: str
    referenced_column: str
    unique: bool


@dataclass(frozen=True)
class UniqueConstraintInfo:
    name: str
    columns: list[str]


@dataclass(frozen=True)
class CheckConstraintInfo:
    name: str
    columns: list[str]
    definition: str


@dataclass
class TableInfo:
    schema: str
    name: str
    table_type: str
    columns: dict[str, ColumnInfo] = field(default_factory=dict)
    primary_key: list[str] = field(default_factory=list)
    foreign_keys: list[ForeignKeyInfo] = field(default_factory=list)
    referenced_by: list[IncomingForeignKeyInfo] = field(default_factory=list)
    unique_constraints: list[UniqueConstraintInfo] = field(default_factory=list)
    check_constraints: list[CheckConstraintInfo] = field(default_factory=list)


def list_relations(postgres_dsn: str, schema: str) -> dict[str, str]:
    """Return ``table_name -> table_type`` for tables and views in a schema."""
    try:
        with connect_readonly(postgres_dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(RELATIONS_QUERY, {"schema": schema})
                return {name: table_type for name, table_type in cur.fetchall()}
    except DatabaseConnectionError as exc:
        raise IntrospectionError(str(exc)) from exc
    except psycopg.Error as exc:
        raise IntrospectionError(f"Could not list relations in '{schema}': {exc}") from exc


def introspect_table(
    postgres_dsn: str,
    schema: str,
    table_name: str,
    table_type: str = "BASE TABLE",
) -> TableInfo:
    """Introspect columns, keys and constraints of a single table or view."""
    params = {"schema": schema, "table": table_name}
    table = TableInfo(schema=schema, name=table_name, table_type=table_type)

    try:
        with connect_readonly(postgres_dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(COLUMNS_QUERY, params)
                for (
                    column_name,
                    data_type,
                    is_nullable,
                    has_default,
                    max_length,
                    _ordinal,
                ) in cur.fetchall():
                    table.columns[column_name] = ColumnInfo(
                        name=column_name,
                        data_type=data_type,
                        nullable=is_nullable == "YES",
                        has_default=bool(has_default),
                        max_length=max_length,
                    )

                cur.execute(PRIMARY_KEY_QUERY, params)
                table.primary_key = [row[0] for row in cur.fetchall()]

                unique_index: dict[str, list[str]] = {}
                cur.execute(UNIQUE_CONSTRAINTS_QUERY, params)
                for constraint_name, column_name, _position in cur.fetchall():
                    unique_index.setdefault(constraint_name, []).append(column_name)
                table.unique_constraints = [
                    UniqueConstraintInfo(name=name, columns=columns)
                    for name, columns in unique_index.items()
                ]

                cur.execute(CHECK_CONSTRAINTS_QUERY, params)
                table.check_constraints = [
                    CheckConstraintInfo(
                        name=constraint_name,
                        columns=list(columns or []),
                        definition=definition,
                    )
                    for constraint_name, columns, definition in cur.fetchall()
                ]

                fk_index: dict[str, dict[str, Any]] = {}
                cur.execute(OUTGOING_FOREIGN_KEYS_QUERY, params)
                for (
                    constraint_name,
                    _position,
                    column_name,
                    ref_table_schema,
                    ref_table_name,
                    ref_column_name,
                ) in cur.fetchall():
                    entry = fk_index.setdefault(
                        constraint_name,
                        {
                            "columns": [],
                            "ref_columns": [],
                            "ref_schema": ref_table_schema,
                            "ref_table": ref_table_name,
                        },
                    )
                    entry["columns"].append(column_name)
                    entry["ref_columns"].append(ref_column_name)

                for constraint_name, entry in fk_index.items():
                    table.foreign_keys.append(
                        ForeignKeyInfo(
                            name=constraint_name,
                            columns=list(entry["columns"]),
                            references=ForeignKeyReference(
                                schema=str(entry["ref_schema"]),
                                table=str(entry["ref_table"]),
                                columns=list(entry["ref_columns"]),
                            ),
                        )
                    )

                incoming: dict[tuple[str, str, str], list[tuple[Any, ...]]] = {}
                cur.execute(INCOMING_FOREIGN_KEYS_QUERY, params)
                for row in cur.fetchall():
                    constraint_name, src_schema, src_table = row[0], row[1], row[2]
                    incoming.setdefault((src_schema, src_table, constraint_name), []).append(row)

                for (src_schema, src_table, constraint_name), rows in incoming.items():
                    # Composite keys have no single association column.
                    if len(rows) != 1:
                        continue
                    _, _, _, column_name, ref_column_name, is_unique = rows[0]
                    table.referenced_by.append(
                        IncomingForeignKeyInfo(
                            name=constraint_name,
                            schema=src_schema,
                            table=src_table,
                            column=column_name,
                            referenced_column=ref_column_name,
                            unique=bool(is_unique),
                        )
                    )
    except DatabaseConnectionError as exc:
        raise IntrospectionError(str(exc)) from exc
    except psycopg.Error as exc:
        raise IntrospectionError(
            f"Could not introspect table '{schema}.{table_name}': {exc}"
        ) from exc

    return table


def fetch_key_values(
    postgres_dsn: str,
    schema: str,
    table_name: str,
    key_column: str,
    limit: int,
) -> list[Any]:
    """Return up to ``limit`` existing key values, ordered by the key."""
    query = sql.SQL("SELECT {key} FROM {table} ORDER BY {key} LIMIT %(limit)s").format(
        key=sql.Identifier(key_column),
        table=sql.Identifier(schema, table_name),
    )
    try:
        with connect_readonly(postgres_dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(query, {"limit": limit})
                return [row[0] for row in cur.fetchall()]
    except DatabaseConnectionError as exc:
        raise IntrospectionError(str(exc)) from exc
    except psycopg.Error as exc:
        raise IntrospectionError(
            f"Could not read existing keys from '{schema}.{table_name}': {exc}"
        ) from exc
