"""Database helpers for pg-seedling."""

from pg_seedling.db.connection import (
    DatabaseConnectionError,
    connect_readonly,
    connect_readwrite,
)
from pg_seedling.db.introspect import (
    IntrospectionError,
    TableInfo,
    introspect_table,
    list_relations,
)
from pg_seedling.db.writer import PostgresPersistence

__all__ = [
    "DatabaseConnectionError",
    "IntrospectionError",
    "PostgresPersistence",
    "TableInfo",
    "connect_readonly",
    "connect_readwrite",
    "introspect_table",
    "list_relations",
]
