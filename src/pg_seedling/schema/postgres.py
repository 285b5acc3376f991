"""Schema provider backed by PostgreSQL catalog introspection."""

from __future__ import annotations

import logging
from typing import Any

from pg_seedling.db.introspect import (
    TableInfo,
    fetch_key_values,
    introspect_table,
    list_relations,
)
from pg_seedling.schema.constraints import classify_check
from pg_seedling.schema.naming import classify, pluralize, singularize, tableize, underscore
from pg_seedling.schema.provider import (
    BELONGS_TO,
    HAS_MANY,
    HAS_ONE,
    ColumnSpec,
    ModelHandle,
    RelationSpec,
    SchemaProvider,
    ValidationRule,
)

logger = logging.getLogger(__name__)

CHARACTER_TYPES = frozenset({"character varying", "character", "varchar", "char"})


def _association_name(foreign_key: str, referenced_table: str) -> str:
    if foreign_key.endswith("_id") and len(foreign_key) > 3:
        return foreign_key[: -len("_id")]
    return singularize(referenced_table)


class PostgresSchemaProvider(SchemaProvider):
    """Treat each table of a PostgreSQL schema as a data model.

    Views resolve to abstract models: they exist but cannot hold rows.
    """

    def __init__(self, postgres_dsn: str, default_schema: str = "public"):
        self.postgres_dsn = postgres_dsn
        self.default_schema = default_schema
        self._relations: dict[str, dict[str, str]] = {}
        self._tables: dict[tuple[str, str], TableInfo] = {}

    def _relations_in(self, schema: str) -> dict[str, str]:
        if schema not in self._relations:
            self._relations[schema] = list_relations(self.postgres_dsn, schema)
        return self._relations[schema]

    def _table(self, model: ModelHandle) -> TableInfo:
        key = (model.schema, model.storage_name)
        if key not in self._tables:
            table_type = self._relations_in(model.schema).get(model.storage_name, "BASE TABLE")
            self._tables[key] = introspect_table(
                self.postgres_dsn,
                model.schema,
                model.storage_name,
                table_type=table_type,
            )
        return self._tables[key]

    def _split_name(self, name: str) -> tuple[str, str]:
        schema, sep, table = name.strip().rpartition(".")
        if sep and schema:
            return schema, table
        return self.default_schema, table

    def resolve(self, name: str) -> ModelHandle | None:
        schema, bare = self._split_name(name)
        if not bare:
            return None
        relations = self._relations_in(schema)

        candidates = [bare, underscore(bare), tableize(bare), pluralize(bare.lower())]
        lowered = {relation.lower(): relation for relation in relations}
        for candidate in candidates:
            match = candidate if candidate in relations else lowered.get(candidate.lower())
            if match is None:
                continue
            table_type = relations[match]
            logger.debug("Resolved model %r to %s.%s (%s)", name, schema, match, table_type)
            return ModelHandle(
                name=classify(match),
                storage_name=match,
                schema=schema,
                abstract=table_type != "BASE TABLE",
            )
        return None

    def columns(self, model: ModelHandle) -> list[ColumnSpec]:
        table = self._table(model)
        primary_key = set(table.primary_key)
        return [
            ColumnSpec(
                name=column.name,
                data_type=column.data_type,
                nullable=column.nullable,
                has_default=column.has_default,
                max_length=column.max_length,
                primary_key=column.name in primary_key,
            )
            for column in table.columns.values()
        ]

    def validations(self, model: ModelHandle) -> list[ValidationRule]:
        table = self._table(model)
        primary_key = set(table.primary_key)
        foreign_key_columns = {
            column for fk in table.foreign_keys for column in fk.columns
        }
        rules: list[ValidationRule] = []

        for column in table.columns.values():
            if column.name in primary_key:
                continue
            # Required foreign keys surface as associations, not presence rules.
            if (
                not column.nullable
                and not column.has_default
                and column.name not in foreign_key_columns
            ):
                rules.append(ValidationRule(attributes=(column.name,), kind="presence"))
            if column.max_length is not None and column.data_type in CHARACTER_TYPES:
                rules.append(ValidationRule(attributes=(column.name,), kind="length"))

        for constraint in table.unique_constraints:
            rules.append(
                ValidationRule(attributes=tuple(constraint.columns), kind="uniqueness")
            )

        for constraint in table.check_constraints:
            rules.append(
                ValidationRule(
                    attributes=tuple(dict.fromkeys(constraint.columns)),
                    kind=classify_check(constraint.definition),
                )
            )
        return rules

    def relations(self, model: ModelHandle) -> list[RelationSpec]:
        table = self._table(model)
        relations: list[RelationSpec] = []

        for fk in table.foreign_keys:
            referenced = fk.references
            related_model = (
                referenced.table
                if referenced.schema == model.schema
                else f"{referenced.schema}.{referenced.table}"
            )
            foreign_key = ", ".join(fk.columns)
            nullable = any(
                table.columns[column].nullable
                for column in fk.columns
                if column in table.columns
            )
            relations.append(
                RelationSpec(
                    name=_association_name(foreign_key, referenced.table),
                    kind=BELONGS_TO,
                    foreign_key=foreign_key,
                    related_model=related_model,
                    related_key=", ".join(referenced.columns),
                    nullable=nullable,
                )
            )

        for incoming in table.referenced_by:
            related_model = (
                incoming.table
                if incoming.schema == model.schema
                else f"{incoming.schema}.{incoming.table}"
            )
            relations.append(
                RelationSpec(
                    name=singularize(incoming.table) if incoming.unique else incoming.table,
                    kind=HAS_ONE if incoming.unique else HAS_MANY,
                    foreign_key=incoming.column,
                    related_model=related_model,
                    related_key=incoming.referenced_column,
                )
            )
        return relations

    def fetch_existing_ids(
        self,
        related_model: str,
        limit: int,
        key_column: str = "id",
    ) -> list[Any]:
        schema, table_name = self._split_name(related_model)
        return fetch_key_values(self.postgres_dsn, schema, table_name, key_column, limit)
