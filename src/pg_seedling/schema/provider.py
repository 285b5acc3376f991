"""Schema provider capability interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

BELONGS_TO = "belongs_to"
HAS_ONE = "has_one"
HAS_MANY = "has_many"


@dataclass(frozen=True)
class ModelHandle:
    """Opaque reference to a data model known to a schema provider."""

    name: str
    storage_name: str
    schema: str = "public"
    abstract: bool = False


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    data_type: str
    nullable: bool = True
    has_default: bool = False
    max_length: int | None = None
    primary_key: bool = False


@dataclass(frozen=True)
class ValidationRule:
    """One declared validation; ``attributes`` holds unique names in column order."""

    attributes: tuple[str, ...]
    kind: str


@dataclass(frozen=True)
class RelationSpec:
    name: str
    kind: str
    foreign_key: str
    related_model: str
    related_key: str = "id"
    nullable: bool = True
    polymorphic: bool = False

    @property
    def composite(self) -> bool:
        return "," in self.foreign_key


class SchemaProvider(ABC):
    """Answers introspection questions about the data models of one store."""

    @abstractmethod
    def resolve(self, name: str) -> ModelHandle | None:
        """Resolve a model name, returning ``None`` when nothing matches."""

    @abstractmethod
    def columns(self, model: ModelHandle) -> list[ColumnSpec]:
        """Columns in schema order."""

    @abstractmethod
    def validations(self, model: ModelHandle) -> list[ValidationRule]:
        """Declared validation rules."""

    @abstractmethod
    def relations(self, model: ModelHandle) -> list[RelationSpec]:
        """Declared relations, outgoing and incoming."""

    @abstractmethod
    def fetch_existing_ids(
        self,
        related_model: str,
        limit: int,
        key_column: str = "id",
    ) -> list[Any]:
        """Existing identifiers of ``related_model`` in a stable order."""
