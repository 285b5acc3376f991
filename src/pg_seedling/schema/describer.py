"""Turn a data model into a structured, prompt-ready description."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pg_seedling.schema.provider import (
    BELONGS_TO,
    ModelHandle,
    SchemaProvider,
)

logger = logging.getLogger(__name__)

MAX_ASSOCIATION_IDS = 50


class ModelNotFoundError(ValueError):
    """Raised when a name does not resolve to a known data model."""


class AbstractModelError(ValueError):
    """Raised when a model exists but cannot hold rows."""


class MissingParentDataError(RuntimeError):
    """Raised when a required association has no existing parent rows."""


@dataclass(frozen=True)
class Validation:
    attributes: tuple[str, ...]
    kind: str

    def to_dict(self) -> dict[str, object]:
        return {"attributes": list(self.attributes), "kind": self.kind}


@dataclass(frozen=True)
class Association:
    name: str
    kind: str
    foreign_key: str
    related_model: str

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "kind": self.kind,
            "foreign_key": self.foreign_key,
            "related_model": self.related_model,
        }


@dataclass(frozen=True)
class AssociationConstraint:
    """Existing identifiers a generated foreign key must be chosen from."""

    foreign_key: str
    related_model: str
    sampled_ids: tuple[Any, ...]


@dataclass(frozen=True)
class ModelDescription:
    """Immutable description of one data model."""

    name: str
    storage_name: str
    attributes: dict[str, str] = field(default_factory=dict)
    validations: tuple[Validation, ...] = ()
    associations: tuple[Association, ...] = ()

    def summary(self) -> str:
        attributes = ", ".join(
            f"{name}: {data_type}" for name, data_type in self.attributes.items()
        )
        validations = ", ".join(
            f"{', '.join(validation.attributes)} -> {validation.kind}"
            for validation in self.validations
        )
        associations = ", ".join(
            f"{association.kind}: {association.name}"
            for association in self.associations
        )
        return (
            f"Model: {self.name}\n"
            f"Attributes: {attributes}\n"
            f"Validations: {validations}\n"
            f"Associations: {associations}\n"
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "model": self.name,
            "storage_name": self.storage_name,
            "attributes": dict(self.attributes),
            "validations": [validation.to_dict() for validation in self.validations],
            "associations": [association.to_dict() for association in self.associations],
        }


class SchemaDescriber:
    """Describe models and their required parent data using a schema provider."""

    def __init__(self, provider: SchemaProvider):
        self.provider = provider

    def find_model(self, name: str) -> ModelHandle:
        handle = self.provider.resolve(name)
        if handle is None:
            raise ModelNotFoundError(f"Model '{name}' not found")
        if handle.abstract:
            raise AbstractModelError(
                f"Model '{name}' is abstract and cannot be seeded directly"
            )
        return handle

    def _handle(self, model: ModelHandle | str) -> ModelHandle:
        if isinstance(model, ModelHandle):
            if model.abstract:
                raise AbstractModelError(
                    f"Model '{model.name}' is abstract and cannot be seeded directly"
                )
            return model
        return self.find_model(model)

    def describe(self, model: ModelHandle | str) -> ModelDescription:
        handle = self._handle(model)

        attributes: dict[str, str] = {}
        for column in self.provider.columns(handle):
            if column.name in attributes:
                raise ValueError(
                    f"Model '{handle.name}' declares attribute '{column.name}' twice"
                )
            attributes[column.name] = column.data_type

        validations = tuple(
            Validation(
                attributes=tuple(dict.fromkeys(rule.attributes)),
                kind=rule.kind.lower(),
            )
            for rule in self.provider.validations(handle)
        )
        associations = tuple(
            Association(
                name=relation.name,
                kind=relation.kind,
                foreign_key=relation.foreign_key,
                related_model=relation.related_model,
            )
            for relation in self.provider.relations(handle)
        )

        description = ModelDescription(
            name=handle.name,
            storage_name=handle.storage_name,
            attributes=attributes,
            validations=validations,
            associations=associations,
        )
        logger.debug("Described model %s:\n%s", handle.name, description.summary())
        return description

    def resolve_required_associations(
        self,
        model: ModelHandle | str,
    ) -> list[AssociationConstraint]:
        """Sample parent ids for every mandatory single-valued relation.

        Raises ``MissingParentDataError`` as soon as one parent table is empty.
        """
        handle = self._handle(model)
        constraints: list[AssociationConstraint] = []

        for relation in self.provider.relations(handle):
            if relation.kind != BELONGS_TO or relation.polymorphic or relation.nullable:
                continue
            if relation.composite:
                logger.warning(
                    "Skipping composite association %s on %s; no single key to sample",
                    relation.name,
                    handle.name,
                )
                continue

            ids = self.provider.fetch_existing_ids(
                relation.related_model,
                MAX_ASSOCIATION_IDS,
                key_column=relation.related_key,
            )
            if not ids:
                raise MissingParentDataError(
                    f"Cannot seed {handle.name} because it requires "
                    f"{relation.related_model} records, but none exist in the database."
                )

            constraints.append(
                AssociationConstraint(
                    foreign_key=relation.foreign_key,
                    related_model=relation.related_model,
                    sampled_ids=tuple(ids[:MAX_ASSOCIATION_IDS]),
                )
            )
            logger.debug(
                "Sampled %d %s ids for %s.%s",
                len(ids),
                relation.related_model,
                handle.name,
                relation.foreign_key,
            )
        return constraints
