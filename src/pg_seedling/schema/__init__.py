"""Schema description and provider helpers."""

from pg_seedling.schema.describer import (
    MAX_ASSOCIATION_IDS,
    AbstractModelError,
    Association,
    AssociationConstraint,
    MissingParentDataError,
    ModelDescription,
    ModelNotFoundError,
    SchemaDescriber,
    Validation,
)
from pg_seedling.schema.provider import (
    ColumnSpec,
    ModelHandle,
    RelationSpec,
    SchemaProvider,
    ValidationRule,
)

__all__ = [
    "MAX_ASSOCIATION_IDS",
    "AbstractModelError",
    "Association",
    "AssociationConstraint",
    "ColumnSpec",
    "MissingParentDataError",
    "ModelDescription",
    "ModelHandle",
    "ModelNotFoundError",
    "RelationSpec",
    "SchemaDescriber",
    "SchemaProvider",
    "Validation",
    "ValidationRule",
]
