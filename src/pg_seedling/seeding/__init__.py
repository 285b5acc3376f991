"""Seeding orchestration, persistence interface and export helpers."""

from pg_seedling.seeding.export import EXPORT_FORMATS, serialize_records, write_atomic
from pg_seedling.seeding.orchestrator import (
    GeneratedDataError,
    InvalidArgumentError,
    SeedingOrchestrator,
    SeedResult,
    build_orchestrator,
)
from pg_seedling.seeding.persistence import PersistenceEngine, TransactionScope

__all__ = [
    "EXPORT_FORMATS",
    "GeneratedDataError",
    "InvalidArgumentError",
    "PersistenceEngine",
    "SeedResult",
    "SeedingOrchestrator",
    "TransactionScope",
    "build_orchestrator",
    "serialize_records",
    "write_atomic",
]
