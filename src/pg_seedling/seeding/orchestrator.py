"""Coordinate description, prompting, generation and persistence for one run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pg_seedling.config import Settings
from pg_seedling.llm import RecordGenerator, create_record_generator
from pg_seedling.models.generation import GeneratedRecord
from pg_seedling.prompts.seed_generation import build_seed_prompt
from pg_seedling.schema.describer import SchemaDescriber
from pg_seedling.schema.provider import ModelHandle, SchemaProvider
from pg_seedling.seeding.export import (
    EXPORT_FORMATS,
    export_path,
    serialize_records,
    write_atomic,
)
from pg_seedling.seeding.persistence import PersistenceEngine

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 10


class InvalidArgumentError(ValueError):
    """Raised when run arguments are invalid."""


class GeneratedDataError(RuntimeError):
    """Raised when generated JSON is not an array of objects."""


@dataclass(frozen=True)
class SeedResult:
    model: str
    storage_name: str
    requested: int
    records: list[GeneratedRecord] = field(default_factory=list)
    export_path: Path | None = None

    @property
    def inserted(self) -> bool:
        return self.export_path is None


def _validate_count(count: Any) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidArgumentError("count must be an integer >= 1")
    if count < 1:
        raise InvalidArgumentError("count must be >= 1")
    return count


def _validate_export_format(export_format: str | None) -> str | None:
    if export_format is None:
        return None
    normalized = export_format.strip().lower()
    if normalized not in EXPORT_FORMATS:
        raise InvalidArgumentError(
            f"Export format must be one of {', '.join(EXPORT_FORMATS)}"
        )
    return normalized


def _coerce_records(payload: Any) -> list[GeneratedRecord]:
    if isinstance(payload, dict):
        return [payload]
    if not isinstance(payload, list):
        raise GeneratedDataError(
            f"Generated JSON must be an array of objects, got {type(payload).__name__}"
        )
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise GeneratedDataError(
                f"Generated JSON item {index} is {type(item).__name__}, expected an object"
            )
    return list(payload)


class SeedingOrchestrator:
    """Run one seeding request end to end.

    Exactly one side effect happens per successful run: a transactional
    insert, or an export file when ``export_format`` is given.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        provider: SchemaProvider,
        persistence: PersistenceEngine,
        generator: RecordGenerator | None = None,
    ):
        self.settings = settings
        self.describer = SchemaDescriber(provider)
        self.persistence = persistence
        self.generator = generator or create_record_generator(settings)

    def run(
        self,
        model_name: str,
        count: int = DEFAULT_COUNT,
        context: str | None = None,
        export_format: str | None = None,
    ) -> SeedResult:
        count = _validate_count(count)
        export_format = _validate_export_format(export_format)

        handle = self.describer.find_model(model_name)
        logger.info("Generating %d %s records...", count, handle.name)

        description = self.describer.describe(handle)
        constraints = self.describer.resolve_required_associations(handle)
        prompt = build_seed_prompt(
            description,
            count,
            context=context,
            constraints=constraints,
        )

        records = _coerce_records(self.generator.generate(prompt))
        if len(records) != count:
            logger.warning(
                "Requested %d %s records but received %d",
                count,
                handle.name,
                len(records),
            )

        if export_format is None:
            self._insert(handle, records)
            return SeedResult(
                model=handle.name,
                storage_name=handle.storage_name,
                requested=count,
                records=records,
            )

        path = self._export(handle, records, export_format)
        return SeedResult(
            model=handle.name,
            storage_name=handle.storage_name,
            requested=count,
            records=records,
            export_path=path,
        )

    def _insert(self, handle: ModelHandle, records: list[GeneratedRecord]) -> None:
        try:
            with self.persistence.begin_transaction() as scope:
                scope.bulk_insert(handle, records)
        except Exception as exc:
            logger.error("Failed to insert records - %s", exc)
            logger.debug("Insert failure traceback", exc_info=True)
            raise
        logger.info("Inserted %d records into %s", len(records), handle.storage_name)

    def _export(
        self,
        handle: ModelHandle,
        records: list[GeneratedRecord],
        export_format: str,
    ) -> Path:
        path = export_path(self.settings.seeds_dir, handle.storage_name, export_format)
        write_atomic(path, serialize_records(records, export_format))
        logger.info("Exported %d records to %s", len(records), path)
        return path


def build_orchestrator(settings: Settings) -> SeedingOrchestrator:
    """Wire the PostgreSQL provider and persistence with the OpenAI generator."""
    from pg_seedling.db.writer import PostgresPersistence
    from pg_seedling.schema.postgres import PostgresSchemaProvider

    return SeedingOrchestrator(
        settings,
        provider=PostgresSchemaProvider(
            settings.postgres_dsn,
            default_schema=settings.default_schema,
        ),
        persistence=PostgresPersistence(settings.postgres_dsn),
        generator=create_record_generator(settings),
    )
