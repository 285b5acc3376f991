"""Command-line entrypoint for pg-seedling."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pg_seedling import __version__

logger = logging.getLogger(__name__)

MISSING_DEPENDENCIES = (
    "Runtime dependencies are missing. "
    "Install project dependencies first (pip install -e .)."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pg-seedling",
        description=(
            "Generate realistic seed rows for a PostgreSQL table with an LLM, "
            "then insert them or export them to a seed file."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR). Overrides SEEDLING_LOG_LEVEL.",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("version", help="Display the version of pg-seedling.")
    subparsers.add_parser(
        "config-check",
        help="Validate environment configuration for pg-seedling.",
    )
    describe_parser = subparsers.add_parser(
        "describe",
        help="Show the model description sent to the LLM.",
    )
    describe_parser.add_argument("model", help="Model or table name, e.g. User or public.users.")
    describe_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the description as JSON instead of the prompt summary.",
    )
    seed_parser = subparsers.add_parser(
        "seed",
        help="Generate seed data for the specified model.",
    )
    seed_parser.add_argument("model", help="Model or table name, e.g. User or public.users.")
    seed_parser.add_argument(
        "--count",
        type=int,
        default=10,
        help="Number of records to generate (default: 10).",
    )
    seed_parser.add_argument(
        "--context",
        default=None,
        help="Additional natural-language context to guide data generation.",
    )
    seed_parser.add_argument(
        "--export",
        default=None,
        help="Export generated data to a file (yaml or json) instead of inserting it.",
    )
    seed_parser.add_argument(
        "--model-id",
        default=None,
        help="OpenAI model identifier. Overrides OPENAI_MODEL.",
    )
    return parser


def _load_settings(args: argparse.Namespace):
    from pg_seedling.config import load_settings
    from pg_seedling.logging_config import configure_logging

    settings = load_settings(
        log_level=args.log_level,
        openai_model=getattr(args, "model_id", None),
    )
    configure_logging(settings.log_level)
    return settings


def _run_seed(args: argparse.Namespace) -> int:
    try:
        import psycopg

        from pg_seedling.config import ConfigurationError
        from pg_seedling.db.connection import DatabaseConnectionError
        from pg_seedling.db.introspect import IntrospectionError
        from pg_seedling.llm import (
            JsonExtractionError,
            RemoteServiceError,
            ResponseShapeError,
        )
        from pg_seedling.schema.describer import (
            AbstractModelError,
            MissingParentDataError,
            ModelNotFoundError,
        )
        from pg_seedling.seeding.orchestrator import (
            GeneratedDataError,
            InvalidArgumentError,
            build_orchestrator,
        )
    except ModuleNotFoundError:
        print(MISSING_DEPENDENCIES, file=sys.stderr)
        return 2

    try:
        settings = _load_settings(args)
        settings.validate_llm_requirements()
        orchestrator = build_orchestrator(settings)
        result = orchestrator.run(
            args.model,
            count=args.count,
            context=args.context,
            export_format=args.export,
        )
    except ConfigurationError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        return 2
    except (
        InvalidArgumentError,
        ModelNotFoundError,
        AbstractModelError,
        MissingParentDataError,
    ) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except JsonExtractionError:
        print("Error: Invalid JSON returned from AI. Check logs for details.", file=sys.stderr)
        return 1
    except ResponseShapeError as exc:
        print(f"Error: Unexpected response shape from AI: {exc}", file=sys.stderr)
        return 1
    except (RemoteServiceError, GeneratedDataError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except (IntrospectionError, DatabaseConnectionError) as exc:
        print(f"Database error: {exc}", file=sys.stderr)
        return 1
    except psycopg.Error as exc:
        print(f"Failed to insert records: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        logger.debug("Unhandled error", exc_info=True)
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 1

    if result.export_path is not None:
        print(f"Exported {len(result.records)} {result.model} records to {result.export_path}")
    else:
        print(f"Inserted {len(result.records)} records into {result.storage_name}")
    return 0


def _run_describe(args: argparse.Namespace) -> int:
    try:
        from pg_seedling.config import ConfigurationError
        from pg_seedling.db.introspect import IntrospectionError
        from pg_seedling.prompts.seed_generation import render_association_constraints
        from pg_seedling.schema.describer import (
            AbstractModelError,
            MissingParentDataError,
            ModelNotFoundError,
            SchemaDescriber,
        )
        from pg_seedling.schema.postgres import PostgresSchemaProvider
    except ModuleNotFoundError:
        print(MISSING_DEPENDENCIES, file=sys.stderr)
        return 2

    try:
        settings = _load_settings(args)
        describer = SchemaDescriber(
            PostgresSchemaProvider(
                settings.postgres_dsn,
                default_schema=settings.default_schema,
            )
        )
        description = describer.describe(args.model)
        constraints = describer.resolve_required_associations(args.model)
    except ConfigurationError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        return 2
    except (ModelNotFoundError, AbstractModelError, MissingParentDataError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except IntrospectionError as exc:
        print(f"Database error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        payload = description.to_dict()
        payload["required_associations"] = [
            {
                "foreign_key": constraint.foreign_key,
                "related_model": constraint.related_model,
                "sampled_ids": list(constraint.sampled_ids),
            }
            for constraint in constraints
        ]
        print(json.dumps(payload, indent=2, default=str))
    else:
        print(description.summary(), end="")
        if constraints:
            print()
            print(render_association_constraints(constraints))
    return 0


def _run_config_check(args: argparse.Namespace) -> int:
    try:
        from pg_seedling.config import ConfigurationError
    except ModuleNotFoundError:
        print(
            "Configuration tooling dependencies are missing. "
            "Install project dependencies first (pip install -e .).",
            file=sys.stderr,
        )
        return 2

    try:
        settings = _load_settings(args)
    except ConfigurationError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        return 2

    print("Configuration loaded successfully:")
    for name, value in settings.redacted().items():
        print(f"- {name}: {value}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "version":
        print(f"pg-seedling version {__version__}")
        return 0

    if args.command == "config-check":
        return _run_config_check(args)

    if args.command == "describe":
        return _run_describe(args)

    if args.command == "seed":
        return _run_seed(args)

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
