"""Typed payloads exchanged with the generation service."""

from pg_seedling.models.generation import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_TEMPERATURE,
    JSON_INSTRUCTIONS,
    GeneratedRecord,
    GenerationRequest,
)

__all__ = [
    "DEFAULT_MAX_OUTPUT_TOKENS",
    "DEFAULT_TEMPERATURE",
    "JSON_INSTRUCTIONS",
    "GeneratedRecord",
    "GenerationRequest",
]
