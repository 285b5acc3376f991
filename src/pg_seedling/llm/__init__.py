"""LLM adapters and factory helpers."""

from pg_seedling.config import Settings
from pg_seedling.llm.base import LLMError, RecordGenerator, RemoteServiceError
from pg_seedling.llm.envelope import (
    FlatEnvelope,
    NoAssistantMessageError,
    NoOutputTextError,
    ResponseEnvelope,
    ResponseShapeError,
    StructuredEnvelope,
    extract_output_text,
    parse_envelope,
)
from pg_seedling.llm.openai_adapter import OpenAIAdapter
from pg_seedling.llm.parsing import JsonExtractionError, parse_json_payload, strip_code_fences


def create_record_generator(settings: Settings) -> RecordGenerator:
    """Create the default record generator for current settings."""
    return OpenAIAdapter(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
    )


__all__ = [
    "FlatEnvelope",
    "JsonExtractionError",
    "LLMError",
    "NoAssistantMessageError",
    "NoOutputTextError",
    "OpenAIAdapter",
    "RecordGenerator",
    "RemoteServiceError",
    "ResponseEnvelope",
    "ResponseShapeError",
    "StructuredEnvelope",
    "create_record_generator",
    "extract_output_text",
    "parse_envelope",
    "parse_json_payload",
    "strip_code_fences",
]
