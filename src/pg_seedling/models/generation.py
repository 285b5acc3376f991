"""Typed request sent to the remote text-generation service."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

JSON_INSTRUCTIONS = (
    "You are a JSON generator.\n"
    "You must return valid JSON only.\n"
    "Do not include markdown, code fences, comments, or explanations.\n"
    "The output must be directly parseable by a strict JSON parser."
)

DEFAULT_MAX_OUTPUT_TOKENS = 2048
DEFAULT_TEMPERATURE = 0.3

GeneratedRecord = dict[str, Any]


class GenerationRequest(BaseModel):
    """Body of a Responses API call with the JSON-only contract."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    model: str = Field(min_length=1)
    input: str
    instructions: str = JSON_INSTRUCTIONS
    max_output_tokens: int = Field(default=DEFAULT_MAX_OUTPUT_TOKENS, gt=0)
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
