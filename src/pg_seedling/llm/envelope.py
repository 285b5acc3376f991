"""Response envelope shapes returned by the Responses API.

A reply either carries a flat ``output_text`` string or a list of
role-tagged message blocks with typed content entries. Both are modelled
as a tagged union and reduced to text by ``extract_output_text``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

from pg_seedling.llm.base import LLMError

logger = logging.getLogger(__name__)

ASSISTANT_ROLE = "assistant"
OUTPUT_TEXT_TYPE = "output_text"


class ResponseShapeError(LLMError):
    """Raised when the service replied but the envelope holds no usable text."""


class NoAssistantMessageError(ResponseShapeError):
    """Raised when no message block has the assistant role."""


class NoOutputTextError(ResponseShapeError):
    """Raised when the assistant message has no textual content entries."""


@dataclass(frozen=True)
class FlatEnvelope:
    text: str
    raw: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class StructuredEnvelope:
    blocks: tuple[dict[str, Any], ...]
    raw: Any = field(default=None, repr=False, compare=False)


ResponseEnvelope = Union[FlatEnvelope, StructuredEnvelope]


def parse_envelope(payload: Any) -> ResponseEnvelope:
    """Tag a decoded response body with its shape.

    A non-empty ``output_text`` string wins. A blank one is only used when
    there is no ``output`` list to fall back to. Anything else is treated as
    the structured form, where missing or malformed blocks are simply absent.
    """
    if isinstance(payload, dict):
        output_text = payload.get("output_text")
        output = payload.get("output")
        if isinstance(output_text, str) and (
            output_text.strip() or not isinstance(output, list)
        ):
            return FlatEnvelope(text=output_text, raw=payload)
    else:
        output = None

    if not isinstance(output, list):
        return StructuredEnvelope(blocks=(), raw=payload)
    blocks = tuple(block for block in output if isinstance(block, dict))
    return StructuredEnvelope(blocks=blocks, raw=payload)


def extract_output_text(envelope: ResponseEnvelope) -> str:
    """Return the text payload of an envelope, joining text entries by newline."""
    if isinstance(envelope, FlatEnvelope):
        if not envelope.text.strip():
            logger.error("Empty output_text returned in OpenAI response: %r", envelope.raw)
            raise NoOutputTextError("No output_text content in response")
        return envelope.text

    message = next(
        (block for block in envelope.blocks if block.get("role") == ASSISTANT_ROLE),
        None,
    )
    if message is None:
        logger.error(
            "No assistant message returned in OpenAI response: %r", envelope.raw
        )
        raise NoAssistantMessageError("No assistant message in response")

    content = message.get("content")
    entries = content if isinstance(content, list) else []
    texts = [
        str(entry.get("text", ""))
        for entry in entries
        if isinstance(entry, dict) and entry.get("type") == OUTPUT_TEXT_TYPE
    ]
    if not texts:
        logger.error(
            "No output_text content returned in OpenAI response: %r", envelope.raw
        )
        raise NoOutputTextError("No output_text content in response")

    return "\n".join(texts)
