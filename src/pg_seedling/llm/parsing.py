"""JSON extraction from model output text."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pg_seedling.llm.base import LLMError

logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"\A```[\w+-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```\Z")


class JsonExtractionError(LLMError):
    """Raised when output text is not valid JSON, even after fence stripping."""

    def __init__(self, message: str, original: json.JSONDecodeError):
        super().__init__(message)
        self.original = original


def strip_code_fences(text: str) -> str:
    """Remove a leading ```lang fence and a trailing ``` fence, if present."""
    stripped = text.strip()
    stripped = _OPENING_FENCE.sub("", stripped, count=1)
    stripped = _CLOSING_FENCE.sub("", stripped, count=1)
    return stripped.strip()


def parse_json_payload(text: str) -> Any:
    """Parse text as JSON, retrying once without markdown code fences."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        try:
            return json.loads(strip_code_fences(text))
        except json.JSONDecodeError:
            logger.error("Failed to parse JSON output (%d chars)", len(text))
            logger.debug("Unparseable output:\n%s", text)
            raise JsonExtractionError(
                f"Unable to parse JSON output - {exc}", original=exc
            ) from exc
