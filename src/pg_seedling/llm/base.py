"""Provider-independent interface for record generation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class LLMError(RuntimeError):
    """Base class for generation failures."""


class RemoteServiceError(LLMError):
    """Raised when the remote generation service fails at transport or service level."""


class RecordGenerator(ABC):
    """Abstract generation client."""

    @abstractmethod
    def generate(self, prompt: str) -> Any:
        """Send a prompt and return the parsed JSON value of the reply."""
