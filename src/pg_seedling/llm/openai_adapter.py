"""OpenAI Responses API implementation of the record generator interface."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any
from http.client import HTTPException
from urllib import error, request

from pg_seedling.config import (
    DEFAULT_OPENAI_BASE_URL,
    ConfigurationError,
    missing_api_key_message,
)
from pg_seedling.llm.base import LLMError, RecordGenerator, RemoteServiceError
from pg_seedling.llm.envelope import extract_output_text, parse_envelope
from pg_seedling.llm.parsing import parse_json_payload
from pg_seedling.models.generation import GenerationRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpenAIAdapter(RecordGenerator):
    """Generate JSON records using the OpenAI Responses API.

    One request per call; retries are left to the caller.
    """

    api_key: str
    model: str
    base_url: str = DEFAULT_OPENAI_BASE_URL
    timeout_seconds: int = 120

    def build_request(self, prompt: str) -> GenerationRequest:
        return GenerationRequest(model=self.model, input=prompt)

    def generate(self, prompt: str) -> Any:
        api_key = self._require_api_key()
        body = self.build_request(prompt)
        logger.debug(
            "Sending prompt (%d chars) with model=%s", len(prompt), self.model
        )

        try:
            payload = self._post(api_key, body)
            text = extract_output_text(parse_envelope(payload))
            logger.debug("Received %d chars from OpenAI", len(text))
            return parse_json_payload(text)
        except LLMError:
            raise
        except Exception as exc:
            logger.error(
                "Unexpected error calling OpenAI - %s: %s", type(exc).__name__, exc
            )
            raise

    def _require_api_key(self) -> str:
        api_key = self.api_key.strip()
        if not api_key:
            raise ConfigurationError(missing_api_key_message())
        return api_key

    def _post(self, api_key: str, body: GenerationRequest) -> Any:
        endpoint = self.base_url.rstrip("/") + "/responses"
        req = request.Request(
            endpoint,
            method="POST",
            data=json.dumps(body.model_dump()).encode("utf-8"),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        )

        try:
            with request.urlopen(req, timeout=self.timeout_seconds) as response:
                raw = response.read().decode("utf-8")
        except error.HTTPError as exc:
            details = exc.read().decode("utf-8", errors="replace")
            raise self._remote_failure(exc, f"HTTP {exc.code}: {details}") from exc
        except error.URLError as exc:
            raise self._remote_failure(exc, str(exc.reason)) from exc
        except (TimeoutError, ConnectionError) as exc:
            raise self._remote_failure(exc, str(exc) or "request timed out") from exc
        except HTTPException as exc:
            raise self._remote_failure(exc, repr(exc)) from exc
        except UnicodeDecodeError as exc:
            raise self._remote_failure(exc, "response body was not valid UTF-8") from exc

        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise self._remote_failure(exc, "response body was not valid JSON") from exc

    @staticmethod
    def _remote_failure(exc: Exception, message: str) -> RemoteServiceError:
        logger.error("OpenAI API error - %s: %s", type(exc).__name__, message)
        return RemoteServiceError(f"OpenAI request failed - {message}")
