"""Gemini generateContent client with retry and exponential backoff."""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Optional

import requests

from .config import DEFAULT_GEMINI_BASE_URL, DEFAULT_GEMINI_MODEL, GeneratorConfig
from .errors import (
    AiHttpError,
    AiServiceError,
    AiTransportError,
    InvalidResponseShape,
    RateLimited,
    ServiceExhausted,
)
from .models import AttemptOutcome, Fatal, Retryable, RetryState, Success

logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS = 429


def extract_candidate_text(body: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` or raise InvalidResponseShape."""
    candidates = body.get("candidates") if isinstance(body, dict) else None
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if isinstance(parts, list) and parts and isinstance(parts[0], dict):
            text = parts[0].get("text")
            if isinstance(text, str):
                return text

    message = "Invalid response structure from AI service."
    block_reason = None
    if isinstance(body, dict):
        feedback = body.get("promptFeedback")
        if isinstance(feedback, dict):
            block_reason = feedback.get("blockReason")
        if not block_reason and isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
            block_reason = candidates[0].get("finishReason")
    if block_reason:
        message = f"{message} The response might be blocked due to safety settings ({block_reason})."
    raise InvalidResponseShape(message)


class GeminiClient:
    """Thin wrapper around the Gemini REST API with retry logic.

    Every attempt ends in exactly one of three outcomes: ``Success`` returns the
    text, ``Retryable`` waits out the current backoff and tries again, ``Fatal``
    raises. Rate limiting and generic failures share one attempt budget.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        *,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        session: Optional[Any] = None,
        timeout: float = 60.0,
        max_attempts: int = 5,
        initial_delay: timedelta = timedelta(milliseconds=1000),
        backoff_factor: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not api_key:
            raise ValueError("A Gemini API key is required")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._session = session or requests.Session()
        self._url = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self._api_key = api_key
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._initial_delay = initial_delay
        self._backoff_factor = backoff_factor
        self._sleep = sleep

    @classmethod
    def from_config(cls, cfg: GeneratorConfig, **kwargs: Any) -> "GeminiClient":
        return cls(
            cfg.gemini_api_key,
            cfg.gemini_model,
            base_url=cfg.gemini_base_url,
            timeout=cfg.request_timeout.total_seconds(),
            max_attempts=cfg.max_attempts,
            initial_delay=cfg.initial_backoff,
            backoff_factor=cfg.backoff_factor,
            **kwargs,
        )

    def send(self, payload: Dict[str, Any]) -> str:
        """POST ``payload`` and return the first candidate's text."""
        state = RetryState(delay=self._initial_delay)

        while True:
            state.attempt += 1
            outcome = self._attempt(payload, state)

            if isinstance(outcome, Success):
                return outcome.text
            if isinstance(outcome, Fatal):
                logger.error("AI call failed after %s attempt(s): %s", state.attempt, outcome.error)
                if outcome.cause is not None:
                    raise outcome.error from outcome.cause
                raise outcome.error

            logger.warning(
                "AI call failed (attempt %s/%s): %s. Retrying in %ss...",
                state.attempt,
                self._max_attempts,
                outcome.error,
                outcome.delay.total_seconds(),
            )
            self._sleep(outcome.delay.total_seconds())
            state.delay = state.delay * self._backoff_factor

    def _attempt(self, payload: Dict[str, Any], state: RetryState) -> AttemptOutcome:
        try:
            return Success(self._post(payload))
        except AiServiceError as exc:
            return self._classify(exc, state)

    def _classify(self, exc: AiServiceError, state: RetryState) -> AttemptOutcome:
        if state.attempt < self._max_attempts:
            return Retryable(delay=state.delay, error=exc)
        if isinstance(exc, InvalidResponseShape):
            return Fatal(exc)
        return Fatal(ServiceExhausted(state.attempt), cause=exc)

    def _post(self, payload: Dict[str, Any]) -> str:
        logger.debug("Gemini POST %s", self._url)
        try:
            response = self._session.post(
                self._url,
                params={"key": self._api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise AiTransportError(f"AI request failed: {exc}") from exc

        if response.status_code == TOO_MANY_REQUESTS:
            raise RateLimited("AI service is rate limiting requests")
        if not 200 <= response.status_code < 300:
            logger.debug("Gemini error body: %r", response.text[:500])
            raise AiHttpError(response.status_code, getattr(response, "reason", "") or "")

        try:
            body = response.json()
        except ValueError as exc:
            raise InvalidResponseShape("AI service returned a body that is not JSON.") from exc
        return extract_candidate_text(body)
