"""Configuration loading for the test case generator."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-preview-05-20"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GITHUB_API_BASE = "https://api.github.com"


def _get_env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid integer for {name}: {value}") from exc


def _get_env_url(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"{name} must be a valid HTTP/HTTPS URL")
    return value.rstrip("/")


@dataclass(frozen=True)
class GeneratorConfig:
    """Holds runtime configuration for the generator."""

    gemini_api_key: str
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    github_api_base: str = DEFAULT_GITHUB_API_BASE
    github_token: Optional[str] = None
    github_branch: str = "main"
    max_attempts: int = 5
    initial_backoff: timedelta = field(default_factory=lambda: timedelta(milliseconds=1000))
    backoff_factor: float = 2.0
    request_timeout: timedelta = field(default_factory=lambda: timedelta(seconds=60))

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Create configuration from environment variables with validation."""
        # Load .env if available (non-destructive)
        load_dotenv(override=False)

        api_key = os.getenv("GEMINI_API_KEY")
        if not api_key:
            raise EnvironmentError("GEMINI_API_KEY must be set")

        model = os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)
        if not model:
            raise ValueError("GEMINI_MODEL must be non-empty")

        gemini_base_url = _get_env_url("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL)
        github_api_base = _get_env_url("GITHUB_API_BASE", DEFAULT_GITHUB_API_BASE)

        branch = os.getenv("GITHUB_BRANCH", "main")
        if not branch:
            raise ValueError("GITHUB_BRANCH must be non-empty")

        max_attempts = _get_env_int("AI_MAX_ATTEMPTS", 5)
        if max_attempts < 1:
            raise ValueError("AI_MAX_ATTEMPTS must be at least 1")

        initial_backoff_ms = _get_env_int("AI_INITIAL_BACKOFF_MS", 1000)
        if initial_backoff_ms <= 0:
            raise ValueError("AI_INITIAL_BACKOFF_MS must be positive")

        try:
            backoff = float(os.getenv("AI_BACKOFF_FACTOR", "2.0"))
            if backoff <= 1.0:
                raise ValueError("Backoff factor must be greater than 1.0")
        except ValueError as exc:
            raise ValueError("AI_BACKOFF_FACTOR must be a float greater than 1.0") from exc

        timeout_seconds = _get_env_int("REQUEST_TIMEOUT_SECONDS", 60)
        if timeout_seconds <= 0:
            raise ValueError("REQUEST_TIMEOUT_SECONDS must be positive")

        return cls(
            gemini_api_key=api_key,
            gemini_model=model,
            gemini_base_url=gemini_base_url,
            github_api_base=github_api_base,
            github_token=os.getenv("GITHUB_TOKEN") or None,
            github_branch=branch,
            max_attempts=max_attempts,
            initial_backoff=timedelta(milliseconds=initial_backoff_ms),
            backoff_factor=backoff,
            request_timeout=timedelta(seconds=timeout_seconds),
        )
