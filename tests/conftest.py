"""Shared test fixtures for testcase_generator tests."""

import sys
from pathlib import Path
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

# Add src to path so tests can import testcase_generator
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class FakeResponse:
    """Stand-in for requests.Response with just the attributes the clients read."""

    def __init__(self, status_code: int = 200, json_data: Any = None, text: Optional[str] = None, reason: str = ""):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text if text is not None else ("" if json_data is None else repr(json_data))
        self.reason = reason

    def json(self) -> Any:
        if self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


def gemini_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def fake_session():
    return MagicMock()


@pytest.fixture
def sleeps():
    """Records requested sleep durations instead of sleeping."""
    return []


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for name in (
        "GEMINI_API_KEY",
        "GEMINI_MODEL",
        "GEMINI_BASE_URL",
        "GITHUB_API_BASE",
        "GITHUB_TOKEN",
        "GITHUB_BRANCH",
        "AI_MAX_ATTEMPTS",
        "AI_INITIAL_BACKOFF_MS",
        "AI_BACKOFF_FACTOR",
        "REQUEST_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
