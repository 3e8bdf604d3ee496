"""Summaries and test code generation on top of the Gemini client."""

from __future__ import annotations

import logging
from typing import Any, List, Sequence

from .interpreter import to_code, to_summaries
from .models import FileRecord, PromptRequest, TaskKind, TestSummary
from .prompts import build_payload

logger = logging.getLogger(__name__)


class TestCaseService:
    """Builds requests, sends them and interprets the replies."""

    __test__ = False

    def __init__(self, client: Any) -> None:
        self._client = client

    def generate_test_summaries(self, files: Sequence[FileRecord]) -> List[TestSummary]:
        request = PromptRequest(kind=TaskKind.SUMMARIZE, files=list(files))
        logger.info("Requesting test summaries for %s file(s)", len(request.files))
        summaries = to_summaries(self._client.send(build_payload(request)))
        logger.info("Received %s test summaries", len(summaries))
        return summaries

    def generate_test_case_code(self, files: Sequence[FileRecord], summary: TestSummary) -> str:
        request = PromptRequest(kind=TaskKind.GENERATE, files=list(files), summary=summary)
        logger.info("Requesting test code for %r", summary.title)
        return to_code(self._client.send(build_payload(request)))
