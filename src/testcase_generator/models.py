"""Data models used across the generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum, auto
from typing import List, Optional, Union


class TaskKind(Enum):
    """What a prompt asks the model to do."""

    SUMMARIZE = "summarize"
    GENERATE = "generate"


class WizardStep(Enum):
    """Ordered steps of the generator wizard."""

    AWAITING_REPO = auto()
    SELECTING_FILES = auto()
    SELECTING_SUMMARY = auto()
    SHOWING_CODE = auto()


@dataclass(frozen=True)
class RepoRef:
    """Owner/repository pair parsed from a repository URL."""

    owner: str
    repo: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class TreeEntry:
    """Single item of a recursive repository tree listing."""

    path: str
    type: str = "blob"
    sha: Optional[str] = None
    size: Optional[int] = None


@dataclass(frozen=True)
class FileRecord:
    """A selected file and its decoded text content."""

    path: str
    content: str


@dataclass(frozen=True)
class TestSummary:
    """One suggested test case."""

    __test__ = False  # keep pytest from collecting this as a test class

    title: str
    description: str


@dataclass(frozen=True)
class PromptRequest:
    """Input for a single orchestration call."""

    kind: TaskKind
    files: List[FileRecord]
    summary: Optional[TestSummary] = None

    def __post_init__(self) -> None:
        if self.kind is TaskKind.GENERATE and self.summary is None:
            raise ValueError("A generate request needs a selected test summary")


@dataclass
class RetryState:
    """Attempt counter and current backoff for one orchestration call."""

    delay: timedelta
    attempt: int = 0


@dataclass(frozen=True)
class Success:
    text: str


@dataclass(frozen=True)
class Retryable:
    delay: timedelta
    error: Exception


@dataclass(frozen=True)
class Fatal:
    error: Exception
    cause: Optional[Exception] = None


AttemptOutcome = Union[Success, Retryable, Fatal]


@dataclass(frozen=True)
class SummariesParsed:
    summaries: List[TestSummary] = field(default_factory=list)


@dataclass(frozen=True)
class SummaryParseError:
    reason: str


SummaryParseResult = Union[SummariesParsed, SummaryParseError]


@dataclass(frozen=True)
class ErrorMessage:
    """Titled, human-readable failure shown to the user."""

    title: str
    message: str
