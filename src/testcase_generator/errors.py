"""Exception hierarchy for repository access and the AI service."""

from __future__ import annotations

from typing import Optional


class GeneratorError(RuntimeError):
    """Base class for failures that are reported to the user."""


class RepositoryError(GeneratorError):
    """Raised when the repository host cannot provide what was asked for."""


class InvalidRepositoryReference(RepositoryError):
    """Raised when a repository URL cannot be parsed."""


class RepositoryNotFound(RepositoryError):
    """Raised when the repository or its branch does not exist."""


class GitHubApiError(RepositoryError):
    """Raised on any other GitHub API failure."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class FileFetchFailure(RepositoryError):
    """Raised when a file's content cannot be fetched or decoded."""

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        message = f"Failed to fetch file content for {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class AiServiceError(GeneratorError):
    """Raised when the generative AI service call fails."""


class RateLimited(AiServiceError):
    """HTTP 429 from the AI service. Always absorbed by the retry loop."""


class AiHttpError(AiServiceError):
    """Non-success HTTP status other than 429."""

    def __init__(self, status: int, reason: str = "") -> None:
        super().__init__(f"API Error: {status} {reason}".rstrip())
        self.status = status


class AiTransportError(AiServiceError):
    """The request never produced an HTTP response."""


class InvalidResponseShape(AiServiceError):
    """A successful response without extractable candidate text."""


class MalformedSummaryResponse(AiServiceError):
    """Summary text that is not the declared structured shape."""


class ServiceExhausted(AiServiceError):
    """Every attempt was consumed without a usable response."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"AI service request failed after {attempts} attempts.")
        self.attempts = attempts
