"""Read-only GitHub REST client for repository trees and file contents."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from .config import DEFAULT_GITHUB_API_BASE, GeneratorConfig
from .errors import FileFetchFailure, GitHubApiError, InvalidRepositoryReference, RepositoryNotFound
from .models import FileRecord, RepoRef, TreeEntry

logger = logging.getLogger(__name__)

_REPO_URL_RE = re.compile(r"github\.com/([^/\s?#]+)/([^/\s?#]+)")
_SOURCE_RE = re.compile(r"\.(js|jsx|ts|tsx)$")
_TEST_RE = re.compile(r"\.(test|spec)\.(js|jsx|ts|tsx)$")


def parse_repo_url(url: str) -> RepoRef:
    """Extract the owner/repository pair from a github.com URL."""
    match = _REPO_URL_RE.search(url or "")
    if not match:
        raise InvalidRepositoryReference(
            "Invalid GitHub repository URL. Format should be: https://github.com/owner/repo"
        )
    owner, repo = match.groups()
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        raise InvalidRepositoryReference(f"No repository name in {url!r}")
    return RepoRef(owner=owner, repo=repo)


def relevant_files(entries: Iterable[TreeEntry]) -> List[TreeEntry]:
    """Keep JavaScript/TypeScript sources that are not already tests."""
    return [
        entry
        for entry in entries
        if entry.type == "blob" and _SOURCE_RE.search(entry.path) and not _TEST_RE.search(entry.path)
    ]


class GitHubClient:
    """Fetches repository trees and file contents from the public GitHub API."""

    def __init__(
        self,
        base_url: str = DEFAULT_GITHUB_API_BASE,
        *,
        token: Optional[str] = None,
        branch: str = "main",
        session: Optional[Any] = None,
        timeout: float = 30.0,
    ) -> None:
        self._session = session or requests.Session()
        self._base_url = base_url.rstrip("/")
        self._branch = branch
        self._timeout = timeout
        self._headers = {"Accept": "application/vnd.github.v3+json"}
        if token:
            self._headers["Authorization"] = f"token {token}"

    @classmethod
    def from_config(cls, cfg: GeneratorConfig, **kwargs: Any) -> "GitHubClient":
        return cls(
            cfg.github_api_base,
            token=cfg.github_token,
            branch=cfg.github_branch,
            timeout=cfg.request_timeout.total_seconds(),
            **kwargs,
        )

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self._base_url}{path}"
        logger.debug("GitHub GET %s", url)
        return self._session.get(url, headers=self._headers, params=params, timeout=self._timeout)

    def get_repo_tree(self, repo_url: str) -> Tuple[RepoRef, List[TreeEntry]]:
        """Return the parsed reference and the recursive tree of the configured branch."""
        ref = parse_repo_url(repo_url)
        try:
            response = self._get(
                f"/repos/{ref.owner}/{ref.repo}/git/trees/{self._branch}", params={"recursive": 1}
            )
        except requests.RequestException as exc:
            raise GitHubApiError(f"GitHub API request failed: {exc}") from exc

        if response.status_code == 404:
            raise RepositoryNotFound(
                f"Repository not found. Please check the URL or if the '{self._branch}' branch exists."
            )
        if not 200 <= response.status_code < 300:
            reason = getattr(response, "reason", "") or response.status_code
            raise GitHubApiError(f"GitHub API error: {reason}", status=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise GitHubApiError("GitHub API returned a body that is not JSON") from exc

        items = data.get("tree") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise GitHubApiError("GitHub API response has no tree listing")
        if data.get("truncated"):
            logger.warning("Tree listing for %s was truncated by GitHub", ref)

        entries = [
            TreeEntry(
                path=item["path"],
                type=item.get("type", "blob"),
                sha=item.get("sha"),
                size=item.get("size"),
            )
            for item in items
            if isinstance(item, dict) and isinstance(item.get("path"), str)
        ]
        logger.info("Fetched %s tree entries for %s", len(entries), ref)
        return ref, entries

    def get_file_content(self, ref: RepoRef, path: str) -> str:
        """Return the decoded text of ``path``."""
        try:
            response = self._get(f"/repos/{ref.owner}/{ref.repo}/contents/{path}")
        except requests.RequestException as exc:
            raise FileFetchFailure(path, str(exc)) from exc
        if not 200 <= response.status_code < 300:
            raise FileFetchFailure(path, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise FileFetchFailure(path, "response is not JSON") from exc
        encoded = data.get("content") if isinstance(data, dict) else None
        if not isinstance(encoded, str):
            raise FileFetchFailure(path, "no file content in response")

        try:
            raw = base64.b64decode(encoded)
        except (binascii.Error, ValueError) as exc:
            raise FileFetchFailure(path, "content is not valid base64") from exc
        return raw.decode("utf-8", errors="replace")

    def fetch_files(self, ref: RepoRef, paths: Iterable[str]) -> List[FileRecord]:
        """Fetch each path in order, one request at a time."""
        records = []
        for path in paths:
            records.append(FileRecord(path=path, content=self.get_file_content(ref, path)))
        logger.info("Fetched content for %s file(s) from %s", len(records), ref)
        return records
