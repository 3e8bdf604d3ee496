"""State machine behind the four generator steps.

The wizard owns everything a front end accumulates while a user walks from a
repository URL to generated test code:

``AWAITING_REPO -> SELECTING_FILES -> SELECTING_SUMMARY -> SHOWING_CODE``

Each transition either succeeds and advances, or records an ``ErrorMessage``
and leaves the wizard on the step that failed so the user can retry it.
Calling a transition from the wrong step is a programming error and raises
``WizardStateError``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from .errors import GeneratorError
from .github import relevant_files
from .models import ErrorMessage, FileRecord, RepoRef, TestSummary, TreeEntry, WizardStep

logger = logging.getLogger(__name__)

STEP_LABELS = {
    WizardStep.AWAITING_REPO: "Connect Repo",
    WizardStep.SELECTING_FILES: "Select Files",
    WizardStep.SELECTING_SUMMARY: "Choose Test",
    WizardStep.SHOWING_CODE: "Generate Code",
}


class WizardStateError(RuntimeError):
    """Raised when a transition is not allowed from the current step."""


class Wizard:
    def __init__(self, github: Any, service: Any) -> None:
        self._github = github
        self._service = service
        self.reset()

    def reset(self) -> None:
        """Return to the first step and forget everything collected so far."""
        self.step = WizardStep.AWAITING_REPO
        self.error: Optional[ErrorMessage] = None
        self.repo: Optional[RepoRef] = None
        self.tree: List[TreeEntry] = []
        self.selected_paths: List[str] = []
        self.files: List[FileRecord] = []
        self.summaries: List[TestSummary] = []
        self.selected_summary: Optional[TestSummary] = None
        self.code = ""

    @property
    def candidate_files(self) -> List[TreeEntry]:
        return relevant_files(self.tree)

    def _require(self, step: WizardStep, action: str) -> None:
        if self.step is not step:
            raise WizardStateError(f"Cannot {action} while in step {self.step.name}")

    def _fail(self, title: str, exc: GeneratorError) -> bool:
        logger.error("%s: %s", title, exc)
        self.error = ErrorMessage(title=title, message=str(exc))
        return False

    def _advance(self, step: WizardStep) -> bool:
        logger.info("Wizard step %s -> %s", self.step.name, step.name)
        self.step = step
        self.error = None
        return True

    def submit_repo(self, repo_url: str) -> bool:
        self._require(WizardStep.AWAITING_REPO, "submit a repository")
        try:
            repo, tree = self._github.get_repo_tree(repo_url)
        except GeneratorError as exc:
            return self._fail("Failed to fetch repository", exc)
        self.repo = repo
        self.tree = tree
        return self._advance(WizardStep.SELECTING_FILES)

    def toggle_file(self, path: str) -> None:
        self._require(WizardStep.SELECTING_FILES, "change the file selection")
        if path in self.selected_paths:
            self.selected_paths.remove(path)
        else:
            self.select_files(self.selected_paths + [path])

    def select_files(self, paths: Iterable[str]) -> None:
        self._require(WizardStep.SELECTING_FILES, "change the file selection")
        candidates = {entry.path for entry in self.candidate_files}
        chosen: List[str] = []
        for path in paths:
            if path not in candidates:
                raise ValueError(f"{path} is not one of the candidate files")
            if path not in chosen:
                chosen.append(path)
        self.selected_paths = chosen

    def generate_summaries(self) -> bool:
        self._require(WizardStep.SELECTING_FILES, "generate summaries")
        if not self.selected_paths:
            raise WizardStateError("Select at least one file before generating summaries")
        assert self.repo is not None
        try:
            self.files = self._github.fetch_files(self.repo, self.selected_paths)
            self.summaries = self._service.generate_test_summaries(self.files)
        except GeneratorError as exc:
            return self._fail("Failed to generate summaries", exc)
        self.selected_summary = None
        return self._advance(WizardStep.SELECTING_SUMMARY)

    def choose_summary(self, summary: TestSummary) -> None:
        self._require(WizardStep.SELECTING_SUMMARY, "choose a summary")
        if summary not in self.summaries:
            raise ValueError(f"{summary.title!r} is not one of the suggested summaries")
        self.selected_summary = summary

    def generate_code(self) -> bool:
        self._require(WizardStep.SELECTING_SUMMARY, "generate code")
        if self.selected_summary is None:
            raise WizardStateError("Choose a test summary before generating code")
        try:
            self.code = self._service.generate_test_case_code(self.files, self.selected_summary)
        except GeneratorError as exc:
            return self._fail("Failed to generate code", exc)
        return self._advance(WizardStep.SHOWING_CODE)
