"""Interactive CLI for the generator.

Walks the same wizard as the one-shot command but asks for each choice at a
``you>`` prompt, lets the user retry a failed step, and offers to start over
once code has been generated.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional

from .config import GeneratorConfig
from .main import build_wizard, configure_logging
from .models import WizardStep
from .wizard import STEP_LABELS, Wizard

logger = logging.getLogger("testcase_generator.chat")

Prompt = Callable[[str], str]


def _print_progress(wizard: Wizard) -> None:
    labels = []
    for step, label in STEP_LABELS.items():
        marker = "x" if step.value < wizard.step.value else (">" if step is wizard.step else " ")
        labels.append(f"[{marker}] {label}")
    print("  ".join(labels))


def _print_error(wizard: Wizard) -> None:
    if wizard.error:
        print(f"error> {wizard.error.title}: {wizard.error.message}")


def _parse_indexes(answer: str, limit: int) -> List[int]:
    indexes = []
    for token in answer.replace(",", " ").split():
        index = int(token)
        if not 1 <= index <= limit:
            raise ValueError(f"{index} is out of range 1-{limit}")
        indexes.append(index - 1)
    return indexes


def _repo_step(wizard: Wizard, ask: Prompt) -> bool:
    url = ask("you> GitHub repository URL (or 'q' to quit): ").strip()
    if url.lower() == "q":
        return False
    if url and not wizard.submit_repo(url):
        _print_error(wizard)
    return True


def _files_step(wizard: Wizard, ask: Prompt) -> bool:
    candidates = wizard.candidate_files
    if not candidates:
        print("assistant> No JavaScript or TypeScript source files found. Starting over.")
        wizard.reset()
        return True
    for index, entry in enumerate(candidates, start=1):
        print(f"  {index:3}. {entry.path}")
    answer = ask("you> Files to analyze (numbers separated by spaces): ")
    try:
        wizard.select_files(candidates[i].path for i in _parse_indexes(answer, len(candidates)))
    except ValueError as exc:
        print(f"error> {exc}")
        return True
    if not wizard.selected_paths:
        return True
    print("assistant> Analyzing files and generating summaries...")
    if not wizard.generate_summaries():
        _print_error(wizard)
    return True


def _summary_step(wizard: Wizard, ask: Prompt) -> bool:
    if not wizard.summaries:
        print("assistant> No test cases were suggested. Starting over.")
        wizard.reset()
        return True
    for index, summary in enumerate(wizard.summaries, start=1):
        print(f"  {index}. {summary.title}\n     {summary.description}")
    answer = ask("you> Test case to generate: ")
    try:
        picked = _parse_indexes(answer, len(wizard.summaries))
    except ValueError as exc:
        print(f"error> {exc}")
        return True
    if len(picked) != 1:
        print("error> Pick exactly one test case")
        return True
    wizard.choose_summary(wizard.summaries[picked[0]])
    print("assistant> Generating test case code...")
    if not wizard.generate_code():
        _print_error(wizard)
    return True


def _code_step(wizard: Wizard, ask: Prompt) -> bool:
    print("assistant> Generated test file:")
    print(wizard.code)
    answer = ask("you> Start over? [y/N]: ").strip().lower()
    if answer in ("y", "yes"):
        wizard.reset()
        return True
    return False


STEP_HANDLERS = {
    WizardStep.AWAITING_REPO: _repo_step,
    WizardStep.SELECTING_FILES: _files_step,
    WizardStep.SELECTING_SUMMARY: _summary_step,
    WizardStep.SHOWING_CODE: _code_step,
}


def chat_loop(wizard: Wizard, ask: Prompt = input) -> int:
    """Drive the wizard until the user quits."""
    try:
        while True:
            _print_progress(wizard)
            if not STEP_HANDLERS[wizard.step](wizard, ask):
                return 0
    except (EOFError, KeyboardInterrupt):
        print()
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Interactive test case generator")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        cfg = GeneratorConfig.from_env()
    except Exception as exc:  # noqa: BLE001
        logger.error("Configuration error: %s", exc)
        return 1

    return chat_loop(build_wizard(cfg))


if __name__ == "__main__":
    sys.exit(main())
