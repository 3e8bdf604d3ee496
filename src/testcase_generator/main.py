"""One-shot command line front end for the test case generator."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .ai import GeminiClient
from .config import GeneratorConfig
from .github import GitHubClient
from .service import TestCaseService
from .wizard import Wizard

logger = logging.getLogger("testcase_generator")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_wizard(cfg: GeneratorConfig) -> Wizard:
    """Wire the GitHub and Gemini clients into a fresh wizard."""
    github = GitHubClient.from_config(cfg)
    service = TestCaseService(GeminiClient.from_config(cfg))
    return Wizard(github, service)


def _report_error(wizard: Wizard) -> int:
    if wizard.error:
        print(f"error: {wizard.error.title}: {wizard.error.message}", file=sys.stderr)
    return 1


def run(wizard: Wizard, args: argparse.Namespace) -> int:
    if not wizard.submit_repo(args.repo):
        return _report_error(wizard)

    if args.list_files or not args.file:
        for entry in wizard.candidate_files:
            print(entry.path)
        return 0

    try:
        wizard.select_files(args.file)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if not wizard.generate_summaries():
        return _report_error(wizard)

    if args.summary is None:
        if args.json:
            print(json.dumps([{"title": s.title, "description": s.description} for s in wizard.summaries], indent=2))
        else:
            for index, summary in enumerate(wizard.summaries, start=1):
                print(f"{index}. {summary.title}\n   {summary.description}")
        return 0

    if not 1 <= args.summary <= len(wizard.summaries):
        print(f"error: --summary must be between 1 and {len(wizard.summaries)}", file=sys.stderr)
        return 1
    wizard.choose_summary(wizard.summaries[args.summary - 1])
    if not wizard.generate_code():
        return _report_error(wizard)

    if args.output:
        Path(args.output).write_text(wizard.code + "\n", encoding="utf-8")
        logger.info("Wrote generated test to %s", args.output)
    else:
        print(wizard.code)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate test cases for files in a public GitHub repository")
    parser.add_argument("--repo", required=True, help="Repository URL, e.g. https://github.com/owner/repo")
    parser.add_argument("--list-files", action="store_true", help="Only list the candidate files")
    parser.add_argument(
        "--file", action="append", default=[], help="File path to analyze; repeat for several files"
    )
    parser.add_argument("--summary", type=int, help="1-based index of the summary to generate code for")
    parser.add_argument("--output", help="Write the generated test code to this file")
    parser.add_argument("--json", action="store_true", help="Print summaries as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        cfg = GeneratorConfig.from_env()
    except Exception as exc:  # noqa: BLE001
        logger.error("Configuration error: %s", exc)
        return 1

    return run(build_wizard(cfg), args)


if __name__ == "__main__":
    sys.exit(main())
