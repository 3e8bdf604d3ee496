"""Tests for the command line front ends."""

from unittest.mock import MagicMock, patch

import pytest

from testcase_generator import chat, main
from testcase_generator.errors import RepositoryNotFound, ServiceExhausted
from testcase_generator.models import FileRecord, RepoRef, TestSummary, TreeEntry, WizardStep
from testcase_generator.wizard import Wizard

REF = RepoRef(owner="octo", repo="widgets")
TREE = [TreeEntry(path="src/App.jsx"), TreeEntry(path="src/util.js"), TreeEntry(path="README.md")]
SUMMARIES = [TestSummary("renders", "renders the app"), TestSummary("adds", "adds numbers")]


@pytest.fixture
def github():
    gh = MagicMock()
    gh.get_repo_tree.return_value = (REF, TREE)
    gh.fetch_files.return_value = [FileRecord("src/App.jsx", "app")]
    return gh


@pytest.fixture
def service():
    svc = MagicMock()
    svc.generate_test_summaries.return_value = SUMMARIES
    svc.generate_test_case_code.return_value = "test('adds', () => {});"
    return svc


@pytest.fixture
def wizard(github, service):
    return Wizard(github, service)


def run_cli(wizard, argv, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "key")
    with patch("testcase_generator.config.load_dotenv"), patch(
        "testcase_generator.main.build_wizard", return_value=wizard
    ), patch("testcase_generator.main.configure_logging"):
        return main.main(argv)


class TestMain:
    def test_lists_candidate_files(self, wizard, monkeypatch, capsys):
        code = run_cli(wizard, ["--repo", "https://github.com/octo/widgets"], monkeypatch)

        assert code == 0
        assert capsys.readouterr().out.split() == ["src/App.jsx", "src/util.js"]

    def test_prints_summaries(self, wizard, monkeypatch, capsys):
        code = run_cli(wizard, ["--repo", "https://github.com/octo/widgets", "--file", "src/App.jsx"], monkeypatch)

        assert code == 0
        out = capsys.readouterr().out
        assert "1. renders" in out
        assert "2. adds" in out

    def test_prints_summaries_as_json(self, wizard, monkeypatch, capsys):
        argv = ["--repo", "https://github.com/octo/widgets", "--file", "src/App.jsx", "--json"]
        assert run_cli(wizard, argv, monkeypatch) == 0
        assert '"title": "renders"' in capsys.readouterr().out

    def test_generates_code(self, wizard, service, monkeypatch, capsys):
        argv = ["--repo", "https://github.com/octo/widgets", "--file", "src/App.jsx", "--summary", "2"]

        assert run_cli(wizard, argv, monkeypatch) == 0
        assert capsys.readouterr().out.strip() == "test('adds', () => {});"
        assert service.generate_test_case_code.call_args[0][1] == SUMMARIES[1]

    def test_writes_output_file(self, wizard, monkeypatch, tmp_path):
        target = tmp_path / "App.test.js"
        argv = [
            "--repo", "https://github.com/octo/widgets",
            "--file", "src/App.jsx",
            "--summary", "1",
            "--output", str(target),
        ]

        assert run_cli(wizard, argv, monkeypatch) == 0
        assert target.read_text(encoding="utf-8") == "test('adds', () => {});\n"

    def test_summary_out_of_range(self, wizard, monkeypatch, capsys):
        argv = ["--repo", "https://github.com/octo/widgets", "--file", "src/App.jsx", "--summary", "9"]
        assert run_cli(wizard, argv, monkeypatch) == 1
        assert "between 1 and 2" in capsys.readouterr().err

    def test_unknown_file(self, wizard, monkeypatch, capsys):
        argv = ["--repo", "https://github.com/octo/widgets", "--file", "README.md"]
        assert run_cli(wizard, argv, monkeypatch) == 1
        assert "README.md" in capsys.readouterr().err

    def test_repo_failure(self, wizard, github, monkeypatch, capsys):
        github.get_repo_tree.side_effect = RepositoryNotFound("Repository not found.")
        assert run_cli(wizard, ["--repo", "https://github.com/octo/widgets"], monkeypatch) == 1
        assert "Failed to fetch repository: Repository not found." in capsys.readouterr().err

    def test_code_failure(self, wizard, service, monkeypatch, capsys):
        service.generate_test_case_code.side_effect = ServiceExhausted(5)
        argv = ["--repo", "https://github.com/octo/widgets", "--file", "src/App.jsx", "--summary", "1"]
        assert run_cli(wizard, argv, monkeypatch) == 1
        assert "Failed to generate code" in capsys.readouterr().err

    def test_configuration_error(self, monkeypatch):
        with patch("testcase_generator.config.load_dotenv"), patch("testcase_generator.main.configure_logging"):
            assert main.main(["--repo", "https://github.com/octo/widgets"]) == 1


def answers(*values):
    queue = list(values)

    def ask(prompt):
        if not queue:
            raise EOFError
        return queue.pop(0)

    return ask


class TestChatLoop:
    def test_full_session(self, wizard, service, capsys):
        code = chat.chat_loop(wizard, answers("https://github.com/octo/widgets", "1", "2", "n"))

        assert code == 0
        assert wizard.step is WizardStep.SHOWING_CODE
        assert service.generate_test_case_code.call_args[0][1] == SUMMARIES[1]
        assert "test('adds', () => {});" in capsys.readouterr().out

    def test_quit_at_repo_prompt(self, wizard, github):
        assert chat.chat_loop(wizard, answers("q")) == 0
        github.get_repo_tree.assert_not_called()

    def test_failed_step_is_retried(self, wizard, github, capsys):
        github.get_repo_tree.side_effect = [RepositoryNotFound("Repository not found."), (REF, TREE)]

        chat.chat_loop(wizard, answers("https://github.com/octo/nope", "https://github.com/octo/widgets"))

        assert wizard.step is WizardStep.SELECTING_FILES
        assert "error> Failed to fetch repository" in capsys.readouterr().out

    def test_bad_selection_is_reported(self, wizard, capsys):
        chat.chat_loop(wizard, answers("https://github.com/octo/widgets", "7"))

        assert wizard.step is WizardStep.SELECTING_FILES
        assert "out of range" in capsys.readouterr().out

    def test_start_over(self, wizard):
        chat.chat_loop(wizard, answers("https://github.com/octo/widgets", "1", "1", "y"))
        assert wizard.step is WizardStep.AWAITING_REPO
        assert wizard.code == ""

    def test_no_candidates_resets(self, wizard, github):
        github.get_repo_tree.return_value = (REF, [TreeEntry(path="README.md")])
        chat.chat_loop(wizard, answers("https://github.com/octo/widgets"))
        assert wizard.step is WizardStep.AWAITING_REPO
