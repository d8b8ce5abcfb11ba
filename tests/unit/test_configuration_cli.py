"""Unit tests for the commands that work without access to GitHub."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from release_ops_manager.comparison.models import PublicationComparisonResult
from release_ops_manager.configuration.cli import typer_app
from release_ops_manager.release_notes.models import Commit, Contribution, ReleaseNotesData
from release_ops_manager.release_notes.serializer import ReleaseNotesSerializer
from release_ops_manager.utils.process import ProcessExecutionError

runner = CliRunner()

CI_VARIABLES = ("TRAVIS_BRANCH", "TRAVIS_COMMIT_MESSAGE", "TRAVIS_PULL_REQUEST", "TRAVIS_BUILD_NUMBER", "SKIP_RELEASE")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run every command outside of CI, without a .env file."""
    for name in (*CI_VARIABLES, "RELEASE_CONFIG", "GH_WRITE_TOKEN", "VERSION"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def comparison_result(tmp_path: Path, equal: bool) -> Path:
    """Write the verdict of compare-publications."""
    path = tmp_path / "comparison.json"
    path.write_text(
        PublicationComparisonResult(artifact_name="mockito-core", current_version="2.7.2", previous_version="2.7.1", equal=equal).model_dump_json(),
        encoding="utf-8",
    )
    return path


def test_release_needed(tmp_path: Path) -> None:
    """Test the report of a build that needs a release."""
    result = runner.invoke(
        typer_app,
        ["release-needed", "--comparison-result", str(comparison_result(tmp_path, equal=False))],
        env={"TRAVIS_BRANCH": "release/2.x", "TRAVIS_PULL_REQUEST": "false", "TRAVIS_COMMIT_MESSAGE": "Fixed #12"},
    )

    assert result.exit_code == 0
    assert "Release is needed: True" in result.output


def test_release_needed_explosive_fails_for_pull_request(tmp_path: Path) -> None:
    """Test that explosive mode fails the command when the release is not needed."""
    result = runner.invoke(
        typer_app,
        ["release-needed", "--explosive", "--comparison-result", str(comparison_result(tmp_path, equal=False))],
        env={"TRAVIS_BRANCH": "master", "TRAVIS_PULL_REQUEST": "42"},
    )

    assert result.exit_code == 1
    assert "is pull request build: True" in result.output


def test_preview_release_notes(tmp_path: Path) -> None:
    """Test printing the new release notes content."""
    config_file = tmp_path / "release.yaml"
    config_file.write_text("github:\n  repository: mockito/mockito\n", encoding="utf-8")
    data_file = tmp_path / "data.json"
    commit = Commit(commit_id="a1", message="Polished", author_name="Tim")
    data_file.write_text(
        ReleaseNotesSerializer().serialize(
            [ReleaseNotesData(version="2.7.2", vcs_tag="v2.7.2", previous_vcs_tag="v2.7.1", contributions=(Contribution(author_name="Tim", commits=(commit,)),))]
        ),
        encoding="utf-8",
    )

    result = runner.invoke(typer_app, ["preview-release-notes", "--data", str(data_file), "--config", str(config_file)])

    assert result.exit_code == 0
    assert result.output.startswith("**2.7.2** - [1 commit](https://github.com/mockito/mockito/compare/v2.7.1...v2.7.2) by Tim\n")


def test_preview_release_notes_without_repository(tmp_path: Path) -> None:
    """Test that a missing repository is reported as a configuration error."""
    data_file = tmp_path / "data.json"
    data_file.write_text(ReleaseNotesSerializer().serialize([]), encoding="utf-8")

    result = runner.invoke(typer_app, ["preview-release-notes", "--data", str(data_file)])

    assert result.exit_code == 1
    assert "github.repository" in result.output


def test_commit_release_rolls_back_after_failed_push(tmp_path: Path) -> None:
    """Test that a rejected push removes the tag and the release commit again."""
    config_file = tmp_path / "release.yaml"
    config_file.write_text("github:\n  repository: mockito/mockito\n  write_auth_user: shipkit\n", encoding="utf-8")
    process_runner = MagicMock()
    process_runner.with_secret.return_value = process_runner

    def run(*command_line: str) -> str:
        if command_line[:2] == ("git", "push"):
            raise ProcessExecutionError("git push", "fatal: Authentication failed", 128)
        return ""

    process_runner.run.side_effect = run

    with patch("release_ops_manager.configuration.cli.ProcessRunner", return_value=process_runner):
        result = runner.invoke(typer_app, ["commit-release", "2.7.2", "docs/release-notes.md", "--branch", "master", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "GH_WRITE_TOKEN env variable not set" in result.output
    commands = [c.args[:3] for c in process_runner.run.call_args_list]
    assert commands[-2:] == [("git", "tag", "-d"), ("git", "reset", "--soft")]


def test_commit_release_reports_push_error_when_clean_up_fails(tmp_path: Path) -> None:
    """Test that a failing clean-up step neither hides the push error nor skips the other step."""
    config_file = tmp_path / "release.yaml"
    config_file.write_text("github:\n  repository: mockito/mockito\n", encoding="utf-8")
    process_runner = MagicMock()
    process_runner.with_secret.return_value = process_runner

    def run(*command_line: str) -> str:
        if command_line[:2] == ("git", "push"):
            raise ProcessExecutionError("git push", "fatal: Authentication failed", 128)
        if command_line[:3] == ("git", "tag", "-d"):
            raise ProcessExecutionError("git tag -d v2.7.2", "error: tag 'v2.7.2' not found.", 1)
        return ""

    process_runner.run.side_effect = run

    with patch("release_ops_manager.configuration.cli.ProcessRunner", return_value=process_runner):
        result = runner.invoke(typer_app, ["commit-release", "2.7.2", "docs/release-notes.md", "--branch", "master", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "GH_WRITE_TOKEN env variable not set" in result.output
    commands = [c.args[:3] for c in process_runner.run.call_args_list]
    assert commands[-1] == ("git", "reset", "--soft")


def test_fetch_release_notes_without_previous_version_fails_before_fetching(tmp_path: Path) -> None:
    """Test that a missing previous version is reported before the history is fetched."""
    with (
        patch("release_ops_manager.configuration.cli.GitOperations") as git_operations,
        patch("release_ops_manager.configuration.cli.create_adapter") as create_adapter,
    ):
        result = runner.invoke(
            typer_app,
            ["repo", "mockito/mockito", "fetch-release-notes", "2.0.0", "--unshallow", "--work-dir", str(tmp_path)],
            env={"GITHUB_PAT_TOKEN": "ghp_test", "GITHUB_APP_ID": None, "GITHUB_APP_PRIVATE_KEY_PATH": None},
        )

    assert result.exit_code == 1
    assert "previous version" in result.output
    git_operations.assert_not_called()
    create_adapter.assert_not_called()
