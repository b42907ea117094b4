"""Unit tests for the CLI entrypoint."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from unittest.mock import Mock

import pytest

from copilot_issue_creator import main as main_module
from copilot_issue_creator.issue_creator import FailureReason, IssueCreationResult


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def github_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "test-token")
    monkeypatch.setenv("GITHUB_REPO_OWNER", "octo-org")
    monkeypatch.setenv("GITHUB_REPO_NAME", "octo-repo")


def _patch_creator(monkeypatch: pytest.MonkeyPatch, result: IssueCreationResult) -> Mock:
    creator_cls = Mock()
    creator_cls.return_value.create_issue.return_value = result
    monkeypatch.setattr(main_module, "IssueCreator", creator_cls)
    return creator_cls


def test_missing_description_prints_usage(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    creator_cls = _patch_creator(monkeypatch, IssueCreationResult())

    assert main_module.main([]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "usage: copilot-issue" in captured.err
    creator_cls.assert_not_called()


def test_success_prints_issue_url(
    github_env: None, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    creator_cls = _patch_creator(
        monkeypatch,
        IssueCreationResult(url="https://github.com/octo-org/octo-repo/issues/42", issue_number=42),
    )

    assert main_module.main(["Add dark mode\n\nUsers requested a dark theme."]) == 0

    captured = capsys.readouterr()
    assert captured.out == "Issue created: https://github.com/octo-org/octo-repo/issues/42\n"
    settings = creator_cls.call_args.kwargs["settings"]
    assert settings.repository == "octo-org/octo-repo"
    creator_cls.return_value.create_issue.assert_called_once_with(
        "Add dark mode\n\nUsers requested a dark theme."
    )


def test_failure_exits_non_zero(
    github_env: None, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _patch_creator(monkeypatch, IssueCreationResult.failed(FailureReason.LOOKUP, "not found"))

    assert main_module.main(["Add dark mode"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Failed to create issue" in captured.err


def test_missing_configuration_fails_without_network(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    client_cls = Mock()
    monkeypatch.setattr("copilot_issue_creator.issue_creator.GitHubIssueClient", client_cls)

    assert main_module.main(["Add dark mode"]) == 1

    assert "Failed to create issue" in capsys.readouterr().err
    client_cls.assert_not_called()


def test_unexpected_error_does_not_crash(
    github_env: None, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    creator_cls = Mock()
    creator_cls.return_value.create_issue.side_effect = RuntimeError("boom")
    monkeypatch.setattr(main_module, "IssueCreator", creator_cls)

    assert main_module.main(["Add dark mode"]) == 1
    assert "Failed to create issue" in capsys.readouterr().err


def test_unknown_log_level_is_a_configuration_error(
    github_env: None, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    creator_cls = _patch_creator(monkeypatch, IssueCreationResult())

    assert main_module.main(["Add dark mode"]) == 2

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Configuration error" in captured.err
    creator_cls.assert_not_called()
