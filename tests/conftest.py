"""Test configuration and fixtures."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from copilot_issue_creator.config import IssueCreatorSettings
from copilot_issue_creator.github.client import GitHubIssueClient

_ENV_VARS = (
    "GITHUB_TOKEN",
    "GITHUB_REPO_OWNER",
    "GITHUB_REPO_NAME",
    "GITHUB_BASE_URL",
    "LOG_LEVEL",
    "COPILOT_BASE_REF",
    "COPILOT_CUSTOM_INSTRUCTIONS",
    "COPILOT_CUSTOM_AGENT",
    "COPILOT_MODEL",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the developer's / CI environment and `.env` out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings() -> IssueCreatorSettings:
    """Provide complete settings for octo-org/octo-repo."""
    return IssueCreatorSettings(
        github_token="test-token",
        repo_owner="octo-org",
        repo_name="octo-repo",
    )


@pytest.fixture
def mock_client() -> Mock:
    """Provide a GitHub client double that fails loudly on unexpected calls."""
    return Mock(spec=GitHubIssueClient)
