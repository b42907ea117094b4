"""Configuration for the issue creator.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The three GitHub values are required, but they are not enforced here: a missing value is a
precondition failure of the issue creation step, so that the CLI can report it like any
other failure instead of crashing during settings construction.
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IssueCreatorSettings(BaseSettings):
    """Settings for a single issue creation run.

    Environment variables:
    - GITHUB_TOKEN
    - GITHUB_REPO_OWNER
    - GITHUB_REPO_NAME
    - GITHUB_BASE_URL              (optional)
    - LOG_LEVEL                    (optional)
    - COPILOT_BASE_REF             (optional)
    - COPILOT_CUSTOM_INSTRUCTIONS  (optional)
    - COPILOT_CUSTOM_AGENT         (optional)
    - COPILOT_MODEL                (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `IssueCreatorSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias="GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    repo_owner: str = Field(
        default="",
        validation_alias="GITHUB_REPO_OWNER",
        description="Owner (user or organisation) of the target repository",
    )
    repo_name: str = Field(
        default="",
        validation_alias="GITHUB_REPO_NAME",
        description="Name of the target repository",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    copilot_base_ref: str = Field(
        default="",
        validation_alias="COPILOT_BASE_REF",
        description="Base branch the coding agent should work from (empty = repository default)",
    )
    copilot_custom_instructions: str = Field(
        default="",
        validation_alias="COPILOT_CUSTOM_INSTRUCTIONS",
        description="Optional additional instructions for the coding agent",
    )
    copilot_custom_agent: str = Field(
        default="",
        validation_alias="COPILOT_CUSTOM_AGENT",
        description="Optional custom agent identifier (public preview; may be ignored)",
    )
    copilot_model: str = Field(
        default="",
        validation_alias="COPILOT_MODEL",
        description="Optional model identifier for the coding agent (public preview)",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    def missing_fields(self) -> list[str]:
        """Return the env var names of required values that are empty."""

        required = {
            "GITHUB_TOKEN": self.github_token,
            "GITHUB_REPO_OWNER": self.repo_owner,
            "GITHUB_REPO_NAME": self.repo_name,
        }
        return [name for name, value in required.items() if not value.strip()]

    @property
    def repository(self) -> str:
        """Return the configured repository as "owner/repo"."""

        return f"{self.repo_owner.strip()}/{self.repo_name.strip()}"
