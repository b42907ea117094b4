"""Create a GitHub issue from a free-text description and hand it to the Copilot coding agent.

Flow:
- check configuration, input and the derived title (no network calls when any is missing)
- fetch the repository ID and its assignable actors in one query
- create the issue assigned to `copilot-swe-agent` when it is assignable,
  otherwise create it unassigned

Every failure is reported through `IssueCreationResult`; nothing is raised to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

import requests
from github import GithubException

from copilot_issue_creator.config import IssueCreatorSettings
from copilot_issue_creator.github.client import (
    AgentAssignment,
    AssignableActor,
    GitHubGraphQLError,
    GitHubIssueClient,
)

logger = logging.getLogger(__name__)

AGENT_LOGIN = "copilot-swe-agent"
MAX_TITLE_LENGTH = 100

_TRANSPORT_ERRORS = (
    requests.RequestException,
    GithubException,
    GitHubGraphQLError,
    ValueError,
    KeyError,
    TypeError,
)


class FailureReason(str, Enum):
    CONFIGURATION = "configuration"
    INPUT = "input"
    LOOKUP = "lookup"
    CREATION = "creation"
    TRANSPORT = "transport"


@dataclass(frozen=True, slots=True)
class IssueCreationResult:
    """Outcome of a single issue creation attempt.

    On success `url` is set and `failure` is None. The URL shape depends on the path taken:
    the unassigned path returns the web URL (`html_url`), the assigned path returns the
    GraphQL `url` field.
    """

    url: str | None = None
    failure: FailureReason | None = None
    message: str = ""
    issue_number: int | None = None
    assignees: list[str] = field(default_factory=list)
    assigned_to_agent: bool = False

    @property
    def ok(self) -> bool:
        return self.failure is None and self.url is not None

    @classmethod
    def failed(cls, reason: FailureReason, message: str) -> IssueCreationResult:
        return cls(failure=reason, message=message)


def derive_title(description: str) -> str:
    """Return the first line of the description, cut to MAX_TITLE_LENGTH characters."""

    return description.split("\n", 1)[0][:MAX_TITLE_LENGTH]


def find_agent(
    actors: Iterable[AssignableActor], login: str = AGENT_LOGIN
) -> AssignableActor | None:
    for actor in actors:
        if actor.login == login:
            return actor
    return None


def agent_assignment_from_settings(settings: IssueCreatorSettings) -> AgentAssignment | None:
    """Build the optional agent assignment payload; None when no agent option is configured."""

    assignment = AgentAssignment(
        base_ref=settings.copilot_base_ref,
        custom_instructions=settings.copilot_custom_instructions,
        custom_agent=settings.copilot_custom_agent,
        model=settings.copilot_model,
    )
    values = (
        assignment.base_ref,
        assignment.custom_instructions,
        assignment.custom_agent,
        assignment.model,
    )
    if not any(v.strip() for v in values):
        return None
    return assignment


class IssueCreator:
    """High-level, testable issue creation orchestration."""

    def __init__(
        self,
        *,
        settings: IssueCreatorSettings,
        client: GitHubIssueClient | None = None,
    ) -> None:
        self._settings = settings
        self._client = client

    def create_issue(self, description: str) -> IssueCreationResult:
        missing = self._settings.missing_fields()
        if missing:
            logger.error("Missing required configuration", extra={"missing": missing})
            return IssueCreationResult.failed(
                FailureReason.CONFIGURATION,
                f"Missing required configuration: {', '.join(missing)}",
            )

        if not description.strip():
            logger.error("Issue description is empty")
            return IssueCreationResult.failed(FailureReason.INPUT, "Issue description is empty")

        if not derive_title(description).strip():
            logger.error("First line of the issue description is empty")
            return IssueCreationResult.failed(
                FailureReason.INPUT, "First line of the issue description is empty"
            )

        client = self._client
        owns_client = client is None
        if client is None:
            client = GitHubIssueClient(
                token=self._settings.github_token,
                base_url=self._settings.github_base_url,
            )

        try:
            return self._create(client, description)
        except _TRANSPORT_ERRORS as e:
            logger.exception("Error creating issue", extra={"repo": self._settings.repository})
            return IssueCreationResult.failed(FailureReason.TRANSPORT, str(e))
        finally:
            if owns_client:
                client.close()

    def _create(self, client: GitHubIssueClient, description: str) -> IssueCreationResult:
        owner = self._settings.repo_owner.strip()
        name = self._settings.repo_name.strip()
        repository = f"{owner}/{name}"

        repo_info = client.discover(owner=owner, name=name)
        if repo_info is None:
            logger.error("Could not fetch repository ID", extra={"repo": repository})
            return IssueCreationResult.failed(
                FailureReason.LOOKUP, f"Repository not found or not accessible: {repository}"
            )

        title = derive_title(description)
        agent = find_agent(repo_info.actors)

        if agent is None:
            logger.warning(
                "Coding agent is not assignable in this repository; creating unassigned issue",
                extra={"repo": repository, "agent": AGENT_LOGIN},
            )
            created = client.create_issue(owner=owner, name=name, title=title, body=description)
            return IssueCreationResult(url=created.url, issue_number=created.number)

        logger.info(
            "Found coding agent",
            extra={"login": agent.login, "id": agent.id, "type": agent.type_name},
        )
        issue = client.create_issue_with_assignees(
            repository_id=repo_info.id,
            title=title,
            body=description,
            assignee_ids=[agent.id],
            agent_assignment=agent_assignment_from_settings(self._settings),
        )
        if issue is None:
            logger.error("createIssue returned no issue", extra={"repo": repository})
            return IssueCreationResult.failed(
                FailureReason.CREATION, "createIssue response did not contain an issue"
            )

        logger.info(
            "Issue assigned",
            extra={"issue_number": issue.number, "assignees": ", ".join(issue.assignees)},
        )
        return IssueCreationResult(
            url=issue.url,
            issue_number=issue.number,
            assignees=issue.assignees,
            assigned_to_agent=True,
        )
