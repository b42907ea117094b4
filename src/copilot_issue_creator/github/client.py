"""GitHub API client wrapper.

This intentionally wraps `requests` (GraphQL) and PyGithub (REST) behind three operations so the
issue creation logic never deals with transport details and tests can swap in a mock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse, urlunparse

import requests
from github import Auth, Github

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30

# Required for the Copilot assignment fields of the createIssue mutation.
GRAPHQL_FEATURES_HEADER = "issues_copilot_assignment_api_support,coding_agent_model_selection"

REPOSITORY_INFO_QUERY = """
query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    id
    suggestedActors(capabilities: [CAN_BE_ASSIGNED], first: 100) {
      nodes {
        login
        __typename
        ... on Bot { id }
        ... on User { id }
      }
    }
  }
}
"""

_CREATE_ISSUE_MUTATION_TEMPLATE = """
mutation($repoId: ID!, $title: String!, $body: String!, $assigneeIds: [ID!]{extra_params}) {{
  createIssue(input: {{
    repositoryId: $repoId,
    title: $title,
    body: $body,
    assigneeIds: $assigneeIds{extra_input}
  }}) {{
    issue {{
      number
      title
      url
      assignees(first: 10) {{ nodes {{ login }} }}
    }}
  }}
}}
"""


class GitHubGraphQLError(RuntimeError):
    """Raised when a GraphQL response carries an `errors` array."""

    def __init__(self, message: str, *, error_types: list[str] | None = None) -> None:
        super().__init__(message)
        self.error_types = error_types or []

    @property
    def is_not_found(self) -> bool:
        return bool(self.error_types) and all(t == "NOT_FOUND" for t in self.error_types)


@dataclass(frozen=True, slots=True)
class AssignableActor:
    """An identity GitHub suggests as an issue assignee for a repository."""

    login: str
    id: str
    type_name: str = ""


@dataclass(frozen=True, slots=True)
class RepositoryInfo:
    """Repository node ID plus the actors that can be assigned to its issues."""

    id: str
    actors: list[AssignableActor]


@dataclass(frozen=True, slots=True)
class CreatedIssue:
    """Issue created without an assignee (REST).

    `url` is the human-facing web URL (`html_url`).
    """

    number: int
    title: str
    url: str


@dataclass(frozen=True, slots=True)
class AssignedIssue:
    """Issue created together with its assignees (GraphQL).

    `url` is the `url` field of the GraphQL Issue object.
    """

    number: int
    title: str
    url: str
    assignees: list[str]


@dataclass(frozen=True, slots=True)
class AgentAssignment:
    """Optional coding agent settings sent along with the assignment (public preview)."""

    base_ref: str = ""
    custom_instructions: str = ""
    custom_agent: str = ""
    model: str = ""

    def to_input(self, *, target_repository_id: str) -> dict[str, str]:
        values = {
            "baseRef": self.base_ref,
            "customInstructions": self.custom_instructions,
            "customAgent": self.custom_agent,
            "model": self.model,
        }
        # Only include non-empty values to keep the request minimal.
        payload = {"targetRepositoryId": target_repository_id}
        payload.update({k: v for k, v in values.items() if v.strip()})
        return payload


class GitHubIssueClient:
    """Small wrapper around the GitHub APIs needed to create (and assign) one issue.

    Constructing the client performs no network calls.
    """

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.github.com",
        session: requests.Session | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._rest_base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "copilot-issue-creator",
            }
        )
        self._github = github_api or Github(auth=Auth.Token(token), base_url=self._rest_base_url)

    def _graphql_url(self) -> str:
        """Derive the GitHub GraphQL endpoint from the configured REST base URL.

        GitHub.com:
            REST: https://api.github.com
            GQL:  https://api.github.com/graphql

        GitHub Enterprise typically exposes REST as:
            https://github.example.com/api/v3
        and GraphQL as:
            https://github.example.com/api/graphql
        """

        parsed = urlparse(self._rest_base_url)
        path = parsed.path.rstrip("/")

        if path.endswith("/api/v3"):
            path = path[: -len("/api/v3")] + "/api/graphql"
        elif path.endswith("/api"):
            path = path[: -len("/api")] + "/api/graphql"
        elif path == "":
            path = "/graphql"
        else:
            path = path + "/graphql"

        return urlunparse(parsed._replace(path=path))

    def _graphql(
        self,
        *,
        query: str,
        variables: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        url = self._graphql_url()
        resp = self._session.post(
            url,
            json={"query": query, "variables": variables},
            headers=headers,
            timeout=DEFAULT_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()
        payload: dict[str, Any] = resp.json()
        if not isinstance(payload, dict):
            raise ValueError("Unexpected GraphQL response: not a JSON object")
        errors = payload.get("errors")
        if errors:
            # Avoid dumping the entire response; keep logs small and actionable.
            messages = []
            error_types = []
            if isinstance(errors, list):
                for item in errors:
                    if isinstance(item, dict):
                        msg = item.get("message")
                        if isinstance(msg, str):
                            messages.append(msg)
                        error_type = item.get("type")
                        if isinstance(error_type, str):
                            error_types.append(error_type)
            message = "; ".join(messages) if messages else "Unknown GraphQL error"
            raise GitHubGraphQLError(f"GitHub GraphQL error: {message}", error_types=error_types)
        data = payload.get("data")
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _parse_actor(node: Any) -> AssignableActor | None:
        if not isinstance(node, dict):
            return None
        login = node.get("login")
        actor_id = node.get("id")
        if not isinstance(login, str) or not isinstance(actor_id, str) or not actor_id:
            return None
        type_name = node.get("__typename")
        return AssignableActor(
            login=login,
            id=actor_id,
            type_name=type_name if isinstance(type_name, str) else "",
        )

    def discover(self, *, owner: str, name: str) -> RepositoryInfo | None:
        """Fetch the repository node ID and up to 100 assignable actors in one round trip.

        Returns:
            None when the repository (or its ID) is not part of the response, including the
            NOT_FOUND error GitHub reports for missing or inaccessible repositories.
        """

        try:
            data = self._graphql(
                query=REPOSITORY_INFO_QUERY,
                variables={"owner": owner, "name": name},
            )
        except GitHubGraphQLError as e:
            if not e.is_not_found:
                raise
            logger.warning(
                "Repository not found", extra={"repo": f"{owner}/{name}", "error": str(e)}
            )
            return None
        repository = data.get("repository")
        if not isinstance(repository, dict):
            return None
        repo_id = repository.get("id")
        if not isinstance(repo_id, str) or not repo_id:
            return None

        actors: list[AssignableActor] = []
        suggested = repository.get("suggestedActors")
        nodes = suggested.get("nodes") if isinstance(suggested, dict) else None
        if isinstance(nodes, list):
            for node in nodes:
                actor = self._parse_actor(node)
                if actor is not None:
                    actors.append(actor)

        logger.debug(
            "Repository info fetched",
            extra={
                "repo": f"{owner}/{name}",
                "repository_id": repo_id,
                "assignable_actors": len(actors),
            },
        )
        return RepositoryInfo(id=repo_id, actors=actors)

    def create_issue(self, *, owner: str, name: str, title: str, body: str) -> CreatedIssue:
        """Create an issue without assignees via the REST API."""

        if not title.strip():
            raise ValueError("Issue title is required")

        repo = self._github.get_repo(f"{owner}/{name}", lazy=True)
        issue = repo.create_issue(title=title, body=body)

        logger.info(
            "Issue created",
            extra={"repo": f"{owner}/{name}", "issue_number": issue.number},
        )
        return CreatedIssue(number=issue.number, title=issue.title, url=issue.html_url)

    def create_issue_with_assignees(
        self,
        *,
        repository_id: str,
        title: str,
        body: str,
        assignee_ids: list[str],
        agent_assignment: AgentAssignment | None = None,
    ) -> AssignedIssue | None:
        """Create an issue and set its assignees in a single GraphQL mutation.

        Returns:
            None when the response does not contain the created issue.
        """

        if not title.strip():
            raise ValueError("Issue title is required")
        if not assignee_ids:
            raise ValueError("At least one assignee is required")

        variables: dict[str, Any] = {
            "repoId": repository_id,
            "title": title,
            "body": body,
            "assigneeIds": list(assignee_ids),
        }
        if agent_assignment is not None:
            # The agentAssignment object is written inline; each optional value gets its own
            # String variable and the target repository reuses $repoId.
            options = agent_assignment.to_input(target_repository_id=repository_id)
            fields = ["targetRepositoryId: $repoId"]
            params = ""
            for key, value in options.items():
                if key == "targetRepositoryId":
                    continue
                fields.append(f"{key}: ${key}")
                params += f", ${key}: String!"
                variables[key] = value
            mutation = _CREATE_ISSUE_MUTATION_TEMPLATE.format(
                extra_params=params,
                extra_input=",\n    agentAssignment: {{ {} }}".format(", ".join(fields)),
            )
        else:
            mutation = _CREATE_ISSUE_MUTATION_TEMPLATE.format(extra_params="", extra_input="")

        data = self._graphql(
            query=mutation,
            variables=variables,
            headers={"GraphQL-Features": GRAPHQL_FEATURES_HEADER},
        )

        create_issue = data.get("createIssue")
        issue = create_issue.get("issue") if isinstance(create_issue, dict) else None
        if not isinstance(issue, dict):
            return None

        number = issue.get("number")
        url = issue.get("url")
        valid_number = isinstance(number, int) and number > 0
        if not valid_number or not isinstance(url, str) or not url.strip():
            logger.warning(
                "createIssue response is missing the issue number or url",
                extra={"repository_id": repository_id},
            )
            return None
        issue_title = issue.get("title")

        assignees: list[str] = []
        raw_assignees = issue.get("assignees")
        nodes = raw_assignees.get("nodes") if isinstance(raw_assignees, dict) else None
        if isinstance(nodes, list):
            for node in nodes:
                if isinstance(node, dict):
                    login = node.get("login")
                    if isinstance(login, str) and login.strip():
                        assignees.append(login)

        logger.info(
            "Issue created with assignees",
            extra={
                "repository_id": repository_id,
                "issue_number": number,
                "requested_assignee_ids": list(assignee_ids),
                "returned_assignees": assignees,
                "has_agent_assignment": agent_assignment is not None,
            },
        )
        return AssignedIssue(
            number=number,
            title=issue_title if isinstance(issue_title, str) else title,
            url=url,
            assignees=assignees,
        )

    def close(self) -> None:
        self._session.close()
        self._github.close()
