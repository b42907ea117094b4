"""Copilot Issue Creator.

Creates a single GitHub issue from a free-text description and assigns it to the
Copilot coding agent (`copilot-swe-agent`) when the agent can be assigned in the
target repository.
"""

__version__ = "0.1.0"

from copilot_issue_creator.config import IssueCreatorSettings
from copilot_issue_creator.issue_creator import FailureReason, IssueCreationResult, IssueCreator

__all__ = [
    "__version__",
    "FailureReason",
    "IssueCreationResult",
    "IssueCreator",
    "IssueCreatorSettings",
]
