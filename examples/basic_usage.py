#!/usr/bin/env python3
"""Programmatic issue creation example.

This demonstrates using the issue creator directly instead of through the CLI:

* load settings from the environment / `.env`
* create a GitHub issue, assigned to copilot-swe-agent when possible
* inspect the explicit result instead of an exit status
"""

from __future__ import annotations

import argparse
from typing import Sequence

from copilot_issue_creator.config import IssueCreatorSettings
from copilot_issue_creator.issue_creator import IssueCreator
from copilot_issue_creator.logging import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a GitHub issue (programmatic example).")
    parser.add_argument("--title", required=True, help="Issue title")
    parser.add_argument("--body", default="", help="Text appended below the title")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    description = args.title if not args.body else f"{args.title}\n\n{args.body}"

    settings = IssueCreatorSettings()
    configure_logging(settings.log_level)

    result = IssueCreator(settings=settings).create_issue(description)
    if not result.ok:
        print(f"Failed ({result.failure.value if result.failure else 'unknown'}): {result.message}")
        return 1

    print(f"Created issue #{result.issue_number}")
    print(f"URL: {result.url}")
    if result.assigned_to_agent:
        print(f"Assigned to: {', '.join(result.assignees)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
