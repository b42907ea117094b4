"""CLI entrypoint: create one GitHub issue and assign it to the Copilot coding agent."""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from copilot_issue_creator import __version__
from copilot_issue_creator.config import IssueCreatorSettings
from copilot_issue_creator.issue_creator import IssueCreator
from copilot_issue_creator.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copilot-issue",
        description=(
            "Create a GitHub issue from a description and assign it to copilot-swe-agent "
            "when the agent is available for the repository"
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"copilot-issue-creator {__version__}"
    )
    parser.add_argument(
        "description",
        nargs="?",
        default=None,
        help="Issue description; the first line becomes the title",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.description:
        parser.print_usage(sys.stderr)
        return 1

    try:
        settings = IssueCreatorSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        result = IssueCreator(settings=settings).create_issue(args.description)
    except Exception:
        logger.exception("Command failed")
        print("Failed to create issue", file=sys.stderr)
        return 1

    if not result.ok:
        logger.info(
            "Issue creation failed",
            extra={"reason": result.failure.value if result.failure else None},
        )
        print("Failed to create issue", file=sys.stderr)
        return 1

    print(f"Issue created: {result.url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
