"""
GitHub Branch Lister
====================
List branches in a GitHub repository.

This script shows, for each branch:
- Branch name
- Commit SHA
- Protected status

Usage:
    repo-shelf-branches owner/repo
    repo-shelf-branches owner/repo --json

The access token, if any, is read from local storage (see repo-shelf-token).
"""

import argparse
import json
import logging
import sys

import requests

from repo_shelf.github_common import (
    API_BASE,
    add_api_url_argument,
    add_common_arguments,
    configure_logging,
    get_api_base,
    get_api_url,
    get_headers,
    parse_repo,
    report_api_message,
)
from repo_shelf.storage import KeyValueStorage, get_default_storage


logger = logging.getLogger(__name__)


def list_branches(
    storage: KeyValueStorage,
    owner: str,
    repo: str,
    api_base: str = API_BASE
) -> list:
    """
    Returns the list of branches for the given repository.

    No pagination is done: the API's first page is returned as-is.
    Network failures and non-JSON bodies propagate to the caller.

    Args:
        storage: Key-value store holding the access token
        owner: Account owner of the repo
        repo: Repo name
        api_base: API base URL

    Returns:
        List of branch dictionaries
    """
    api_url = get_api_url(storage, f"/repos/{owner}/{repo}/branches", api_base=api_base)
    logger.debug("Fetching branches of %s/%s", owner, repo)

    response = requests.get(api_url, headers=get_headers())
    return response.json()


def format_branches_for_display(branches: list) -> str:
    """
    Format branches for human-readable display.

    Args:
        branches: List of branch dictionaries from GitHub API

    Returns:
        Formatted string with branch list
    """
    if not branches:
        return "No branches found."

    lines = []
    lines.append(f"Found {len(branches)} branches:\n")

    for branch in branches:
        name = branch.get("name", "Unknown")
        sha = branch.get("commit", {}).get("sha", "")[:8]
        prefix = "🔒" if branch.get("protected", False) else "  "

        lines.append(f"{prefix} {name:<40} {sha}")

    lines.append("")
    lines.append("Legend: 🔒 = protected")

    return "\n".join(lines)


def main():
    """
    Main entry point for the branch lister.
    """
    parser = argparse.ArgumentParser(
        description="List branches in a GitHub repository",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List branches
  repo-shelf-branches owner/repo

  # Output as JSON
  repo-shelf-branches owner/repo --json
        """
    )

    parser.add_argument(
        "repo",
        help="Repository in owner/repo format"
    )

    parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output as JSON"
    )

    add_common_arguments(parser)
    add_api_url_argument(parser)

    args = parser.parse_args()
    configure_logging(args.verbose)

    owner, repo = parse_repo(args.repo)
    storage = get_default_storage(args.storage)

    try:
        branches = list_branches(storage, owner, repo, args.api_url or get_api_base())
    except requests.exceptions.JSONDecodeError as e:
        print(f"Error: GitHub response was not valid JSON: {e}", file=sys.stderr)
        sys.exit(1)
    except requests.RequestException as e:
        print(f"Error: Request to GitHub failed: {e}", file=sys.stderr)
        sys.exit(1)
    except (OSError, ValueError) as e:
        print(f"Error: Cannot read storage: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(branches, indent=2))
    elif report_api_message(branches):
        sys.exit(1)
    else:
        print(format_branches_for_display(branches))


if __name__ == "__main__":
    main()
