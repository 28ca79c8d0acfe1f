"""
Saved Repository List
=====================
Keep a list of repository locations (owner, repo, subdirectory, branch)
in local storage.

The list is stored as one JSON array under the "repos" key, in insertion
order. Entries are never deduplicated, updated or removed.

Usage:
    repo-shelf-repos list
    repo-shelf-repos list --json
    repo-shelf-repos add owner/repo
    repo-shelf-repos add owner/repo --path docs --branch main
"""

import argparse
import json
import logging
import sys
from typing import List, TypedDict

from repo_shelf.github_common import (
    REPOS_STORAGE_KEY,
    add_common_arguments,
    configure_logging,
    parse_repo,
)
from repo_shelf.storage import KeyValueStorage, get_default_storage


logger = logging.getLogger(__name__)


class RepositoryDescriptor(TypedDict):
    """A saved pointer to a subdirectory of a branch in a repository."""

    owner: str
    repo: str
    path: str
    branch: str


# =============================================================================
# Storage Functions
# =============================================================================

def get_repositories(storage: KeyValueStorage) -> List[RepositoryDescriptor]:
    """
    Returns list of repos stored in local storage.

    An absent (or empty) value reads as an empty list. A value that is not
    valid JSON raises json.JSONDecodeError.

    Args:
        storage: Key-value store holding the list

    Returns:
        List of repository dictionaries, in the order they were added
    """
    repo_list_str = storage.get(REPOS_STORAGE_KEY)
    if repo_list_str:
        return json.loads(repo_list_str)
    return []


def add_repository(
    storage: KeyValueStorage,
    owner: str,
    repo: str,
    path: str,
    branch: str
) -> None:
    """
    Adds a repository location to the saved list in local storage.

    Values are stored verbatim. The whole list is read, appended to and
    written back; concurrent writers can overwrite each other's additions.

    Args:
        storage: Key-value store holding the list
        owner: Repo owner
        repo: Repo name
        path: Subdirectory
        branch: Branch name
    """
    entry = {"owner": owner, "repo": repo, "path": path, "branch": branch}

    repo_list = get_repositories(storage)
    repo_list.append(entry)

    storage.set(REPOS_STORAGE_KEY, json.dumps(repo_list, separators=(",", ":")))
    logger.debug("Saved %s/%s (%d repositories stored)", owner, repo, len(repo_list))


# =============================================================================
# Display Formatting Functions
# =============================================================================

def format_repos_for_display(repos: list) -> str:
    """
    Format the saved repositories as a numbered list.

    The numbers are the ones accepted by repo-shelf-contents --saved.
    """
    if not repos:
        return "No saved repositories."

    lines = [f"{len(repos)} saved repositories:", ""]

    for index, entry in enumerate(repos, start=1):
        location = f"{entry.get('owner')}/{entry.get('repo')}"
        path = entry.get("path") or "/"
        branch = entry.get("branch") or "(default branch)"
        lines.append(f"  {index:>3}. {location:<40} {path:<24} @ {branch}")

    return "\n".join(lines)


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    """
    Main entry point for the saved repository list.
    """
    parser = argparse.ArgumentParser(
        description="Show or extend the saved repository list",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show saved repositories
  repo-shelf-repos list

  # Save a repository root on its default branch
  repo-shelf-repos add octocat/hello-world

  # Save a subdirectory of a branch
  repo-shelf-repos add octocat/hello-world --path docs --branch main
        """
    )

    add_common_arguments(parser)

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Show saved repositories")
    list_parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output as JSON"
    )

    add_parser = subparsers.add_parser("add", help="Save a repository location")
    add_parser.add_argument(
        "repo",
        help="Repository in owner/repo format"
    )
    add_parser.add_argument(
        "--path", "-p",
        default="",
        help="Subdirectory within the repository (default: root)"
    )
    add_parser.add_argument(
        "--branch", "-b",
        default="",
        help="Branch name (default: the repository's default branch)"
    )

    args = parser.parse_args()
    configure_logging(args.verbose)

    storage = get_default_storage(args.storage)

    try:
        if args.command == "add":
            owner, repo = parse_repo(args.repo)
            add_repository(storage, owner, repo, args.path, args.branch)
            print(f"Saved {owner}/{repo}")
            return

        repos = get_repositories(storage)
    except ValueError as e:
        print(f"Error: Invalid stored data: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: Cannot access storage: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(repos, indent=2))
    else:
        print(format_repos_for_display(repos))


if __name__ == "__main__":
    main()
