"""
GitHub Repository Contents Viewer
=================================
Get file or directory contents from a GitHub repository.

The Contents API returns a single object for a file (content base64
encoded) and a list of entries for a directory. Both are passed through
unmodified by get_contents(); the command-line tool formats them.

Usage:
    repo-shelf-contents owner/repo
    repo-shelf-contents owner/repo --path README.md
    repo-shelf-contents owner/repo --path src --ref develop
    repo-shelf-contents --saved 1
    repo-shelf-contents owner/repo --path config.json --json

The access token, if any, is read from local storage (see repo-shelf-token).
"""

import argparse
import base64
import json
import logging
import sys
from typing import Optional, Union

import requests

from repo_shelf.github_common import (
    API_BASE,
    add_api_url_argument,
    add_common_arguments,
    configure_logging,
    format_size,
    get_api_base,
    get_api_url,
    get_headers,
    parse_repo,
    report_api_message,
)
from repo_shelf.repo_list import get_repositories
from repo_shelf.storage import KeyValueStorage, get_default_storage


logger = logging.getLogger(__name__)


# =============================================================================
# API Functions
# =============================================================================

def get_contents(
    storage: KeyValueStorage,
    owner: str,
    repo: str,
    path: Optional[str] = None,
    branch: Optional[str] = None,
    api_base: str = API_BASE
) -> Union[dict, list]:
    """
    Get contents of a file or directory from GitHub.
    See https://docs.github.com/en/rest/repos/contents#get-repository-content

    Network failures and non-JSON bodies propagate to the caller. The HTTP
    status is not inspected: an error payload such as {"message": "Not Found"}
    is returned like any other body.

    Args:
        storage: Key-value store holding the access token
        owner: Account owner of the repo
        repo: Repo name
        path: The directory or file to retrieve (default: root)
        branch: The branch to retrieve contents from (optional)
        api_base: API base URL

    Returns:
        Dictionary (file) or list of dictionaries (directory) from API
    """
    if path is None or len(path) == 0:
        path = ""

    api_url = get_api_url(
        storage, f"/repos/{owner}/{repo}/contents/{path}", branch, api_base
    )
    logger.debug("Fetching contents of %s/%s at '%s'", owner, repo, path)

    response = requests.get(api_url, headers=get_headers())
    return response.json()


# =============================================================================
# Display Formatting Functions
# =============================================================================

def format_directory_for_display(contents: list, path: str) -> str:
    """
    Format a directory listing for human-readable display.

    Sorts items with directories first, then files, both alphabetically.
    Entries of other types (symlinks, submodules) are listed last.
    """
    lines = []

    display_path = path if path else "/"
    lines.append(f"📁 {display_path}")
    lines.append("")

    dirs = sorted([c for c in contents if c.get("type") == "dir"],
                  key=lambda x: x.get("name", ""))
    files = sorted([c for c in contents if c.get("type") == "file"],
                   key=lambda x: x.get("name", ""))
    others = sorted([c for c in contents if c.get("type") not in ("dir", "file")],
                    key=lambda x: x.get("name", ""))

    for item in dirs:
        lines.append(f"  📁 {item['name']}/")

    for item in files:
        size = format_size(item.get("size", 0))
        lines.append(f"  📄 {item['name']}  ({size})")

    for item in others:
        lines.append(f"  🔗 {item.get('name', '?')}  [{item.get('type', 'unknown')}]")

    lines.append("")
    lines.append(f"Total: {len(dirs)} directories, {len(files)} files")

    return "\n".join(lines)


def format_file_for_display(content: dict) -> str:
    """
    Format a file's contents for human-readable display.

    Decodes base64 content and displays it under a metadata header.
    """
    lines = []

    name = content.get("name", "Unknown")
    size = format_size(content.get("size", 0))
    sha = content.get("sha", "")[:8]

    lines.append(f"📄 {content.get('path', name)}")
    lines.append(f"   Size: {size}  |  SHA: {sha}")
    lines.append("")
    lines.append("─" * 60)

    encoded_content = content.get("content", "")
    if encoded_content:
        try:
            decoded = base64.b64decode(encoded_content).decode("utf-8")
            lines.append(decoded)
        except (UnicodeDecodeError, ValueError):
            lines.append("[Binary content - cannot display as text]")
    else:
        lines.append("[No content available]")

    lines.append("─" * 60)

    return "\n".join(lines)


# =============================================================================
# Main Entry Point
# =============================================================================

def resolve_target(args, storage: KeyValueStorage) -> tuple:
    """
    Work out (owner, repo, path, branch) from the command-line arguments.

    With --saved N the Nth saved repository (1-based) supplies all four
    values; --path and --ref still override its path and branch.

    Exits:
        Exits with code 1 if neither or both of a repository and --saved are
        given, or if the saved index is out of range
    """
    if args.saved is not None and args.repo:
        print("Error: give either a repository (owner/repo) or --saved N, not both",
              file=sys.stderr)
        sys.exit(1)

    if args.saved is None:
        if not args.repo:
            print("Error: a repository (owner/repo) or --saved N is required",
                  file=sys.stderr)
            sys.exit(1)
        owner, repo = parse_repo(args.repo)
        return owner, repo, args.path, args.ref

    saved = get_repositories(storage)
    if not 1 <= args.saved <= len(saved):
        print(f"Error: no saved repository #{args.saved} "
              f"({len(saved)} saved)", file=sys.stderr)
        sys.exit(1)

    entry = saved[args.saved - 1]
    path = args.path if args.path is not None else entry.get("path")
    branch = args.ref if args.ref is not None else entry.get("branch")
    return entry["owner"], entry["repo"], path, branch


def main():
    """
    Main entry point for the contents viewer.

    Parses command-line arguments and displays file or directory contents.
    """
    parser = argparse.ArgumentParser(
        description="Get file or directory contents from a GitHub repository",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Get root directory listing
  repo-shelf-contents owner/repo

  # Get a specific file
  repo-shelf-contents owner/repo --path README.md

  # Get contents from a specific branch
  repo-shelf-contents owner/repo --path src --ref develop

  # Browse the first saved repository
  repo-shelf-contents --saved 1

  # JSON output (includes metadata like SHA, size, etc.)
  repo-shelf-contents owner/repo --path README.md --json
        """
    )

    parser.add_argument(
        "repo",
        nargs="?",
        help="Repository in owner/repo format"
    )

    parser.add_argument(
        "--path", "-p",
        help="Path to file or directory (default: root)"
    )

    parser.add_argument(
        "--ref", "-r",
        help="Branch to read from (default: the repository's default branch)"
    )

    parser.add_argument(
        "--saved", "-s",
        type=int,
        metavar="N",
        help="Use the Nth saved repository (see repo-shelf-repos list)"
    )

    parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output as JSON with full metadata"
    )

    add_common_arguments(parser)
    add_api_url_argument(parser)

    args = parser.parse_args()
    configure_logging(args.verbose)

    storage = get_default_storage(args.storage)
    api_base = args.api_url or get_api_base()

    try:
        owner, repo, path, branch = resolve_target(args, storage)
        contents = get_contents(storage, owner, repo, path, branch, api_base)
    except requests.exceptions.JSONDecodeError as e:
        print(f"Error: GitHub response was not valid JSON: {e}", file=sys.stderr)
        sys.exit(1)
    except requests.RequestException as e:
        # Checked before OSError: RequestException derives from IOError
        print(f"Error: Request to GitHub failed: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: Invalid stored data: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: Cannot read storage: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(contents, indent=2))
    elif report_api_message(contents):
        sys.exit(1)
    elif isinstance(contents, list):
        print(format_directory_for_display(contents, path))
    else:
        print(format_file_for_display(contents))


if __name__ == "__main__":
    main()
