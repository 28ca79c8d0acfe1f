"""
GitHub API Common Utilities
===========================
Shared functions used by the repo-shelf modules and command-line tools.

This module provides:
- The API base URL, API version and local storage keys
- API URL composition with the stored access token and branch reference
- HTTP header construction with explicit API versioning
- Repository string parsing
- Output formatting helpers

API Versioning:
    Uses explicit GitHub API versioning (2022-11-28) via the
    X-GitHub-Api-Version header for long-term stability.
    See: https://docs.github.com/en/rest/about-the-rest-api/api-versions
"""

import logging
import os
import sys
from typing import Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from repo_shelf.storage import KeyValueStorage


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# GitHub API base URL - all API requests go through this endpoint
API_BASE = "https://api.github.com"

# Explicit API version for stability
API_VERSION = "2022-11-28"

# Keys in the local key-value store
REPOS_STORAGE_KEY = "repos"
GITHUB_TOKEN_STORAGE_KEY = "github_token"


# =============================================================================
# URL Composition
# =============================================================================

def _set_query_param(pairs: list, name: str, value: str) -> list:
    """
    Set a query parameter, replacing the first existing occurrence in place
    and dropping any later duplicates. Appends when the name is not present.
    """
    result = []
    placed = False

    for key, current in pairs:
        if key != name:
            result.append((key, current))
        elif not placed:
            result.append((name, value))
            placed = True

    if not placed:
        result.append((name, value))

    return result


def get_api_url(
    storage: KeyValueStorage,
    url: str,
    branch: Optional[str] = None,
    api_base: str = API_BASE
) -> str:
    """
    Compose the GitHub API URL for the given path, attaching the user's
    access token if one is stored.

    Existing query parameters on ``url`` are preserved. The ``access_token``
    and ``ref`` parameters are added, or overwritten if already present.
    When neither applies, the resolved URL is returned as-is.

    Args:
        storage: Key-value store holding the access token
        url: The path and search params (e.g., "/repos/o/r/branches")
        branch: The branch to get from (optional)
        api_base: Base URL the path is resolved against

    Returns:
        Absolute API URL string (not yet fetched)
    """
    absolute = urljoin(api_base, url)
    logger.debug("Resolved %s against %s", url, api_base)

    # Exactly one storage read per composed URL
    token = storage.get(GITHUB_TOKEN_STORAGE_KEY)

    if not token and not branch:
        return absolute

    parts = urlsplit(absolute)
    pairs = parse_qsl(parts.query, keep_blank_values=True)

    if token:
        pairs = _set_query_param(pairs, "access_token", token)

    if branch:
        pairs = _set_query_param(pairs, "ref", branch)

    return urlunsplit(parts._replace(query=urlencode(pairs)))


def get_api_base() -> str:
    """
    Return the API base URL, honoring the GITHUB_API_URL environment
    variable.

    API paths are absolute ("/repos/..."), so only the scheme and host of
    the base take effect: "https://host/api/v3" sends requests to
    "https://host/repos/...".
    """
    return os.environ.get("GITHUB_API_URL") or API_BASE


# =============================================================================
# HTTP Header Functions
# =============================================================================

def get_headers() -> dict:
    """
    Build HTTP headers for GitHub API requests.

    The access token travels in the query string (see get_api_url), so no
    Authorization header is sent.

    Returns:
        Dictionary of headers for use with requests library
    """
    return {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": API_VERSION,
        # User-Agent is required by GitHub API
        "User-Agent": "repo-shelf",
    }


# =============================================================================
# Repository Parsing Functions
# =============================================================================

def parse_repo(repo_string: str) -> Tuple[str, str]:
    """
    Parse owner/repo string into components.

    Args:
        repo_string: Repository in "owner/repo" format

    Returns:
        Tuple of (owner, repo) strings

    Exits:
        Exits with code 1 if the format is invalid
    """
    parts = repo_string.split("/")

    if len(parts) != 2 or not all(parts):
        print(f"Error: Invalid repository format '{repo_string}'", file=sys.stderr)
        print("Expected format: owner/repo (e.g., octocat/hello-world)", file=sys.stderr)
        sys.exit(1)

    return parts[0], parts[1]


def report_api_message(payload) -> bool:
    """
    Print the message of a GitHub error payload to stderr.

    GitHub answers failed requests with a JSON object carrying a "message"
    (e.g., {"message": "Not Found"}). Content and branch objects never carry
    one without also carrying a "type" or "name".

    Returns:
        True if the payload was an error payload and was reported
    """
    if not isinstance(payload, dict) or "message" not in payload:
        return False
    if "type" in payload or "name" in payload:
        return False

    print("Error: GitHub API returned an error", file=sys.stderr)
    print(f"Message: {payload['message']}", file=sys.stderr)
    return True


# =============================================================================
# Command-Line Helpers
# =============================================================================

# Only this logger is raised to DEBUG by --verbose. urllib3 logs full request
# URLs, access_token included, so third-party loggers keep their levels.
PACKAGE_LOGGER = "repo_shelf"
VERBOSE_HANDLER_NAME = "repo_shelf.verbose"


def configure_logging(verbose: bool) -> None:
    """Send repo_shelf debug records to stderr when --verbose is given."""
    if not verbose:
        return

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG)

    for handler in package_logger.handlers:
        if handler.get_name() == VERBOSE_HANDLER_NAME:
            handler.setStream(sys.stderr)
            return

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(VERBOSE_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)


def add_common_arguments(parser) -> None:
    """Add the --storage and --verbose options shared by all tools."""
    parser.add_argument(
        "--storage",
        help="Path to the local storage file "
             "(default: $REPO_SHELF_STORAGE or ~/.config/repo-shelf/storage.json)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print debug output to stderr"
    )


def add_api_url_argument(parser) -> None:
    """Add the --api-url option for tools that call the API."""
    parser.add_argument(
        "--api-url",
        help="GitHub API base URL; only its scheme and host are used, since "
             "API paths are absolute (default: $GITHUB_API_URL or https://api.github.com)"
    )


# =============================================================================
# Output Formatting Helpers
# =============================================================================

def format_size(size_bytes: int) -> str:
    """
    Format a byte size as a human-readable string.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.5 KB", "2.3 MB")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"
