"""
GitHub Token Storage
====================
Store the GitHub access token that the API functions attach to requests.

The token is kept raw under the "github_token" key of local storage.
An empty value means no token.

Usage:
    repo-shelf-token ghp_xxxxxxxxxxxx
    repo-shelf-token --from-env
    repo-shelf-token --show
    repo-shelf-token --clear

Environment Variables:
    GITHUB_TOKEN - Token source for --from-env
"""

import argparse
import os
import sys
from typing import Optional

from repo_shelf.github_common import (
    GITHUB_TOKEN_STORAGE_KEY,
    add_common_arguments,
    configure_logging,
)
from repo_shelf.storage import KeyValueStorage, get_default_storage


def get_stored_token(storage: KeyValueStorage) -> Optional[str]:
    """Return the stored token, or None if none (or an empty one) is stored."""
    return storage.get(GITHUB_TOKEN_STORAGE_KEY) or None


def store_token(storage: KeyValueStorage, token: str) -> None:
    """Store the token; an empty string clears it."""
    storage.set(GITHUB_TOKEN_STORAGE_KEY, token)


def mask_token(token: str) -> str:
    """Show only the last four characters of a token."""
    if len(token) <= 4:
        return "*" * len(token)
    return "*" * (len(token) - 4) + token[-4:]


def main():
    """
    Main entry point for token storage.
    """
    parser = argparse.ArgumentParser(
        description="Store the GitHub access token used by repo-shelf",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Store a token
  repo-shelf-token ghp_xxxxxxxxxxxx

  # Copy the token from $GITHUB_TOKEN
  repo-shelf-token --from-env

  # Check whether a token is stored
  repo-shelf-token --show

Create a token at: https://github.com/settings/tokens
        """
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "token",
        nargs="?",
        help="Personal access token to store"
    )
    source.add_argument(
        "--from-env",
        action="store_true",
        help="Store the value of the GITHUB_TOKEN environment variable"
    )
    source.add_argument(
        "--clear",
        action="store_true",
        help="Remove the stored token"
    )
    source.add_argument(
        "--show",
        action="store_true",
        help="Report whether a token is stored (masked)"
    )

    add_common_arguments(parser)

    args = parser.parse_args()
    configure_logging(args.verbose)

    storage = get_default_storage(args.storage)

    try:
        if args.show:
            token = get_stored_token(storage)
            if token:
                print(f"Token stored: {mask_token(token)}")
            else:
                print("No token stored")
            return

        if args.clear:
            store_token(storage, "")
            print("Token cleared")
            return

        token = args.token
        if token is not None and not token:
            print("Error: empty token; use --clear to remove the stored token",
                  file=sys.stderr)
            sys.exit(1)

        if args.from_env:
            token = os.environ.get("GITHUB_TOKEN")
            if not token:
                print("Error: GITHUB_TOKEN environment variable not set", file=sys.stderr)
                print("Create a token at: https://github.com/settings/tokens", file=sys.stderr)
                sys.exit(1)

        store_token(storage, token)
        print(f"Token stored: {mask_token(token)}")
    except (OSError, ValueError) as e:
        print(f"Error: Cannot access storage: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
