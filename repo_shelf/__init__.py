"""
repo-shelf: browse GitHub repository contents and keep a saved list of
repository locations in local storage.
"""

from repo_shelf.branch_list import list_branches
from repo_shelf.github_common import (
    API_BASE,
    GITHUB_TOKEN_STORAGE_KEY,
    REPOS_STORAGE_KEY,
    get_api_url,
)
from repo_shelf.repo_contents import get_contents
from repo_shelf.repo_list import RepositoryDescriptor, add_repository, get_repositories
from repo_shelf.storage import FileStorage, KeyValueStorage, MemoryStorage, get_default_storage
from repo_shelf.token_store import get_stored_token, store_token

__version__ = "0.1.0"

__all__ = [
    "API_BASE",
    "GITHUB_TOKEN_STORAGE_KEY",
    "REPOS_STORAGE_KEY",
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "RepositoryDescriptor",
    "add_repository",
    "get_api_url",
    "get_contents",
    "get_default_storage",
    "get_repositories",
    "get_stored_token",
    "list_branches",
    "store_token",
]
