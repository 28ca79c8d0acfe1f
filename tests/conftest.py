import logging
from unittest.mock import Mock

import pytest

from repo_shelf.storage import MemoryStorage


@pytest.fixture
def storage():
    """An empty in-memory store."""
    return MemoryStorage()


@pytest.fixture
def token_storage():
    """An in-memory store holding an access token."""
    return MemoryStorage({"github_token": "secret-token"})


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's environment from leaking into the tests."""
    for name in ("GITHUB_API_URL", "GITHUB_TOKEN", "REPO_SHELF_STORAGE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def json_response():
    """Factory for stand-ins of requests.Response whose json() returns a payload."""
    def make(payload):
        response = Mock()
        response.json.return_value = payload
        return response
    return make


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo what --verbose does to the repo_shelf logger."""
    package_logger = logging.getLogger("repo_shelf")
    level = package_logger.level
    handlers = list(package_logger.handlers)
    yield
    package_logger.setLevel(level)
    package_logger.handlers[:] = handlers
