"""
Local Key-Value Storage
=======================
String key-value stores used to persist the saved repository list and the
GitHub access token between runs.

Every consumer takes a store as an explicit argument. Two implementations
are provided:
- MemoryStorage: a dict-backed store (scripting and tests)
- FileStorage: all keys kept in one JSON object on disk

Configuration:
    REPO_SHELF_STORAGE - Path of the storage file used by the command-line
                         tools (default: ~/.config/repo-shelf/storage.json)
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol, Union


logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = Path.home() / ".config" / "repo-shelf" / "storage.json"


class KeyValueStorage(Protocol):
    """Minimal string key-value store interface."""

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent."""

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""


class MemoryStorage:
    """In-process store backed by a plain dict."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __repr__(self):
        return f"MemoryStorage(keys={sorted(self._data)})"


class FileStorage:
    """
    Store persisted as a single JSON object in a file.

    The file is read on every get and rewritten on every set, so separate
    instances pointing at the same path observe each other's writes. A
    missing file behaves like an empty store. A file that is not valid JSON
    raises json.JSONDecodeError; valid JSON that is not an object raises
    ValueError.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, str]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}

        if not isinstance(data, dict):
            raise ValueError(
                f"{self.path} must hold a JSON object, not {type(data).__name__}"
            )
        return data

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to a sibling temp file, then swap it in
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=".storage-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise

        logger.debug("Wrote key %r to %s", key, self.path)

    def __repr__(self):
        return f"FileStorage({str(self.path)!r})"


def get_default_storage(path: Optional[str] = None) -> FileStorage:
    """
    Return the FileStorage used by the command-line tools.

    Args:
        path: Explicit storage file path (optional). Falls back to the
              REPO_SHELF_STORAGE environment variable, then to
              ~/.config/repo-shelf/storage.json

    Returns:
        FileStorage instance
    """
    path = path or os.environ.get("REPO_SHELF_STORAGE") or DEFAULT_STORAGE_PATH
    return FileStorage(path)
