from unittest.mock import Mock
from urllib.parse import parse_qs, urlsplit

import pytest

from repo_shelf.github_common import (
    API_BASE,
    GITHUB_TOKEN_STORAGE_KEY,
    format_size,
    get_api_base,
    get_api_url,
    get_headers,
    parse_repo,
    report_api_message,
)
from repo_shelf.storage import MemoryStorage


def query_of(url):
    return parse_qs(urlsplit(url).query, keep_blank_values=True)


class TestGetApiUrl:
    """Test composing API URLs."""

    def test_bare_path_has_no_query_string(self, storage):
        url = get_api_url(storage, "/repos/o/r/branches", api_base="https://api.example.com")
        assert url == "https://api.example.com/repos/o/r/branches"

    def test_default_base_is_github(self, storage):
        assert get_api_url(storage, "/repos/o/r/branches") == API_BASE + "/repos/o/r/branches"

    def test_stored_token_is_attached(self, token_storage):
        url = get_api_url(token_storage, "/repos/o/r/branches")
        assert query_of(url) == {"access_token": ["secret-token"]}

    def test_empty_token_is_ignored(self):
        storage = MemoryStorage({GITHUB_TOKEN_STORAGE_KEY: ""})
        url = get_api_url(storage, "/repos/o/r/branches")
        assert "?" not in url

    def test_branch_sets_ref(self, storage):
        url = get_api_url(storage, "/repos/o/r/contents/", "develop")
        assert query_of(url) == {"ref": ["develop"]}
        assert urlsplit(url).path == "/repos/o/r/contents/"

    @pytest.mark.parametrize("branch", [None, ""])
    def test_missing_branch_sets_no_ref(self, token_storage, branch):
        url = get_api_url(token_storage, "/repos/o/r/contents/", branch)
        assert "ref" not in query_of(url)

    def test_token_and_branch(self, token_storage):
        url = get_api_url(token_storage, "/repos/o/r/contents/docs", "main")
        assert query_of(url) == {"access_token": ["secret-token"], "ref": ["main"]}

    def test_existing_query_parameters_are_preserved(self, token_storage):
        url = get_api_url(token_storage, "/repos/o/r/branches?per_page=5&protected=true")
        assert query_of(url) == {
            "per_page": ["5"],
            "protected": ["true"],
            "access_token": ["secret-token"],
        }

    def test_existing_ref_is_overwritten_in_place(self, storage):
        url = get_api_url(storage, "/repos/o/r/contents/?ref=old&x=1&ref=older", "new")
        assert urlsplit(url).query == "ref=new&x=1"

    def test_existing_token_is_overwritten(self, token_storage):
        url = get_api_url(token_storage, "/repos/o/r/branches?access_token=stale")
        assert query_of(url) == {"access_token": ["secret-token"]}

    def test_values_are_encoded(self, storage):
        url = get_api_url(storage, "/repos/o/r/contents/", "feature/a b")
        assert urlsplit(url).query == "ref=feature%2Fa+b"
        assert query_of(url) == {"ref": ["feature/a b"]}

    def test_reads_storage_once_and_never_writes(self):
        storage = Mock()
        storage.get.return_value = "secret-token"

        get_api_url(storage, "/repos/o/r/branches", "main")

        storage.get.assert_called_once_with(GITHUB_TOKEN_STORAGE_KEY)
        storage.set.assert_not_called()


class TestGetApiBase:

    def test_default(self):
        assert get_api_base() == "https://api.github.com"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3")
        assert get_api_base() == "https://ghe.example.com/api/v3"


def test_headers_pin_api_version_and_carry_no_authorization():
    headers = get_headers()
    assert headers["X-GitHub-Api-Version"] == "2022-11-28"
    assert headers["Accept"] == "application/vnd.github+json"
    assert "Authorization" not in headers


class TestParseRepo:

    def test_valid(self):
        assert parse_repo("octocat/hello-world") == ("octocat", "hello-world")

    @pytest.mark.parametrize("value", ["octocat", "a/b/c", "/repo", "owner/"])
    def test_invalid_exits(self, value, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_repo(value)
        assert exc_info.value.code == 1
        assert "Invalid repository format" in capsys.readouterr().err


class TestReportApiMessage:

    def test_error_payload_is_reported(self, capsys):
        assert report_api_message({"message": "Not Found", "documentation_url": "x"})
        assert "Not Found" in capsys.readouterr().err

    @pytest.mark.parametrize("payload", [
        [],
        [{"name": "main"}],
        {"type": "file", "name": "README.md", "message": "unused"},
        {"name": "main"},
    ])
    def test_regular_payloads_pass(self, payload, capsys):
        assert not report_api_message(payload)
        assert capsys.readouterr().err == ""


@pytest.mark.parametrize("size,expected", [
    (0, "0 B"),
    (1023, "1023 B"),
    (1536, "1.5 KB"),
    (5 * 1024 * 1024, "5.0 MB"),
    (3 * 1024 ** 3, "3.0 GB"),
])
def test_format_size(size, expected):
    assert format_size(size) == expected
