"""
Unit tests for the GitHub Releases client.

Uses a MagicMock session returning hand-built requests.Response objects, so
no network access or token is needed.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from asset_buckets.github import (
    DuplicateAssetError,
    GitHubAPIError,
    GitHubReleasesClient,
    ReleaseLookupError,
)
from asset_buckets.github.client import _build_session
from asset_buckets.github.errors import error_from_response
from asset_buckets.utils.config import SyncConfig


def make_response(status: int, payload=None, reason: str = "") -> requests.Response:
    """Build a requests.Response with a JSON body."""
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response._content = json.dumps(payload).encode() if payload is not None else b""
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return GitHubReleasesClient(
        owner="octocat",
        repo="asset-storage",
        token="ghp_test",
        session=session,
        timeout=5,
    )


class TestErrorFromResponse:
    """Test HTTP error classification."""

    def test_already_exists_is_duplicate(self):
        response = make_response(
            422,
            {
                "message": "Validation Failed",
                "errors": [{"resource": "ReleaseAsset", "code": "already_exists", "field": "name"}],
            },
        )

        error = error_from_response("upload_release_asset", response)

        assert isinstance(error, DuplicateAssetError)
        assert error.status == 422
        assert error.message == "Validation Failed"

    def test_other_422_is_api_error(self):
        response = make_response(
            422, {"message": "Validation Failed", "errors": [{"code": "invalid", "field": "tag_name"}]}
        )

        error = error_from_response("create_release", response)

        assert type(error) is GitHubAPIError
        assert error.body["errors"][0]["code"] == "invalid"

    def test_non_json_body_falls_back_to_reason(self):
        response = requests.Response()
        response.status_code = 502
        response.reason = "Bad Gateway"
        response._content = b"<html>oops</html>"

        error = error_from_response("list_releases", response)

        assert error.message == "Bad Gateway"
        assert error.body == "<html>oops</html>"
        assert "HTTP 502" in str(error)


class TestReleases:
    """Test release listing and creation."""

    def test_list_releases(self, client, session):
        session.request.return_value = make_response(
            200, [{"id": 1, "name": "textures", "tag_name": "va"}, {"id": 2, "name": None}]
        )

        releases = client.list_releases(per_page=50)

        assert [r.id for r in releases] == [1, 2]
        assert releases[0].name == "textures"
        args, kwargs = session.request.call_args
        assert args == ("GET", "https://api.github.com/repos/octocat/asset-storage/releases")
        assert kwargs["params"] == {"per_page": 50}
        assert kwargs["timeout"] == 5

    def test_list_releases_http_failure_is_lookup_error(self, client, session):
        session.request.return_value = make_response(404, {"message": "Not Found"})

        with pytest.raises(ReleaseLookupError) as exc_info:
            client.list_releases()

        assert exc_info.value.status == 404
        assert exc_info.value.message == "Not Found"

    def test_list_releases_transport_failure_is_lookup_error(self, client, session):
        session.request.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(ReleaseLookupError) as exc_info:
            client.list_releases()

        assert exc_info.value.status is None

    def test_create_release_payload(self, client, session):
        session.request.return_value = make_response(
            201, {"id": 9, "name": "textures", "tag_name": "v00ff"}
        )

        release = client.create_release(tag_name="v00ff", name="textures")

        assert release.id == 9
        args, kwargs = session.request.call_args
        assert args[0] == "POST"
        assert kwargs["json"] == {
            "tag_name": "v00ff",
            "name": "textures",
            "body": "",
            "draft": False,
            "prerelease": False,
        }

    def test_create_release_failure_is_api_error(self, client, session):
        session.request.return_value = make_response(403, {"message": "Resource not accessible"})

        with pytest.raises(GitHubAPIError) as exc_info:
            client.create_release(tag_name="v1", name="textures")

        assert not isinstance(exc_info.value, ReleaseLookupError)
        assert exc_info.value.status == 403

    def test_list_release_assets(self, client, session):
        session.request.return_value = make_response(200, [{"id": 5, "name": "a.png"}])

        assets = client.list_release_assets(9)

        assert [a.name for a in assets] == ["a.png"]
        assert session.request.call_args[0][1].endswith("/releases/9/assets")


class TestUploadReleaseAsset:
    """Test streaming asset uploads."""

    def test_upload_streams_file_with_headers(self, client, session, tmp_path):
        path = tmp_path / "brick.png"
        path.write_bytes(b"0123456789" * 100)
        sent = {}
        progress = []

        def fake_request(method, url, **kwargs):
            sent["method"] = method
            sent["url"] = url
            sent["params"] = kwargs["params"]
            sent["headers"] = kwargs["headers"]
            body = kwargs["data"]
            sent["length"] = len(body)
            chunks = []
            while True:
                chunk = body.read(256)
                if not chunk:
                    break
                chunks.append(chunk)
            sent["body"] = b"".join(chunks)
            return make_response(201, {"id": 77, "name": "brick.png", "size": 1000})

        session.request.side_effect = fake_request

        asset = client.upload_release_asset(9, "brick.png", path, "image/png", progress=progress.append)

        assert asset.id == 77
        assert sent["method"] == "POST"
        assert sent["url"] == (
            "https://uploads.github.com/repos/octocat/asset-storage/releases/9/assets"
        )
        assert sent["params"] == {"name": "brick.png"}
        assert sent["headers"] == {"Content-Type": "image/png", "Content-Length": "1000"}
        assert sent["length"] == 1000
        assert sent["body"] == path.read_bytes()
        assert sum(progress) == 1000

    def test_upload_duplicate_raises_duplicate_error(self, client, session, tmp_path):
        path = tmp_path / "brick.png"
        path.write_bytes(b"x")
        session.request.return_value = make_response(
            422, {"message": "Validation Failed", "errors": [{"code": "already_exists"}]}
        )

        with pytest.raises(DuplicateAssetError):
            client.upload_release_asset(9, "brick.png", path, "image/png")

    def test_upload_missing_file_raises_oserror(self, client, session, tmp_path):
        with pytest.raises(OSError):
            client.upload_release_asset(9, "gone.png", tmp_path / "gone.png", "image/png")

        session.request.assert_not_called()


class TestClientConstruction:
    """Test session and config wiring."""

    def test_session_headers_and_retry_only_for_get(self):
        session = _build_session("ghp_token")

        assert session.headers["Authorization"] == "Bearer ghp_token"
        assert session.headers["Accept"] == "application/vnd.github+json"
        retry = session.get_adapter("https://api.github.com").max_retries
        assert retry.total == 3
        assert "GET" in retry.allowed_methods
        assert "POST" not in retry.allowed_methods

    def test_from_config(self, tmp_path):
        config = SyncConfig(
            git_user_name="octocat",
            storage_repository_name="asset-storage",
            git_token="ghp_token",
            bucket_meta_path=tmp_path,
            upload_root_path=tmp_path,
            api_url="https://ghe.example.com/api/v3",
            request_timeout_seconds=12,
        )

        client = GitHubReleasesClient.from_config(config)

        assert client.owner == "octocat"
        assert client.repo == "asset-storage"
        assert client.api_url == "https://ghe.example.com/api/v3"
        assert client.timeout == 12
        assert "ghp_token" not in repr(client)
