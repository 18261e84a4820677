"""Shared fixtures: an in-memory GitHub releases backend and sync configs."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import pytest

from asset_buckets.github import DuplicateAssetError, GitHubAPIError, ReleaseLookupError
from asset_buckets.models import AssetData, ReleaseDetails
from asset_buckets.utils.config import SyncConfig


class FakeReleasesClient:
    """
    In-memory stand-in for GitHubReleasesClient.

    Keeps releases and assets as API-shaped dicts and records every call so
    tests can assert on network traffic.
    """

    def __init__(self) -> None:
        self.releases: List[Dict[str, Any]] = []
        self.assets: Dict[int, List[Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.fail_list = False
        self.fail_create = False
        self.fail_list_assets = False
        self.fail_upload_names: Set[str] = set()
        self._next_id = 1000

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def add_release(self, name: str, asset_names: Optional[List[str]] = None) -> Dict[str, Any]:
        release_id = self._new_id()
        release = {
            "id": release_id,
            "name": name,
            "tag_name": f"v{release_id:016x}",
            "upload_url": f"https://uploads.example.test/releases/{release_id}/assets{{?name,label}}",
            "html_url": f"https://example.test/releases/{release_id}",
            "draft": False,
            "prerelease": False,
            "body": "",
        }
        self.releases.append(release)
        self.assets[release_id] = []
        for asset_name in asset_names or []:
            self.assets[release_id].append(self._asset_payload(release_id, asset_name, 1, "text/plain"))
        return release

    def _asset_payload(self, release_id: int, name: str, size: int, content_type: str) -> Dict[str, Any]:
        asset_id = self._new_id()
        return {
            "id": asset_id,
            "name": name,
            "label": "",
            "content_type": content_type,
            "state": "uploaded",
            "size": size,
            "download_count": 0,
            "browser_download_url": f"https://example.test/download/{release_id}/{name}",
        }

    # GitHubReleasesClient interface

    def list_releases(self, per_page: int = 30) -> List[ReleaseDetails]:
        self.calls.append(("list_releases", per_page))
        if self.fail_list:
            raise ReleaseLookupError("list_releases", "Server Error", 500, {"message": "Server Error"})
        return [ReleaseDetails.from_api(release) for release in self.releases[:per_page]]

    def create_release(self, tag_name, name, body="", draft=False, prerelease=False) -> ReleaseDetails:
        self.calls.append(("create_release", tag_name, name))
        if self.fail_create:
            raise GitHubAPIError("create_release", "Validation Failed", 422, {"message": "Validation Failed"})
        release = self.add_release(name)
        release["tag_name"] = tag_name
        return ReleaseDetails.from_api(release)

    def list_release_assets(self, release_id: int) -> List[AssetData]:
        self.calls.append(("list_release_assets", release_id))
        if self.fail_list_assets:
            raise ReleaseLookupError("list_release_assets", "Server Error", 500, {"message": "Server Error"})
        return [AssetData.from_api(asset) for asset in self.assets[release_id]]

    def upload_release_asset(self, release_id, name, file_path, content_type, progress=None) -> AssetData:
        self.calls.append(("upload_release_asset", release_id, name))
        if name in self.fail_upload_names:
            raise GitHubAPIError("upload_release_asset", "Bad Gateway", 502, {"message": "Bad Gateway"})
        if any(asset["name"].lower() == name.lower() for asset in self.assets[release_id]):
            raise DuplicateAssetError(
                "upload_release_asset",
                "Validation Failed",
                422,
                {"message": "Validation Failed", "errors": [{"code": "already_exists"}]},
            )
        data = Path(file_path).read_bytes()
        if progress is not None:
            progress(len(data))
        payload = self._asset_payload(release_id, name, len(data), content_type)
        self.assets[release_id].append(payload)
        return AssetData.from_api(payload)

    def uploads(self) -> List[tuple]:
        return [call for call in self.calls if call[0] == "upload_release_asset"]


@pytest.fixture
def fake_github() -> FakeReleasesClient:
    """Empty in-memory GitHub backend."""
    return FakeReleasesClient()


@pytest.fixture
def upload_root(tmp_path: Path) -> Path:
    """Upload root with two directory buckets and one root-level file."""
    root = tmp_path / "assets"
    textures = root / "textures"
    textures.mkdir(parents=True)
    (textures / "Brick Wall.PNG").write_bytes(b"\x89PNG brick")
    (textures / "grass.png").write_bytes(b"\x89PNG grass")
    (textures / "nested").mkdir()
    (textures / "nested" / "ignored.png").write_bytes(b"ignored")

    sounds = root / "sounds"
    sounds.mkdir()
    (sounds / "step.wav").write_bytes(b"RIFF step")

    (root / "README.txt").write_text("root level file")
    return root


@pytest.fixture
def sync_config(tmp_path: Path, upload_root: Path) -> SyncConfig:
    """SyncConfig pointing at the upload_root fixture."""
    return SyncConfig(
        git_user_name="octocat",
        storage_repository_name="asset-storage",
        git_token="ghp_test",
        bucket_meta_path=tmp_path / "meta",
        upload_root_path=upload_root,
        show_progress=False,
    )
