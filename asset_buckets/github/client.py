"""
GitHub Releases REST client.

Covers the four calls a sync run needs: list releases, create a release,
list a release's assets and upload an asset. Uses a requests Session with
token auth. Transient gateway errors on GET requests are retried by the
transport adapter; POSTs (release creation, uploads) are sent once.

Example usage:
    >>> client = GitHubReleasesClient(owner="octocat", repo="storage", token="...")
    >>> release = client.create_release(tag_name="v1a2b", name="textures")
    >>> asset = client.upload_release_asset(
    ...     release.id, "brick.png", Path("textures/brick.png"), "image/png"
    ... )
    >>> print(asset.browser_download_url)
"""

from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from asset_buckets import __version__
from asset_buckets.github.errors import (
    GitHubAPIError,
    GitHubError,
    ReleaseLookupError,
    error_from_response,
)
from asset_buckets.models import AssetData, ReleaseDetails
from asset_buckets.utils.config import DEFAULT_API_URL, DEFAULT_UPLOADS_URL, SyncConfig
from asset_buckets.utils.logging import get_logger

logger = get_logger(__name__)

API_VERSION = "2022-11-28"
USER_AGENT = f"git-asset-buckets/{__version__}"
DEFAULT_TIMEOUT_SECONDS = 60

# Called with the number of bytes just sent
ProgressCallback = Callable[[int], None]


class _ProgressReader:
    """
    File wrapper reporting bytes as the HTTP layer reads them.

    Defines __len__ so requests sends a Content-Length instead of chunking.
    """

    def __init__(self, handle: BinaryIO, size: int, progress: Optional[ProgressCallback]):
        self._handle = handle
        self._size = size
        self._progress = progress

    def __len__(self) -> int:
        return self._size

    def read(self, size: int = -1) -> bytes:
        chunk = self._handle.read(size)
        if chunk and self._progress is not None:
            self._progress(len(chunk))
        return chunk


def _build_session(token: str) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": USER_AGENT,
        }
    )
    retry = Retry(
        total=3,
        backoff_factor=1.0,
        status_forcelist=[502, 503, 504],
        allowed_methods=frozenset(["GET"]),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class GitHubReleasesClient:
    """
    Client for one repository's releases.

    Args:
        owner: Repository owner (user or organization)
        repo: Repository name
        token: Personal access token or GitHub App token
        api_url: REST API base URL (GitHub Enterprise: https://host/api/v3)
        uploads_url: Upload API base URL
        timeout: Per-request timeout in seconds
        session: Pre-built session (tests); built from `token` if None
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        api_url: str = DEFAULT_API_URL,
        uploads_url: str = DEFAULT_UPLOADS_URL,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.uploads_url = uploads_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else _build_session(token)

    @classmethod
    def from_config(cls, config: SyncConfig) -> "GitHubReleasesClient":
        return cls(
            owner=config.git_user_name,
            repo=config.storage_repository_name,
            token=config.git_token,
            api_url=config.api_url,
            uploads_url=config.uploads_url,
            timeout=config.request_timeout_seconds,
        )

    def __repr__(self) -> str:
        return f"GitHubReleasesClient(owner={self.owner!r}, repo={self.repo!r})"

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _releases_url(self, suffix: str = "") -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/releases{suffix}"

    def _request(self, operation: str, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise GitHubAPIError(operation, str(e)) from e

        if not response.ok:
            raise error_from_response(operation, response)

        logger.debug(f"{method} {url} -> {response.status_code}")
        return response.json() if response.content else None

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    def list_releases(self, per_page: int = 30) -> List[ReleaseDetails]:
        """
        List the repository's releases (first page only).

        Args:
            per_page: Page size requested from GitHub (max 100)

        Returns:
            Releases in GitHub's order (newest first)

        Raises:
            ReleaseLookupError: If the listing fails for any reason
        """
        try:
            payload = self._request(
                "list_releases", "GET", self._releases_url(), params={"per_page": per_page}
            )
        except GitHubError as e:
            raise ReleaseLookupError(e.operation, e.message, e.status, e.body) from e
        return [ReleaseDetails.from_api(item) for item in payload or []]

    def create_release(
        self,
        tag_name: str,
        name: str,
        body: str = "",
        draft: bool = False,
        prerelease: bool = False,
    ) -> ReleaseDetails:
        """
        Create a release (and its tag on the default branch).

        Raises:
            GitHubAPIError: If GitHub rejects the release
        """
        payload = self._request(
            "create_release",
            "POST",
            self._releases_url(),
            json={
                "tag_name": tag_name,
                "name": name,
                "body": body,
                "draft": draft,
                "prerelease": prerelease,
            },
        )
        return ReleaseDetails.from_api(payload)

    def list_release_assets(self, release_id: int) -> List[AssetData]:
        """
        List the assets attached to a release (first page, up to 100).

        Raises:
            ReleaseLookupError: If the listing fails for any reason
        """
        try:
            payload = self._request(
                "list_release_assets",
                "GET",
                self._releases_url(f"/{release_id}/assets"),
                params={"per_page": 100},
            )
        except GitHubError as e:
            raise ReleaseLookupError(e.operation, e.message, e.status, e.body) from e
        return [AssetData.from_api(item) for item in payload or []]

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    def upload_release_asset(
        self,
        release_id: int,
        name: str,
        file_path: Path,
        content_type: str,
        progress: Optional[ProgressCallback] = None,
    ) -> AssetData:
        """
        Stream a local file to a release as a named asset.

        Args:
            release_id: Target release ID
            name: Asset name on the release
            file_path: Local file to send
            content_type: MIME type sent as Content-Type
            progress: Called with the size of each chunk sent

        Returns:
            Descriptor of the created asset

        Raises:
            DuplicateAssetError: If the release already has an asset with this name
            GitHubAPIError: For any other failure
            OSError: If the local file cannot be read
        """
        size = Path(file_path).stat().st_size
        url = f"{self.uploads_url}/repos/{self.owner}/{self.repo}/releases/{release_id}/assets"
        headers: Dict[str, str] = {
            "Content-Type": content_type,
            "Content-Length": str(size),
        }

        with open(file_path, "rb") as handle:
            payload = self._request(
                "upload_release_asset",
                "POST",
                url,
                params={"name": name},
                data=_ProgressReader(handle, size, progress),
                headers=headers,
            )
        return AssetData.from_api(payload)
