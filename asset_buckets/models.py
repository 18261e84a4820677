"""
Data model for asset buckets.

A Bucket is one top-level entry of the upload root mapped to one GitHub
release. ReleaseDetails and AssetData expose the handful of provider fields
the sync reads and keep the full API payload so manifests record it as
returned.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ReleaseDetails:
    """
    GitHub release descriptor.

    Attributes:
        id: Release ID
        name: Release title (matched against the bucket name)
        tag_name: Git tag the release points at
        upload_url: Hypermedia upload URL template
        html_url: Release page URL
        raw: Full API payload
    """

    id: int
    name: Optional[str]
    tag_name: Optional[str] = None
    upload_url: Optional[str] = None
    html_url: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "ReleaseDetails":
        return cls(
            id=int(payload["id"]),
            name=payload.get("name"),
            tag_name=payload.get("tag_name"),
            upload_url=payload.get("upload_url"),
            html_url=payload.get("html_url"),
            raw=dict(payload),
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        return {
            "id": self.id,
            "name": self.name,
            "tag_name": self.tag_name,
            "upload_url": self.upload_url,
            "html_url": self.html_url,
        }


@dataclass(frozen=True)
class AssetData:
    """
    GitHub release asset descriptor.

    Attributes:
        id: Asset ID
        name: Asset file name within the release
        browser_download_url: Public download URL
        content_type: MIME type recorded by GitHub
        size: Size in bytes
        raw: Full API payload
    """

    id: int
    name: str
    browser_download_url: Optional[str] = None
    content_type: Optional[str] = None
    size: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "AssetData":
        return cls(
            id=int(payload["id"]),
            name=payload["name"],
            browser_download_url=payload.get("browser_download_url"),
            content_type=payload.get("content_type"),
            size=payload.get("size"),
            raw=dict(payload),
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        return {
            "id": self.id,
            "name": self.name,
            "browser_download_url": self.browser_download_url,
            "content_type": self.content_type,
            "size": self.size,
        }


@dataclass(frozen=True)
class AssetRecord:
    """
    One asset known to belong to a bucket.

    Attributes:
        name: Asset name (sanitized local name, or the remote name verbatim
            for assets found on an existing release)
        asset_data: Descriptor returned by GitHub
        origin_url: Source URL when the asset was fetched from a remote URL
    """

    name: str
    asset_data: AssetData
    origin_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "assetData": self.asset_data.to_dict(),
        }
        if self.origin_url is not None:
            data["originUrl"] = self.origin_url
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetRecord":
        return cls(
            name=data["name"],
            asset_data=AssetData.from_api(data["assetData"]),
            origin_url=data.get("originUrl"),
        )


@dataclass
class Bucket:
    """
    Sync state of one bucket.

    Attributes:
        name: Bucket name, also the release title
        release_details: Release backing the bucket, None until reconciled
        assets: Assets known to be on the release, in discovery order
    """

    name: str
    release_details: Optional[ReleaseDetails] = None
    assets: List[AssetRecord] = field(default_factory=list)

    def has_asset(self, name: str) -> bool:
        """Whether an asset with this name is already known (case-insensitive)."""
        wanted = name.casefold()
        return any(asset.name.casefold() == wanted for asset in self.assets)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "releaseDetails": (
                self.release_details.to_dict() if self.release_details else None
            ),
            "assets": [asset.to_dict() for asset in self.assets],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bucket":
        release = data.get("releaseDetails")
        return cls(
            name=data["name"],
            release_details=ReleaseDetails.from_api(release) if release else None,
            assets=[AssetRecord.from_dict(item) for item in data.get("assets") or []],
        )
