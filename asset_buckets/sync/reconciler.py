"""
Release reconciliation ("get or create").

Maps a bucket to the release whose title equals the bucket name exactly. An
existing release is reused together with its asset list; otherwise a new
release is created under a random tag. A failed lookup is treated like "not
found". A failed creation is raised to the caller.
"""

import secrets
from typing import Callable, Optional

from asset_buckets.github import GitHubError, GitHubReleasesClient, ReleaseLookupError
from asset_buckets.models import AssetRecord, Bucket, ReleaseDetails
from asset_buckets.utils.logging import get_logger
from asset_buckets.utils.metrics import SyncMetrics

logger = get_logger(__name__)


def generate_tag_name() -> str:
    """Random release tag, 'v' followed by 16 hex characters."""
    return f"v{secrets.token_hex(8)}"


def _log_github_error(context: str, error: GitHubError) -> None:
    logger.error(f"{context}: {error.message}")
    logger.error(f"Status: {error.status}")
    if error.body:
        logger.error(f"Response: {error.body}")


def find_existing_release(
    client: GitHubReleasesClient, bucket: Bucket, per_page: int = 30
) -> Optional[ReleaseDetails]:
    """
    Look up the release titled exactly like the bucket (case-sensitive).

    Only the first page of releases is searched.

    Raises:
        ReleaseLookupError: If releases cannot be listed
    """
    logger.info("Fetching releases...")
    releases = client.list_releases(per_page=per_page)
    logger.info(f"Found {len(releases)} releases")

    return next((release for release in releases if release.name == bucket.name), None)


def get_or_create_release(
    client: GitHubReleasesClient,
    bucket: Bucket,
    per_page: int = 30,
    metrics: Optional[SyncMetrics] = None,
    tag_factory: Callable[[], str] = generate_tag_name,
) -> Bucket:
    """
    Attach a release to the bucket, reusing one with the same name if present.

    On reuse, bucket.assets is replaced by the release's current assets (names
    taken verbatim). On creation, bucket.assets is reset to empty.

    Args:
        client: GitHub client
        bucket: Bucket to reconcile (mutated in place)
        per_page: Page size for the release listing
        metrics: Optional metrics collector
        tag_factory: Tag name generator for new releases

    Returns:
        The same bucket, with release_details set

    Raises:
        GitHubError: If no release was found and creating one failed
    """
    try:
        existing = find_existing_release(client, bucket, per_page)
        if existing is not None:
            logger.info(f"Found existing release for {bucket.name}")
            assets = client.list_release_assets(existing.id)

            bucket.release_details = existing
            bucket.assets = [AssetRecord(name=asset.name, asset_data=asset) for asset in assets]
            if metrics:
                metrics.record_release("reused")
            return bucket

    except ReleaseLookupError as e:
        _log_github_error("Error fetching releases", e)
        if metrics:
            metrics.record_github_error(e.operation, e.status)
        logger.info("Continuing to create a new release...")

    tag_name = tag_factory()
    logger.info(f"Creating new release with tag: {tag_name}")
    try:
        release = client.create_release(
            tag_name=tag_name,
            name=bucket.name,
            body="",
            draft=False,
            prerelease=False,
        )
    except GitHubError as e:
        _log_github_error("Error creating release", e)
        if metrics:
            metrics.record_github_error(e.operation, e.status)
            metrics.record_release("failed")
        raise

    logger.info("Release created successfully")
    bucket.release_details = release
    bucket.assets = []
    if metrics:
        metrics.record_release("created")
    return bucket
