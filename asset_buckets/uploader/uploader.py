"""
Release asset uploader.

Uploads the files of one bucket to the bucket's release, skipping names the
release already holds. Failures are per file: a file that cannot be uploaded
is logged and left behind, and the next file is tried. Nothing is retried.

Example usage:
    >>> from asset_buckets.uploader import upload_bucket_files
    >>> results = upload_bucket_files(client, bucket, source)
    >>> uploaded = [r for r in results if r.success and not r.skipped]
"""

import mimetypes
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from asset_buckets.buckets import BucketSource
from asset_buckets.github import DuplicateAssetError, GitHubError, GitHubReleasesClient
from asset_buckets.models import AssetRecord, Bucket
from asset_buckets.uploader.naming import sanitize_file_name
from asset_buckets.utils.logging import get_logger
from asset_buckets.utils.metrics import SyncMetrics

# Module logger
logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class UploadResult:
    """
    Outcome for one candidate file.

    Attributes:
        success: False only when the upload was attempted and failed
        skipped: True when the asset already existed and nothing was sent
        local_path: Local file
        asset_name: Name used on the release
        file_size_bytes: Local file size (0 if unreadable)
        duration_seconds: Time spent on this file
        asset: Uploaded asset record (None unless uploaded)
        error_message: Error description (None if successful)
    """

    success: bool
    skipped: bool
    local_path: str
    asset_name: str
    file_size_bytes: int
    duration_seconds: float
    asset: Optional[AssetRecord] = None
    error_message: Optional[str] = None


def resolve_content_type(path: Path) -> str:
    """
    Guess a MIME type from the file name.

    Example:
        >>> resolve_content_type(Path("brick.png"))
        'image/png'
        >>> resolve_content_type(Path("blob.unknownext"))
        'application/octet-stream'
    """
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type or DEFAULT_CONTENT_TYPE


def upload_asset(
    client: GitHubReleasesClient,
    bucket: Bucket,
    file_path: Path,
    asset_name: str,
    content_type: str,
    file_size: int,
    show_progress: bool = True,
) -> AssetRecord:
    """
    Upload one file to the bucket's release and record it on the bucket.

    Args:
        client: GitHub client
        bucket: Bucket with release_details set
        file_path: Local file
        asset_name: Name to give the asset
        content_type: MIME type
        file_size: Size in bytes (progress bar total)
        show_progress: Render a tqdm progress bar

    Returns:
        The new asset record, also appended to bucket.assets

    Raises:
        ValueError: If the bucket has no release yet
        DuplicateAssetError: If the release already has this asset name
        GitHubAPIError: For any other API failure
    """
    if bucket.release_details is None:
        raise ValueError(f"Bucket {bucket.name} has no release to upload to")

    logger.info(f"Uploading {asset_name}...")

    with tqdm(
        total=file_size,
        unit="B",
        unit_scale=True,
        unit_divisor=1024,
        desc=asset_name,
        disable=not show_progress,
        leave=False,
    ) as progress_bar:
        asset_data = client.upload_release_asset(
            bucket.release_details.id,
            asset_name,
            file_path,
            content_type,
            progress=progress_bar.update,
        )

    record = AssetRecord(name=asset_name, asset_data=asset_data)
    bucket.assets.append(record)
    logger.info(f"{asset_name} uploaded successfully")
    return record


def _upload_candidate(
    client: GitHubReleasesClient,
    bucket: Bucket,
    file_path: Path,
    show_progress: bool,
    metrics: Optional[SyncMetrics],
) -> UploadResult:
    start_time = time.time()
    asset_name = sanitize_file_name(file_path.name)
    file_size = 0

    if bucket.has_asset(asset_name):
        logger.info(f"Skipping {asset_name} - asset already exists in the bucket")
        if metrics:
            metrics.record_upload_skipped()
        return UploadResult(
            success=True,
            skipped=True,
            local_path=str(file_path),
            asset_name=asset_name,
            file_size_bytes=0,
            duration_seconds=time.time() - start_time,
        )

    try:
        file_size = file_path.stat().st_size
        content_type = resolve_content_type(file_path)

        if metrics:
            with metrics.track_upload():
                record = upload_asset(
                    client, bucket, file_path, asset_name, content_type, file_size, show_progress
                )
            metrics.record_upload_success(bytes_uploaded=file_size)
        else:
            record = upload_asset(
                client, bucket, file_path, asset_name, content_type, file_size, show_progress
            )

        return UploadResult(
            success=True,
            skipped=False,
            local_path=str(file_path),
            asset_name=asset_name,
            file_size_bytes=file_size,
            duration_seconds=time.time() - start_time,
            asset=record,
        )

    except DuplicateAssetError as e:
        logger.info(f"Skipping {asset_name} - asset already exists in the bucket")
        if metrics:
            metrics.record_github_error(e.operation, e.status)
            metrics.record_upload_skipped()
        return UploadResult(
            success=True,
            skipped=True,
            local_path=str(file_path),
            asset_name=asset_name,
            file_size_bytes=file_size,
            duration_seconds=time.time() - start_time,
        )

    except GitHubError as e:
        logger.error(f"An unexpected HTTP error occurred uploading {asset_name}: {e.message}")
        logger.error(f"Status: {e.status}")
        if e.body:
            logger.error(f"Response data: {e.body}")
        if metrics:
            metrics.record_github_error(e.operation, e.status)
            metrics.record_upload_failure()
        error_msg = str(e)

    except Exception as e:
        logger.error(f"An unexpected error occurred uploading {asset_name}: {e}", exc_info=True)
        if metrics:
            metrics.record_upload_failure()
        error_msg = f"{type(e).__name__}: {e}"

    return UploadResult(
        success=False,
        skipped=False,
        local_path=str(file_path),
        asset_name=asset_name,
        file_size_bytes=file_size,
        duration_seconds=time.time() - start_time,
        error_message=error_msg,
    )


def upload_bucket_files(
    client: GitHubReleasesClient,
    bucket: Bucket,
    source: BucketSource,
    show_progress: bool = True,
    metrics: Optional[SyncMetrics] = None,
) -> List[UploadResult]:
    """
    Upload every candidate file of a bucket, one at a time.

    Args:
        client: GitHub client
        bucket: Reconciled bucket (release_details set, assets populated)
        source: Local side of the bucket
        show_progress: Render per-file progress bars
        metrics: Optional metrics collector

    Returns:
        One UploadResult per candidate file, in processing order

    Raises:
        ValueError: If the bucket has no release
    """
    if bucket.release_details is None:
        raise ValueError(f"Bucket {bucket.name} has no release to upload to")

    results = [
        _upload_candidate(client, bucket, file_path, show_progress, metrics)
        for file_path in source.iter_files()
    ]

    uploaded = sum(1 for r in results if r.success and not r.skipped)
    skipped = sum(1 for r in results if r.skipped)
    failed = sum(1 for r in results if not r.success)
    total_mb = sum(r.file_size_bytes for r in results if r.asset) / (1024 * 1024)

    logger.info(
        f"Bucket {bucket.name} upload complete: {uploaded} uploaded, "
        f"{skipped} skipped, {failed} failed, {total_mb:.2f}MB sent"
    )

    return results
