"""
End-to-end sync run.

Processes buckets one at a time in enumeration order: reconcile the release,
upload the bucket's files, then write its manifest. The manifest is written
whether or not the bucket succeeded, and a failed bucket never stops the
run.

Example usage:
    >>> config = SyncConfig.from_env()
    >>> summary = sync_assets(config)
    >>> print(f"{summary.files_uploaded} files uploaded")
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from asset_buckets.buckets import BucketSource, generate_root_bucket_name, iter_buckets
from asset_buckets.github import GitHubError, GitHubReleasesClient
from asset_buckets.manifest import manifest_path, write_bucket_manifest
from asset_buckets.models import Bucket
from asset_buckets.sync.reconciler import get_or_create_release
from asset_buckets.uploader import UploadResult, upload_bucket_files
from asset_buckets.utils.config import SyncConfig
from asset_buckets.utils.logging import bucket_context, get_logger, get_run_id, log_function_call
from asset_buckets.utils.metrics import SyncMetrics

logger = get_logger(__name__)


@dataclass
class SyncSummary:
    """
    Totals for one sync run.

    Attributes:
        buckets_processed: Buckets attempted
        buckets_failed: Buckets aborted by a release or bucket-level error
        files_uploaded: Files sent successfully
        files_skipped: Files already present on their release
        files_failed: Files whose upload failed
        manifest_paths: Manifest location of each bucket, in processing order
    """

    buckets_processed: int = 0
    buckets_failed: int = 0
    files_uploaded: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    manifest_paths: List[Path] = field(default_factory=list)

    def add_results(self, results: List[UploadResult]) -> None:
        for result in results:
            if result.skipped:
                self.files_skipped += 1
            elif result.success:
                self.files_uploaded += 1
            else:
                self.files_failed += 1


def sync_bucket(
    client: GitHubReleasesClient,
    source: BucketSource,
    config: SyncConfig,
    metrics: Optional[SyncMetrics] = None,
) -> List[UploadResult]:
    """
    Reconcile and upload one bucket, then write its manifest.

    Args:
        client: GitHub client
        source: Local side of the bucket
        config: Sync configuration
        metrics: Optional metrics collector

    Returns:
        Per-file upload results

    Raises:
        GitHubError: If the bucket's release could not be found or created
            (the manifest has still been written)
    """
    bucket = Bucket(name=source.name)

    try:
        get_or_create_release(client, bucket, config.releases_per_page, metrics=metrics)
        return upload_bucket_files(
            client,
            bucket,
            source,
            show_progress=config.show_progress,
            metrics=metrics,
        )
    finally:
        write_bucket_manifest(bucket, config.bucket_meta_path)


@log_function_call
def sync_assets(
    config: SyncConfig,
    client: Optional[GitHubReleasesClient] = None,
    metrics: Optional[SyncMetrics] = None,
) -> SyncSummary:
    """
    Sync every bucket under the upload root.

    Args:
        config: Sync configuration
        client: GitHub client (built from config if None)
        metrics: Metrics collector (a fresh one if None)

    Returns:
        SyncSummary for the run

    Raises:
        FileNotFoundError: If the upload root does not exist
        NotADirectoryError: If the upload root is not a directory
    """
    client = client if client is not None else GitHubReleasesClient.from_config(config)
    metrics = metrics if metrics is not None else SyncMetrics()
    summary = SyncSummary()

    root_bucket_name = (
        generate_root_bucket_name() if config.random_root_bucket else config.root_bucket_name
    )

    logger.info(
        f"Sync run {get_run_id()}: {config.upload_root_path} -> "
        f"{config.git_user_name}/{config.storage_repository_name}"
    )

    for source in iter_buckets(config.upload_root_path, root_bucket_name):
        with bucket_context(source.name):
            logger.info(f"Uploading Asset Bucket - {source.name}")
            try:
                results = sync_bucket(client, source, config, metrics)
            except GitHubError as e:
                logger.error(f"Error during upload of bucket {source.name}: {e}")
                summary.buckets_failed += 1
                metrics.record_bucket(success=False)
            except Exception as e:
                logger.error(f"Error during upload of bucket {source.name}: {e}", exc_info=True)
                summary.buckets_failed += 1
                metrics.record_bucket(success=False)
            else:
                summary.add_results(results)
                metrics.record_bucket(success=True)
            finally:
                summary.buckets_processed += 1
                summary.manifest_paths.append(manifest_path(source.name, config.bucket_meta_path))

    logger.info(
        f"Sync complete: {summary.buckets_processed} buckets "
        f"({summary.buckets_failed} failed), {summary.files_uploaded} uploaded, "
        f"{summary.files_skipped} skipped, {summary.files_failed} failed"
    )

    if config.metrics_textfile:
        metrics.write_textfile(config.metrics_textfile)

    return summary
