"""
Prometheus metrics for sync runs.

Counts what each run did (uploads, skips, failures, releases reused or
created, GitHub API errors) on a private registry. A one-shot CLI has no
scrape endpoint, so the registry is exported to a node-exporter textfile at
the end of the run.

Metrics Provided:
    - asset_uploads_total: Counter for per-file outcomes (uploaded/skipped/failed)
    - asset_upload_bytes_total: Counter for uploaded bytes
    - asset_upload_duration_seconds: Histogram for upload latency
    - bucket_releases_total: Counter for release reconciliation outcomes
    - github_api_errors_total: Counter for GitHub API errors
    - buckets_synced_total: Counter for buckets processed by status

Usage:
    >>> metrics = SyncMetrics()
    >>> with metrics.track_upload():
    ...     upload(...)
    >>> metrics.record_upload_success(bytes_uploaded=1024)
    >>> metrics.write_textfile("/var/lib/node_exporter/asset_buckets.prom")
"""

from pathlib import Path
from typing import Optional, Union

from prometheus_client import CollectorRegistry, Counter, Histogram, write_to_textfile

from asset_buckets.utils.logging import get_logger

logger = get_logger(__name__)


class SyncMetrics:
    """
    Prometheus collectors for one sync run.

    Example:
        >>> metrics = SyncMetrics()
        >>> metrics.record_release("created")
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        """
        Initialize metrics collectors.

        Args:
            registry: Prometheus registry (a fresh private one if None)
        """
        self.registry = registry if registry is not None else CollectorRegistry()

        # ====================================================================
        # Upload Operations
        # ====================================================================

        self.uploads = Counter(
            name="asset_uploads_total",
            documentation="Per-file upload outcomes",
            labelnames=["status"],  # uploaded, skipped, failed
            registry=self.registry,
        )

        self.upload_bytes = Counter(
            name="asset_upload_bytes_total",
            documentation="Total bytes uploaded as release assets",
            registry=self.registry,
        )

        self.upload_duration = Histogram(
            name="asset_upload_duration_seconds",
            documentation="Time spent uploading a single asset",
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0],
            registry=self.registry,
        )

        # ====================================================================
        # Buckets and Releases
        # ====================================================================

        self.releases = Counter(
            name="bucket_releases_total",
            documentation="Release reconciliation outcomes",
            labelnames=["action"],  # reused, created, failed
            registry=self.registry,
        )

        self.buckets = Counter(
            name="buckets_synced_total",
            documentation="Buckets processed by final status",
            labelnames=["status"],  # success, failure
            registry=self.registry,
        )

        # ====================================================================
        # GitHub API
        # ====================================================================

        self.github_api_errors = Counter(
            name="github_api_errors_total",
            documentation="GitHub API errors",
            labelnames=["operation", "status"],
            registry=self.registry,
        )

    def track_upload(self):
        """Context manager timing one asset upload."""
        return self.upload_duration.time()

    def record_upload_success(self, bytes_uploaded: int) -> None:
        self.uploads.labels(status="uploaded").inc()
        self.upload_bytes.inc(bytes_uploaded)

    def record_upload_skipped(self) -> None:
        self.uploads.labels(status="skipped").inc()

    def record_upload_failure(self) -> None:
        self.uploads.labels(status="failed").inc()

    def record_release(self, action: str) -> None:
        """
        Record how a bucket's release was resolved.

        Args:
            action: "reused", "created" or "failed"
        """
        self.releases.labels(action=action).inc()

    def record_bucket(self, success: bool) -> None:
        self.buckets.labels(status="success" if success else "failure").inc()

    def record_github_error(self, operation: str, status: Optional[int]) -> None:
        """
        Record a GitHub API error.

        Args:
            operation: Client operation (list_releases, upload_release_asset, ...)
            status: HTTP status, None for transport errors
        """
        self.github_api_errors.labels(
            operation=operation,
            status=str(status) if status is not None else "transport",
        ).inc()

    def write_textfile(self, path: Union[str, Path]) -> None:
        """
        Export the registry in the Prometheus text format.

        Args:
            path: Destination file (parent directories are created)
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        write_to_textfile(str(target), self.registry)
        logger.info(f"Metrics written to {target}")
