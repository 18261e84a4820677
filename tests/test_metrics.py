"""Tests for sync metrics."""

from asset_buckets.utils.metrics import SyncMetrics


class TestSyncMetrics:
    """Test SyncMetrics collectors and export."""

    def test_instances_use_independent_registries(self):
        first = SyncMetrics()
        second = SyncMetrics()

        first.record_upload_failure()

        assert first.registry.get_sample_value("asset_uploads_total", {"status": "failed"}) == 1.0
        assert second.registry.get_sample_value("asset_uploads_total", {"status": "failed"}) is None

    def test_bucket_and_transport_error_labels(self):
        metrics = SyncMetrics()

        metrics.record_bucket(success=True)
        metrics.record_bucket(success=False)
        metrics.record_github_error("upload_release_asset", None)

        registry = metrics.registry
        assert registry.get_sample_value("buckets_synced_total", {"status": "success"}) == 1.0
        assert registry.get_sample_value("buckets_synced_total", {"status": "failure"}) == 1.0
        assert registry.get_sample_value(
            "github_api_errors_total",
            {"operation": "upload_release_asset", "status": "transport"},
        ) == 1.0

    def test_track_upload_observes_duration(self):
        metrics = SyncMetrics()

        with metrics.track_upload():
            pass

        assert metrics.registry.get_sample_value("asset_upload_duration_seconds_count") == 1.0

    def test_write_textfile(self, tmp_path):
        metrics = SyncMetrics()
        metrics.record_upload_success(bytes_uploaded=2048)
        target = tmp_path / "textfile" / "asset_buckets.prom"

        metrics.write_textfile(target)

        text = target.read_text()
        assert 'asset_uploads_total{status="uploaded"} 1.0' in text
        assert "asset_upload_bytes_total 2048.0" in text
