"""
Git Asset Buckets

Uploads the files of a local directory tree as GitHub release assets, one
release per top-level directory ("bucket"), and records what each bucket holds
in a JSON manifest.

This package provides modular components for each stage of a sync run:
- buckets: Bucket enumeration from the upload root
- github: GitHub Releases REST client and its error types
- sync: Release reconciliation and the end-to-end run
- uploader: Asset naming and upload
- manifest: Per-bucket JSON manifests
- utils: Logging, configuration and metrics
"""

__version__ = "0.1.0"

# Package-level imports
from asset_buckets.utils.logging import setup_logging

# Initialize default logging configuration
setup_logging()
