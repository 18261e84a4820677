"""
Release asset uploader module.

Provides asset name sanitization and the per-bucket upload loop that sends
local files to a GitHub release, skipping names the release already holds.
"""

from .naming import sanitize_file_name
from .uploader import (
    UploadResult,
    resolve_content_type,
    upload_asset,
    upload_bucket_files,
)

__all__ = [
    "UploadResult",
    "resolve_content_type",
    "sanitize_file_name",
    "upload_asset",
    "upload_bucket_files",
]
