"""
Bucket manifest persistence.
"""

from .writer import manifest_path, read_bucket_manifest, write_bucket_manifest

__all__ = ["manifest_path", "read_bucket_manifest", "write_bucket_manifest"]
