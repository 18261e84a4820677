"""
Bucket enumeration from the upload root.
"""

from .enumerator import BucketSource, generate_root_bucket_name, iter_buckets

__all__ = ["BucketSource", "generate_root_bucket_name", "iter_buckets"]
