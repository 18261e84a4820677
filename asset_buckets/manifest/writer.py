"""
Per-bucket JSON manifests.

A manifest records a bucket's state as known at the end of its sync: name,
release descriptor and asset list. Each write fully replaces the previous
manifest of the same bucket.
"""

import json
from pathlib import Path
from typing import Union

from asset_buckets.models import Bucket
from asset_buckets.utils.logging import get_logger, log_function_call

logger = get_logger(__name__)

MANIFEST_INDENT = 4


def manifest_path(bucket_name: str, meta_dir: Union[str, Path]) -> Path:
    """Location of a bucket's manifest: <meta_dir>/<bucket_name>.json"""
    return Path(meta_dir) / f"{bucket_name}.json"


@log_function_call
def write_bucket_manifest(bucket: Bucket, meta_dir: Union[str, Path]) -> Path:
    """
    Write a bucket's manifest, creating the manifest directory if needed.

    Args:
        bucket: Bucket in whatever state its sync left it
        meta_dir: Manifest directory

    Returns:
        Path of the written manifest
    """
    directory = Path(meta_dir)
    directory.mkdir(parents=True, exist_ok=True)

    path = manifest_path(bucket.name, directory)
    path.write_text(
        json.dumps(bucket.to_dict(), indent=MANIFEST_INDENT, ensure_ascii=False),
        encoding="utf-8",
    )
    logger.info(f"Manifest for {bucket.name} written to {path} ({len(bucket.assets)} assets)")
    return path


def read_bucket_manifest(path: Union[str, Path]) -> Bucket:
    """
    Load a manifest back into a Bucket.

    Raises:
        FileNotFoundError: If the manifest does not exist
        json.JSONDecodeError: If the file is not valid JSON
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return Bucket.from_dict(data)
