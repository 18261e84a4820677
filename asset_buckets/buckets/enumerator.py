"""
Bucket enumeration.

Each directory directly under the upload root is a bucket named after the
directory. Files directly under the root share one fallback bucket. Only one
level is considered: a bucket's members are the regular files directly
inside its directory, and nested directories are ignored.

Example usage:
    >>> for source in iter_buckets(Path("./assets"), "root-bucket"):
    ...     print(source.name, [p.name for p in source.iter_files()])
    textures ['brick.png', 'grass.png']
    root-bucket ['readme.txt']
"""

import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Union

from asset_buckets.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BucketSource:
    """
    Local side of one bucket.

    Attributes:
        name: Bucket name
        path: Bucket directory, or the upload root for the fallback bucket
        files: Member files of the fallback bucket (empty for directories)
        is_root_bucket: Whether this is the fallback bucket
    """

    name: str
    path: Path
    files: List[Path] = field(default_factory=list)
    is_root_bucket: bool = False

    def iter_files(self) -> Iterator[Path]:
        """
        Yield candidate files in directory-listing order.

        Yields:
            Regular files belonging to the bucket
        """
        if self.is_root_bucket:
            yield from self.files
            return

        with os.scandir(self.path) as entries:
            for entry in entries:
                if entry.is_file():
                    yield Path(entry.path)
                else:
                    logger.debug(f"Ignoring non-file entry in bucket {self.name}: {entry.name}")


def generate_root_bucket_name() -> str:
    """Random fallback bucket name, e.g. 'root-3f9a1c0b2d4e5f60'."""
    return f"root-{secrets.token_hex(8)}"


def iter_buckets(root: Union[str, Path], root_bucket_name: str) -> Iterator[BucketSource]:
    """
    Lazily enumerate the buckets under an upload root.

    Directory buckets are yielded as they are listed. Root-level files are
    collected and yielded last as a single fallback bucket. If a directory
    already uses `root_bucket_name`, the fallback bucket gets a random
    root-<hex> name instead so bucket names stay unique within a run.

    Args:
        root: Upload root directory
        root_bucket_name: Name of the fallback bucket

    Yields:
        BucketSource per directory, then at most one fallback bucket

    Raises:
        FileNotFoundError: If the root does not exist
        NotADirectoryError: If the root is not a directory
    """
    root_path = Path(root)
    if not root_path.exists():
        raise FileNotFoundError(f"Upload root not found: {root_path}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Upload root is not a directory: {root_path}")

    root_files: List[Path] = []
    directory_names = set()

    with os.scandir(root_path) as entries:
        for entry in entries:
            if entry.is_dir():
                directory_names.add(entry.name)
                yield BucketSource(name=entry.name, path=Path(entry.path))
            elif entry.is_file():
                root_files.append(Path(entry.path))
            else:
                logger.warning(f"Skipping unsupported entry under upload root: {entry.name}")

    if root_files:
        fallback_name = root_bucket_name
        while fallback_name in directory_names:
            fallback_name = generate_root_bucket_name()
        if fallback_name != root_bucket_name:
            logger.warning(
                f"Directory bucket already named {root_bucket_name}; "
                f"using {fallback_name} for root-level files"
            )
        yield BucketSource(
            name=fallback_name,
            path=root_path,
            files=root_files,
            is_root_bucket=True,
        )
