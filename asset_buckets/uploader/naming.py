"""Asset name normalization."""

import os
import re

MAX_STEM_LENGTH = 255

_UNSAFE_CHARS = re.compile(r"[^a-z0-9\-_]")


def sanitize_file_name(file_name: str) -> str:
    """
    Normalize a local file name into a release asset name.

    The stem is lower-cased, every character outside [a-z0-9-_] becomes '-',
    and the result is cut to 255 characters. The extension is lower-cased and
    reattached unchanged otherwise.

    Args:
        file_name: Local file name (no directory part)

    Returns:
        Sanitized asset name

    Example:
        >>> sanitize_file_name("My File!.TXT")
        'my-file-.txt'
        >>> sanitize_file_name("archive.tar.gz")
        'archive-tar.gz'
    """
    stem, extension = os.path.splitext(file_name)
    safe_stem = _UNSAFE_CHARS.sub("-", stem.lower())[:MAX_STEM_LENGTH]
    return safe_stem + extension.lower()
