"""
GitHub Releases client.

Wraps the REST calls a sync run makes and turns failures into typed errors
(ReleaseLookupError, DuplicateAssetError, GitHubAPIError).
"""

from .client import GitHubReleasesClient
from .errors import (
    DuplicateAssetError,
    GitHubAPIError,
    GitHubError,
    ReleaseLookupError,
)

__all__ = [
    "GitHubReleasesClient",
    "GitHubError",
    "GitHubAPIError",
    "ReleaseLookupError",
    "DuplicateAssetError",
]
