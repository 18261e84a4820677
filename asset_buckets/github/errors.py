"""
Errors raised by the GitHub Releases client.

Callers branch on the exception type, never on status codes or message
text:

- ReleaseLookupError: listing releases (or a matched release's assets) failed
- DuplicateAssetError: an asset with the same name already exists on the release
- GitHubAPIError: any other HTTP or transport failure
"""

from typing import Any, Optional

import requests


class GitHubError(Exception):
    """
    Base class for GitHub API failures.

    Attributes:
        operation: Client operation that failed
        status: HTTP status code, None for transport errors
        message: GitHub's error message (or the transport error text)
        body: Decoded response body when present
    """

    def __init__(
        self,
        operation: str,
        message: str,
        status: Optional[int] = None,
        body: Any = None,
    ) -> None:
        self.operation = operation
        self.status = status
        self.message = message
        self.body = body
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.status is None:
            return f"{self.operation} failed: {self.message}"
        return f"{self.operation} failed with HTTP {self.status}: {self.message}"


class GitHubAPIError(GitHubError):
    """Any GitHub failure without a more specific meaning."""


class ReleaseLookupError(GitHubError):
    """Releases (or a release's assets) could not be listed."""


class DuplicateAssetError(GitHubError):
    """The release already holds an asset with this name (HTTP 422 already_exists)."""


def _decode_body(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _is_already_exists(body: Any) -> bool:
    if isinstance(body, dict):
        for item in body.get("errors") or []:
            if isinstance(item, dict) and item.get("code") == "already_exists":
                return True
        return "already_exists" in str(body.get("message", ""))
    return isinstance(body, str) and "already_exists" in body


def error_from_response(operation: str, response: requests.Response) -> GitHubError:
    """
    Build the error for a failed GitHub response.

    Args:
        operation: Client operation that received the response
        response: Non-2xx response

    Returns:
        DuplicateAssetError for 422 already_exists, GitHubAPIError otherwise
    """
    body = _decode_body(response)
    message = None
    if isinstance(body, dict):
        message = body.get("message")
    if not message:
        message = response.reason or "unknown error"

    if response.status_code == 422 and _is_already_exists(body):
        return DuplicateAssetError(operation, message, response.status_code, body)
    return GitHubAPIError(operation, message, response.status_code, body)
