"""
Environment configuration loader for the asset bucket sync.

Loads configuration from a .env file or environment variables. The resulting
SyncConfig is built once at startup and handed to every component.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values, load_dotenv

DEFAULT_ROOT_BUCKET_NAME = "root-bucket"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_UPLOADS_URL = "https://uploads.github.com"

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}

# (environment variable, field) pairs that must be present
REQUIRED_VARIABLES = (
    ("GIT_USER_NAME", "git_user_name"),
    ("GIT_STORAGE_REPOSITORY_NAME", "storage_repository_name"),
    ("GIT_TOKEN", "git_token"),
    ("ASSETS_BUCKET_META_PATH", "bucket_meta_path"),
    ("ASSETS_TO_UPLOAD_ROOT_PATH", "upload_root_path"),
)


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class SyncConfig:
    """Asset bucket sync configuration."""

    # Target repository
    git_user_name: str
    storage_repository_name: str
    git_token: str = field(repr=False)

    # Local paths
    bucket_meta_path: Path
    upload_root_path: Path

    # Fallback bucket for files directly under the upload root
    root_bucket_name: str = DEFAULT_ROOT_BUCKET_NAME
    random_root_bucket: bool = False

    # GitHub API
    api_url: str = DEFAULT_API_URL
    uploads_url: str = DEFAULT_UPLOADS_URL
    releases_per_page: int = 30
    request_timeout_seconds: int = 60

    # Observability
    show_progress: bool = True
    metrics_textfile: Optional[Path] = None

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "SyncConfig":
        """
        Load configuration from environment variables.

        Loads `env_file` (default: ./.env) when it exists, without overriding
        variables that are already set. Without `environ` the file is loaded
        into the process environment; with `environ` its values are merged
        under that mapping and os.environ is left alone.

        Args:
            env_file: Optional path to a dotenv file
            environ: Mapping to read from instead of os.environ

        Returns:
            SyncConfig instance with loaded values

        Raises:
            ValueError: If required environment variables are missing or a
                numeric variable is not an integer
        """
        env_path = Path(env_file) if env_file else Path.cwd() / ".env"
        if environ is None:
            if env_path.exists():
                load_dotenv(env_path, override=False)
            env: Mapping[str, Optional[str]] = os.environ
        else:
            file_values = dotenv_values(env_path) if env_path.exists() else {}
            env = {**file_values, **environ}

        values = {}
        for variable, field_name in REQUIRED_VARIABLES:
            value = (env.get(variable) or "").strip()
            if not value:
                raise ValueError(
                    f"{variable} environment variable is required. "
                    "Set it in .env or export it."
                )
            values[field_name] = value

        metrics_textfile = (env.get("METRICS_TEXTFILE") or "").strip()

        return cls(
            git_user_name=values["git_user_name"],
            storage_repository_name=values["storage_repository_name"],
            git_token=values["git_token"],
            bucket_meta_path=Path(values["bucket_meta_path"]).expanduser(),
            upload_root_path=Path(values["upload_root_path"]).expanduser(),
            root_bucket_name=(env.get("ROOT_BUCKET_NAME") or "").strip()
            or DEFAULT_ROOT_BUCKET_NAME,
            random_root_bucket=_as_bool(env.get("RANDOM_ROOT_BUCKET"), False),
            api_url=(env.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
            uploads_url=(env.get("GITHUB_UPLOADS_URL") or DEFAULT_UPLOADS_URL).rstrip("/"),
            releases_per_page=_as_int(env, "RELEASES_PER_PAGE", 30),
            request_timeout_seconds=_as_int(env, "REQUEST_TIMEOUT_SECONDS", 60),
            show_progress=_as_bool(env.get("SHOW_PROGRESS"), True),
            metrics_textfile=Path(metrics_textfile) if metrics_textfile else None,
        )


def _as_int(env: Mapping[str, Optional[str]], variable: str, default: int) -> int:
    raw = (env.get(variable) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{variable} must be an integer (got: {raw!r})") from None
