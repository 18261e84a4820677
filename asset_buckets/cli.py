"""
Command-line entry point.

Runs a full sync of the configured upload root. Configuration comes from the
environment (and an optional .env file); the flags only tune logging and
progress output.

Usage:
    asset-buckets
    asset-buckets --env-file deploy/.env --verbose
    asset-buckets --no-progress
"""

import argparse
import sys
from typing import List, Optional

from asset_buckets.sync import sync_assets
from asset_buckets.utils.config import REQUIRED_VARIABLES, SyncConfig
from asset_buckets.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="asset-buckets",
        description="Upload local asset buckets to GitHub release assets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Each directory under ASSETS_TO_UPLOAD_ROOT_PATH becomes one release; files
directly under the root go to a shared fallback release. A JSON manifest per
bucket is written to ASSETS_BUCKET_META_PATH.

Examples:
  # Sync using ./.env or exported variables
  %(prog)s

  # Use a specific env file with debug logging
  %(prog)s --env-file deploy/.env --verbose
        """,
    )

    parser.add_argument(
        "--env-file",
        help="dotenv file to load (default: ./.env when present)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable per-file upload progress bars",
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the sync CLI."""
    args = parse_args(argv)

    setup_logging(level="DEBUG" if args.verbose else "INFO")

    try:
        config = SyncConfig.from_env(env_file=args.env_file)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        logger.error(
            "Make sure .env exists or these variables are exported: "
            + ", ".join(variable for variable, _ in REQUIRED_VARIABLES)
        )
        return 1

    if args.no_progress:
        config.show_progress = False

    try:
        summary = sync_assets(config)
    except KeyboardInterrupt:
        logger.warning("Sync cancelled by user")
        return 130

    logger.info(
        f"Buckets: {summary.buckets_processed} ({summary.buckets_failed} failed) | "
        f"Uploaded: {summary.files_uploaded} | Skipped: {summary.files_skipped} | "
        f"Failed: {summary.files_failed}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
