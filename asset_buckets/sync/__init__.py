"""
Release reconciliation and the end-to-end sync run.
"""

from .pipeline import SyncSummary, sync_assets, sync_bucket
from .reconciler import find_existing_release, generate_tag_name, get_or_create_release

__all__ = [
    "SyncSummary",
    "find_existing_release",
    "generate_tag_name",
    "get_or_create_release",
    "sync_assets",
    "sync_bucket",
]
