"""
Utility modules for the asset bucket sync.

This package provides shared utilities used across all sync stages:
- logging: Structured logging with run/bucket context and entry/exit decorators
- config: Environment configuration loading and validation
- metrics: Prometheus counters for sync runs
"""

from asset_buckets.utils.logging import get_logger, log_function_call

__all__ = ["get_logger", "log_function_call"]
