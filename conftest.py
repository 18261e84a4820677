"""Pytest configuration."""

import sys
from pathlib import Path

# Add project root to path so asset_buckets imports without installation
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
