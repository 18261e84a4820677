#!/usr/bin/env python3
"""
Sync local asset buckets to GitHub release assets.

In-repo wrapper for the asset-buckets console script, usable without
installing the package.

Usage:
    python scripts/sync.py
    python scripts/sync.py --env-file deploy/.env --verbose
"""

import sys
from pathlib import Path

# Add project root to path for imports (before other imports)
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from asset_buckets.cli import main  # noqa: E402


if __name__ == "__main__":
    sys.exit(main())
