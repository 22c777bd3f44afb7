"""
Data directory setup script.

Creates empty users and memos collection files if they do not exist yet.
The server does the same on startup; run this to prepare a data
directory ahead of time (for example in a container build step).

Usage:
    python -m scripts.init_data
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.config import settings
from core.errors import StorageUnavailable
from core.storage import ensure_exists


def init_data() -> int:
    """Bootstrap both collection files. Returns a process exit code."""
    print(f"Data directory: {settings.data_dir.resolve()}")

    for path in (settings.users_path, settings.memos_path):
        try:
            created = ensure_exists(path)
        except StorageUnavailable as e:
            print(f"Error: {e}")
            return 1

        if created:
            print(f"Created: {path}")
        else:
            print(f"Already exists: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(init_data())
