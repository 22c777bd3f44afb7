"""
Collection bootstrap.

Creates an empty backing file for a collection before the first access.
Existing files are left alone and are not validated here; a malformed file
surfaces later as StorageUnavailable when the store reads it.
"""

import json
from pathlib import Path
from typing import Union

from core.errors import StorageUnavailable
from core.logging import get_logger


logger = get_logger(__name__)


def ensure_exists(path: Union[str, Path]) -> bool:
    """
    Make sure a collection file exists at ``path``.

    Parent directories are created as needed. Safe to call any number of
    times.

    Returns:
        True if the file was created, False if it was already there.

    Raises:
        StorageUnavailable: If the file or its directory cannot be created.
    """
    full_path = Path(path)
    if full_path.exists():
        return False

    try:
        full_path.parent.mkdir(parents=True, exist_ok=True)
        # "x" fails instead of truncating if the file appeared in the meantime
        with full_path.open("x", encoding="utf-8") as fh:
            json.dump([], fh)
    except FileExistsError:
        return False
    except OSError as e:
        raise StorageUnavailable(f"Cannot create {full_path}: {e}") from e

    logger.info("Collection file created", path=str(full_path))
    return True
