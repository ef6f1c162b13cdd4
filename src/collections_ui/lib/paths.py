"""Path helpers for on-disk caches."""

import tempfile
from pathlib import Path


def temp_dir() -> Path:
    """Return the system temporary directory as a Path."""
    return Path(tempfile.gettempdir())


def cache_dir(name: str) -> Path:
    """
    Return a per-application cache directory under the temp dir.

    Args:
        name: Cache namespace, e.g. ``"analytics"``.
    """
    return temp_dir() / "collections_ui" / name
