"""
Local library modules shared across the Collections UI.

Modules:
    logs: Logging utilities
    objects: Canonical JSON and hashing
    paths: Cache directory helpers
    caches: Disk-based caching with TTL support
    clients: Supabase client factory (imported lazily by the live service)
"""

from collections_ui.lib import caches, logs, objects, paths

__all__ = ["caches", "logs", "objects", "paths"]
