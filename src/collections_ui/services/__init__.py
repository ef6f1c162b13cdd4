"""
Service factory for the Collections UI.

This module provides the get_collections_service() factory function that
returns the appropriate CollectionsService implementation based on
configuration.

Available Implementations:
- demo: In-memory service with seeded fixtures (no Supabase required)
- impl: Supabase-backed service using the RPCs and tables of the live project

The service is cached at the module level, so the same instance is reused
across all requests. Configure via COLLECTIONS_UI_SERVICE environment variable.
"""

from functools import cache
from typing import Callable, Dict

from collections_ui import config
from collections_ui.lib import logs
from collections_ui.services.collections_service import (
    CollectionsService,
    ServiceError,
)
from collections_ui.services.collections_service_demo import DemoCollectionsService
from collections_ui.services.collections_service_impl import (
    SupabaseCollectionsService,
)

LOG = logs.logger(__file__)

_SERVICE_REGISTRY: Dict[str, Callable[[], CollectionsService]] = {
    "demo": lambda: DemoCollectionsService(),
    "impl": lambda: SupabaseCollectionsService(),
}


@cache
def get_collections_service(kind: str | None = None) -> CollectionsService:
    """Return the configured collections service implementation."""
    resolved_kind = (kind or config.SERVICE_KIND).lower()
    LOG.info(
        "get_collections_service - kind:%s resolved_kind:%s", kind, resolved_kind
    )
    try:
        factory = _SERVICE_REGISTRY[resolved_kind]
    except KeyError as exc:
        msg = f"Unknown collections service kind: {resolved_kind}"
        raise ValueError(msg) from exc
    return factory()


__all__ = [
    "CollectionsService",
    "DemoCollectionsService",
    "ServiceError",
    "SupabaseCollectionsService",
    "get_collections_service",
]
