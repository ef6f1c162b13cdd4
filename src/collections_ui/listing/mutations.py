"""
Confirmed writes against a cached list.

A write is awaited first. Only when the backend confirms it is the change
merged into the cached row. If one of the changed fields is constrained by
the active filters the row may no longer belong in the list, so the result
asks the caller to reload the current criteria instead.
"""

from typing import Any, Awaitable, Callable, Mapping

from collections_ui.lib import logs
from collections_ui.listing.paged_list import PagedList
from collections_ui.models.common import MutationResult

LOG = logs.logger(__file__)


def needs_reload(listing: PagedList, patch: Mapping[str, Any]) -> bool:
    """
    True when a patched field is filtered or sorted on by the current
    criteria, so the row may leave the list or move within it.
    """
    criteria = listing.criteria
    return bool(criteria.filtered_fields() & set(patch)) or criteria.sort_by in patch


async def run_mutation(
    listing: PagedList,
    row_key: str,
    patch: Mapping[str, Any],
    write: Callable[[], Awaitable[Any]],
    description: str = "update",
) -> MutationResult:
    """
    Perform ``write`` and apply ``patch`` to the row ``row_key`` on success.

    Args:
        listing: List holding the row.
        row_key: Identifier of the edited row.
        patch: Row attribute changes the write makes.
        write: Coroutine function performing the backend write.
        description: Short label used in logs and failure messages.

    Returns:
        ``applied(patch, reload)`` or ``failed(reason)``. On failure the
        cached rows are untouched.
    """
    try:
        await write()
    except Exception as e:
        LOG.error(
            "Mutation failed - action:%s key:%s error:%s",
            description,
            row_key,
            e,
            exc_info=True,
        )
        return MutationResult.failed(f"Failed to {description}: {e}")

    if needs_reload(listing, patch):
        LOG.info(
            "Mutation touches filtered fields - action:%s key:%s", description, row_key
        )
        return MutationResult.applied(patch, reload=True)

    if listing.patch_row(row_key, patch) is None:
        LOG.debug("Mutated row not cached - key:%s", row_key)
    return MutationResult.applied(patch)


async def run_batch_mutation(
    listing: PagedList,
    row_keys: list[str],
    patch: Mapping[str, Any],
    write: Callable[[], Awaitable[Any]],
    description: str = "update",
) -> MutationResult:
    """Like ``run_mutation`` for one patch applied to several rows."""
    if not row_keys:
        return MutationResult.failed("Nothing selected")
    try:
        await write()
    except Exception as e:
        LOG.error(
            "Batch mutation failed - action:%s count:%s error:%s",
            description,
            len(row_keys),
            e,
            exc_info=True,
        )
        return MutationResult.failed(f"Failed to {description}: {e}")

    if needs_reload(listing, patch):
        return MutationResult.applied(patch, reload=True)
    for key in row_keys:
        listing.patch_row(key, patch)
    return MutationResult.applied(patch)
