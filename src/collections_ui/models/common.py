"""
Shared state models for the list views.

This module defines:
- PageWindow: offset/limit bookkeeping for incremental loading
- ListPage: one windowed page of rows plus the server-side total
- MutationResult: tagged outcome of a write (applied patch or failure)
"""

from dataclasses import dataclass, field, replace
from typing import Any, Generic, Mapping, Sequence, TypeVar

R = TypeVar("R")


@dataclass(frozen=True)
class PageWindow:
    """
    Tracks which slice of the result set has been requested.

    Attributes:
        offset: Server offset of the most recently requested page.
        page_size: Constant number of rows per request.
        has_more: False only once a page came back short.
    """

    offset: int = 0
    page_size: int = 100
    has_more: bool = True

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")

    def reset(self) -> "PageWindow":
        """Return the window for a fresh first page."""
        return PageWindow(offset=0, page_size=self.page_size, has_more=True)

    def advance(self) -> "PageWindow":
        """Return the window for the next page."""
        return replace(self, offset=self.offset + self.page_size)

    def retreat(self) -> "PageWindow":
        """Undo ``advance`` after a failed page fetch."""
        return replace(self, offset=max(self.offset - self.page_size, 0))

    def settle(self, returned: int) -> "PageWindow":
        """Record how many rows the last request returned."""
        return replace(self, has_more=returned == self.page_size)


@dataclass(frozen=True)
class ListPage(Generic[R]):
    """
    One page of rows returned by a service.

    Attributes:
        items: Rows in server order.
        total: Count of all rows matching the same filters.
        offset: Offset the page was requested at.
        limit: Requested page size.
    """

    items: Sequence[R]
    total: int
    offset: int = 0
    limit: int = 100

    @property
    def has_more(self) -> bool:
        """True when the page came back full."""
        return len(self.items) == self.limit


@dataclass(frozen=True)
class MutationResult:
    """
    Outcome of a write.

    Build with ``applied`` or ``failed``; never construct directly.

    Attributes:
        ok: True when the backend confirmed the write.
        patch: Field changes to merge into the cached row.
        reload: True when the change may move the row out of the current
            filter, so the list must be reloaded instead of patched.
        reason: Human-readable failure message.
    """

    ok: bool
    patch: Mapping[str, Any] = field(default_factory=dict)
    reload: bool = False
    reason: str = ""

    @classmethod
    def applied(
        cls, patch: Mapping[str, Any] | None = None, reload: bool = False
    ) -> "MutationResult":
        return cls(ok=True, patch=dict(patch or {}), reload=reload)

    @classmethod
    def failed(cls, reason: str) -> "MutationResult":
        return cls(ok=False, reason=reason)
