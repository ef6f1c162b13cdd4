"""Shared fixtures for the Collections UI tests."""

from typing import Callable

import pytest

from collections_ui.models.common import ListPage
from collections_ui.models.records import CustomerRow
from collections_ui.services.collections_service_demo import DemoCollectionsService


@pytest.fixture
def service() -> DemoCollectionsService:
    """A fresh in-memory backend with no latency and no analytics cache."""
    return DemoCollectionsService(latency=0, analytics_ttl=0)


@pytest.fixture
def make_customers() -> Callable[..., list[CustomerRow]]:
    def make(count: int, start: int = 0, balance: float = 100.0) -> list[CustomerRow]:
        return [
            CustomerRow(
                customer_id=f"C{100 + i}",
                customer_name=f"Customer {i}",
                balance=balance * (i + 1),
            )
            for i in range(start, start + count)
        ]

    return make


@pytest.fixture
def make_page() -> Callable[..., ListPage]:
    def make(items: list, total: int, offset: int = 0, limit: int = 100) -> ListPage:
        return ListPage(items=items, total=total, offset=offset, limit=limit)

    return make
