from unittest.mock import AsyncMock

import pytest

from collections_ui.listing import ExclusionStore, exclude_rows, summarize
from collections_ui.models.criteria import CustomerCriteria
from collections_ui.models.records import ExclusionEntry
from collections_ui.services import ServiceError

USER = "demo-user"


class TestExcludeRows:
    def test_removes_excluded_and_keeps_order(self, make_customers):
        rows = make_customers(4)
        visible = exclude_rows(rows, {"C101", "C103"})
        assert [r.customer_id for r in visible] == ["C100", "C102"]

    def test_idempotent(self, make_customers):
        rows = make_customers(5)
        once = exclude_rows(rows, ["C102"])
        assert exclude_rows(once, ["C102"]) == once

    def test_empty_set_returns_a_copy(self, make_customers):
        rows = make_customers(2)
        visible = exclude_rows(rows, [])
        assert visible == rows
        assert visible is not rows

    def test_custom_key(self, make_customers):
        rows = make_customers(3)
        visible = exclude_rows(rows, ["Customer 1"], key=lambda r: r.customer_name)
        assert len(visible) == 2

    def test_summary_uses_visible_rows(self, make_customers):
        rows = make_customers(3)
        summary = summarize(exclude_rows(rows, ["C102"]), "balance")
        assert summary.count == 2
        assert summary.total == 300.0
        assert summary.average == 150.0


class TestExclusionStore:
    async def test_exclude_persists_across_loads(self, service):
        store = ExclusionStore(USER)
        result = await store.exclude(service, "C100", "disputed")

        assert result.ok
        assert "C100" in store
        assert store.get("C100").reason == "disputed"

        reloaded = ExclusionStore(USER)
        await reloaded.load(service)
        assert reloaded.ids == frozenset({"C100"})
        assert reloaded.get("C100").reason == "disputed"

    async def test_include_drops_reason(self, service):
        store = ExclusionStore(USER)
        await store.exclude(service, "C100", "disputed")
        await store.include(service, "C100")
        assert "C100" not in store

        await store.exclude(service, "C100")
        assert store.get("C100").reason is None

    async def test_include_all(self, service):
        store = ExclusionStore(USER)
        await store.exclude(service, "C100")
        await store.exclude(service, "C101")

        await store.include_all(service)

        assert len(store) == 0
        assert await service.list_exclusions(USER) == []

    async def test_exclusions_are_per_user(self, service):
        await ExclusionStore(USER).exclude(service, "C100")
        other = ExclusionStore("u-morgan")
        await other.load(service)
        assert len(other) == 0

    async def test_failed_write_leaves_set_untouched(self, service):
        store = ExclusionStore(USER)
        await store.exclude(service, "C100")
        service.add_exclusion = AsyncMock(side_effect=ServiceError("offline"))

        result = await store.exclude(service, "C101")

        assert not result.ok
        assert "offline" in result.reason
        assert store.ids == frozenset({"C100"})

    async def test_unknown_customer_fails(self, service):
        result = await ExclusionStore(USER).exclude(service, "C999")
        assert not result.ok

    async def test_missing_user_makes_no_call(self):
        remote = AsyncMock()
        store = ExclusionStore(None)

        result = await store.exclude(remote, "C100", "disputed")

        assert not result.ok
        assert "signed in" in result.reason
        remote.add_exclusion.assert_not_awaited()

    async def test_restore_replaces_exactly(self, service):
        store = ExclusionStore(USER)
        await store.exclude(service, "C105")
        entries = [
            ExclusionEntry("C100", "disputed", "2025-06-01T10:00:00+00:00"),
            ExclusionEntry("C101", None, "2025-06-02T10:00:00+00:00"),
        ]

        result = await store.restore(service, entries)

        assert result.ok
        assert sorted(store.entries, key=lambda e: e.customer_id) == entries
        assert sorted(await service.list_exclusions(USER), key=str) == sorted(
            entries, key=str
        )


class TestExcludedTotals:
    async def test_excluding_a_customer_lowers_total_by_its_balance(self, service):
        criteria = CustomerCriteria(balance="all")
        page = await service.page_customers(criteria, 0, 100)
        c100 = next(r for r in page.items if r.customer_id == "C100")
        store = ExclusionStore(USER)

        before = await service.customer_analytics(criteria, store.ids)
        await store.exclude(service, "C100", "disputed")
        after = await service.customer_analytics(criteria, store.ids)

        assert after.total_balance == pytest.approx(
            before.total_balance - c100.balance, abs=0.01
        )
        assert after.total_customers == before.total_customers - 1

        visible = exclude_rows(page.items, store.ids)
        assert summarize(visible, "balance").total == pytest.approx(
            summarize(page.items, "balance").total - c100.balance, abs=0.01
        )

        reloaded = ExclusionStore(USER)
        await reloaded.load(service)
        assert "C100" in reloaded.ids
