import json
from unittest.mock import AsyncMock

from collections_ui.lib import objects
from collections_ui.listing import ExclusionStore, SavedFilterStore, filter_config
from collections_ui.models.criteria import CustomerCriteria, PaymentCriteria
from collections_ui.models.records import ExclusionEntry, SavedFilter
from collections_ui.services import ServiceError

USER = "demo-user"


class TestSavedFilterStore:
    async def test_round_trip_is_exact(self, service):
        exclusions = ExclusionStore(USER)
        await exclusions.exclude(service, "C100", "disputed")
        await exclusions.exclude(service, "C107", "  write-off ")
        criteria = CustomerCriteria(
            search="apex",
            status="Active",
            country="US",
            balance="all",
            min_balance="1000",
            sort_by="balance",
            sort_order="desc",
        )
        saved_entries = exclusions.entries
        store = SavedFilterStore(USER, CustomerCriteria)

        saved = await store.save(service, "Big balances", criteria, saved_entries)
        assert saved.ok

        # The user moves on before loading the filter again
        await exclusions.include_all(service)

        fresh = SavedFilterStore(USER, CustomerCriteria)
        await fresh.load(service)
        restored_criteria, restored_entries = await fresh.apply(
            service, fresh.filters[0].id
        )
        await exclusions.restore(service, restored_entries)

        assert restored_criteria == criteria
        assert objects.to_json(restored_criteria.to_config()) == objects.to_json(
            criteria.to_config()
        )
        assert restored_entries == saved_entries
        assert exclusions.entries == saved_entries
        assert exclusions.get("C107").reason == "write-off"

    async def test_same_name_overwrites(self, service):
        store = SavedFilterStore(USER, PaymentCriteria)
        await store.save(service, "Wires", PaymentCriteria(payment_method="Wire"))
        await store.save(service, "Wires", PaymentCriteria(payment_method="ACH"))

        await store.load(service)

        assert [f.name for f in store.filters] == ["Wires"]
        criteria, exclusions = store.decode(store.filters[0])
        assert criteria.payment_method == "ACH"
        assert exclusions == []

    async def test_filters_are_scoped_to_view(self, service):
        await SavedFilterStore(USER, PaymentCriteria).save(
            service, "Mine", PaymentCriteria()
        )
        customers = SavedFilterStore(USER, CustomerCriteria)
        await customers.load(service)
        assert customers.filters == []

    async def test_blank_name_makes_no_call(self):
        remote = AsyncMock()
        store = SavedFilterStore(USER, CustomerCriteria)

        result = await store.save(remote, "   ", CustomerCriteria())

        assert not result.ok
        assert result.reason == "Please enter a filter name"
        remote.save_filter.assert_not_awaited()

    async def test_missing_user_makes_no_call(self):
        remote = AsyncMock()
        result = await SavedFilterStore(None, CustomerCriteria).save(
            remote, "Mine", CustomerCriteria()
        )
        assert not result.ok
        remote.save_filter.assert_not_awaited()

    async def test_delete(self, service):
        store = SavedFilterStore(USER, CustomerCriteria)
        await store.save(service, "One", CustomerCriteria())
        filter_id = store.filters[0].id

        result = await store.delete(service, filter_id)

        assert result.ok
        assert store.filters == []
        await store.load(service)
        assert store.filters == []

    async def test_apply_marks_used_and_tolerates_failure(self, service):
        store = SavedFilterStore(USER, CustomerCriteria)
        await store.save(service, "One", CustomerCriteria(status="Inactive"))
        filter_id = store.filters[0].id

        await store.apply(service, filter_id)
        await store.load(service)
        assert store.filters[0].last_used_at is not None

        service.mark_filter_used = AsyncMock(side_effect=ServiceError("down"))
        criteria, _ = await store.apply(service, filter_id)
        assert criteria.status == "Inactive"

    async def test_apply_unknown_filter(self, service):
        store = SavedFilterStore(USER, CustomerCriteria)
        assert await store.apply(service, "F-missing") is None


class TestFilterConfig:
    def test_payload_shape(self):
        entry = ExclusionEntry("C100", "disputed", "2025-06-01T00:00:00+00:00")
        config = filter_config(PaymentCriteria(status="Open"), [entry])
        assert config["criteria"]["status"] == "Open"
        assert config["exclusions"] == [entry.to_dict()]

    def test_saved_filter_parses_json_text(self):
        saved = SavedFilter.from_row(
            {
                "id": 7,
                "view": "payments",
                "filter_name": "Open",
                "filter_config": json.dumps({"criteria": {"status": "Open"}}),
            }
        )
        assert saved.id == "7"
        assert saved.name == "Open"
        assert saved.config == {"criteria": {"status": "Open"}}
