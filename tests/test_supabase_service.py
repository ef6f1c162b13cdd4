from unittest.mock import AsyncMock, MagicMock

import pytest
from postgrest.exceptions import APIError

from collections_ui.lib import clients
from collections_ui.listing.exclusions import ExclusionStore
from collections_ui.models import ExclusionEntry
from collections_ui.models.criteria import (
    CustomerCriteria,
    InvoiceCriteria,
    TicketCriteria,
)
from collections_ui.services import ServiceError
from collections_ui.services.collections_service_impl import (
    SupabaseCollectionsService,
    customer_params,
    filter_tickets,
    invoice_params,
)


@pytest.fixture
def client(monkeypatch) -> MagicMock:
    """A Supabase client whose RPC responses are set per test."""
    client = MagicMock()
    client.responses = {}

    def rpc(name, params):
        request = MagicMock()
        request.execute = AsyncMock(
            return_value=MagicMock(data=client.responses.get(name))
        )
        return request

    client.rpc = MagicMock(side_effect=rpc)
    monkeypatch.setattr(clients, "supabase", AsyncMock(return_value=client))
    return client


def _params(client: MagicMock, name: str) -> dict:
    return next(c.args[1] for c in client.rpc.call_args_list if c.args[0] == name)


class TestParams:
    def test_customer_params(self):
        params = customer_params(
            CustomerCriteria(
                search="apex", min_balance="10000", date_to="2025-06-30"
            )
        )
        assert params["p_search"] == "apex"
        assert params["p_balance_filter"] == "positive"
        assert params["p_country_filter"] == "all"
        assert params["p_min_balance"] == 10000.0
        assert params["p_max_balance"] is None
        assert params["p_date_to"] == "2025-06-30T23:59:59"

    def test_invoice_params(self):
        params = invoice_params(InvoiceCriteria(customer_id="C100", color_status="red"))
        assert params["p_customer_id"] == "C100"
        assert params["p_color_status"] == "red"
        assert params["p_invoice_status"] is None
        assert params["p_filter"] == "all"

    def test_ticket_predicates(self):
        query = MagicMock()
        for method in ("or_", "eq", "is_", "gte", "lte"):
            getattr(query, method).return_value = query

        filter_tickets(
            query, TicketCriteria(status="open", assigned_to="unassigned")
        )

        query.eq.assert_called_once_with("status", "open")
        query.is_.assert_called_once_with("assigned_collector_id", "null")
        query.or_.assert_not_called()


class TestSupabaseService:
    async def test_count_and_list_share_filters(self, client):
        client.responses = {
            "get_customers_with_balance_count": [{"count": 3}],
            "get_customers_with_balance": [
                {"customer_id": f"C{i}", "calculated_balance": "15000"}
                for i in range(3)
            ],
        }
        service = SupabaseCollectionsService(analytics_ttl=0)
        criteria = CustomerCriteria(min_balance="10000")

        page = await service.page_customers(criteria, 0, 100)

        assert page.total == 3
        assert not page.has_more
        list_params = _params(client, "get_customers_with_balance")
        count_params = _params(client, "get_customers_with_balance_count")
        assert {k: list_params[k] for k in count_params} == count_params
        assert list_params["p_offset"] == 0
        assert list_params["p_limit"] == 100

    async def test_analytics_receive_excluded_ids(self, client):
        client.responses = {"get_customer_analytics": [{"total_customers": 59}]}
        service = SupabaseCollectionsService(analytics_ttl=0)

        analytics = await service.customer_analytics(CustomerCriteria(), ["C100"])

        assert analytics.total_customers == 59
        params = _params(client, "get_customer_analytics")
        assert params["p_excluded_customer_ids"] == ["C100"]

    async def test_api_error_becomes_service_error(self, client):
        request = MagicMock()
        request.execute = AsyncMock(
            side_effect=APIError({"message": "permission denied", "code": "42501"})
        )
        client.rpc = MagicMock(return_value=request)
        service = SupabaseCollectionsService(analytics_ttl=0)

        with pytest.raises(ServiceError) as excinfo:
            await service.count_invoices(InvoiceCriteria())

        assert excinfo.value.code == "42501"
        assert "permission denied" in str(excinfo.value)


class TestReplaceExclusions:
    @pytest.fixture
    def table(self, client) -> MagicMock:
        """An ``excluded_customers`` table whose writes succeed by default."""
        table = MagicMock()
        table.upsert.return_value.execute = AsyncMock(
            return_value=MagicMock(data=None)
        )
        remove = table.delete.return_value.eq.return_value.not_.in_.return_value
        remove.execute = AsyncMock(return_value=MagicMock(data=None))
        client.table = MagicMock(return_value=table)
        return table

    async def test_upserts_then_removes_the_rest(self, table):
        service = SupabaseCollectionsService(analytics_ttl=0)

        stored = await service.replace_exclusions(
            "u1", [ExclusionEntry("C200", "bankrupt")]
        )

        assert [e.customer_id for e in stored] == ["C200"]
        rows = table.upsert.call_args.args[0]
        assert rows == [{"user_id": "u1", "customer_id": "C200", "notes": "bankrupt"}]
        assert table.upsert.call_args.kwargs["on_conflict"] == "user_id,customer_id"
        table.delete.return_value.eq.assert_called_once_with("user_id", "u1")
        table.delete.return_value.eq.return_value.not_.in_.assert_called_once_with(
            "customer_id", ["C200"]
        )

    async def test_failed_write_keeps_stored_set(self, table):
        table.upsert.return_value.execute = AsyncMock(
            side_effect=APIError({"message": "insert rejected", "code": "23514"})
        )
        service = SupabaseCollectionsService(analytics_ttl=0)
        store = ExclusionStore("u1", [ExclusionEntry("C100")])

        result = await store.restore(service, [ExclusionEntry("C200")])

        assert not result.ok
        assert store.ids == frozenset({"C100"})
        table.delete.assert_not_called()

    async def test_empty_set_clears(self, table):
        clear = table.delete.return_value.eq.return_value
        clear.execute = AsyncMock(return_value=MagicMock(data=None))
        service = SupabaseCollectionsService(analytics_ttl=0)

        assert await service.replace_exclusions("u1", []) == []

        table.upsert.assert_not_called()
        clear.execute.assert_awaited_once()
