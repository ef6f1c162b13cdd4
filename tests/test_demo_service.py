from unittest.mock import AsyncMock

import pytest

from collections_ui.data.demo_records import CUSTOMER_COUNT
from collections_ui.models.criteria import (
    CustomerCriteria,
    InvoiceCriteria,
    PaymentCriteria,
    TicketCriteria,
)
from collections_ui.services import ServiceError


class TestCountsAgreeWithRows:
    @pytest.mark.parametrize(
        "criteria",
        [
            CustomerCriteria(),
            CustomerCriteria(balance="all", country="us"),
            CustomerCriteria(balance="negative"),
            CustomerCriteria(balance="all", min_open_invoices="3"),
        ],
    )
    async def test_customers(self, service, criteria):
        rows = await service.list_customers(criteria, 0, 1000)
        assert await service.count_customers(criteria) == len(rows)

    @pytest.mark.parametrize(
        "criteria",
        [
            InvoiceCriteria(),
            InvoiceCriteria(filter="overdue"),
            InvoiceCriteria(color_status="none", amount_min="1000"),
            InvoiceCriteria(date_from="2025-03-01", date_to="2025-04-30"),
        ],
    )
    async def test_invoices(self, service, criteria):
        rows = await service.list_invoices(criteria, 0, 10000)
        assert await service.count_invoices(criteria) == len(rows)

    async def test_tickets_and_payments(self, service):
        tickets = TicketCriteria(assigned_to="unassigned")
        payments = PaymentCriteria(status="Open")
        assert await service.count_tickets(tickets) == len(
            await service.list_tickets(tickets, 0, 1000)
        )
        assert await service.count_payments(payments) == len(
            await service.list_payments(payments, 0, 1000)
        )


class TestCustomers:
    async def test_balance_filters(self, service):
        positive = await service.list_customers(CustomerCriteria(), 0, 1000)
        negative = await service.list_customers(
            CustomerCriteria(balance="negative"), 0, 1000
        )
        assert positive and all(c.balance > 0 for c in positive)
        assert negative and all(c.balance < 0 for c in negative)

    async def test_all_customers(self, service):
        criteria = CustomerCriteria(balance="all")
        assert await service.count_customers(criteria) == CUSTOMER_COUNT

    async def test_sort_descending(self, service):
        criteria = CustomerCriteria(balance="all", sort_by="balance", sort_order="desc")
        balances = [c.balance for c in await service.list_customers(criteria, 0, 1000)]
        assert balances == sorted(balances, reverse=True)

    async def test_page_windows(self, service):
        criteria = CustomerCriteria(balance="all")
        first = await service.page_customers(criteria, 0, 25)
        last = await service.page_customers(criteria, 50, 25)
        assert first.total == CUSTOMER_COUNT
        assert first.has_more
        assert len(last.items) == CUSTOMER_COUNT - 50
        assert not last.has_more

    async def test_threshold_update(self, service):
        await service.update_customer_threshold("C100", 60)
        rows = await service.list_customers(CustomerCriteria(search="C100"), 0, 10)
        assert rows[0].days_past_due_threshold == 60

    async def test_negative_threshold_rejected(self, service):
        with pytest.raises(ServiceError):
            await service.update_customer_threshold("C100", -1)


class TestInvoices:
    async def test_color_change_is_filterable(self, service):
        criteria = InvoiceCriteria(customer_id="C100", filter="open")
        invoice = (await service.list_invoices(criteria, 0, 10))[0]

        await service.update_invoice_color_status(invoice.id, "red", "demo-user")

        reds = await service.list_invoices(
            criteria.with_changes(color_status="red"), 0, 10
        )
        assert invoice.id in [i.id for i in reds]

    async def test_invalid_color_rejected(self, service):
        with pytest.raises(ServiceError):
            await service.update_invoice_color_status("INV-00001", "blue", "u")


class TestTickets:
    async def test_status_change_records_note(self, service):
        ticket = (await service.list_tickets(TicketCriteria(), 0, 1))[0]

        await service.update_ticket_status(ticket.id, "promised", "demo-user", "Friday")

        notes = await service.list_notes("ticket", ticket.id)
        assert notes[0].body.endswith(": Friday")

    async def test_assign_and_unassign(self, service):
        ticket = (await service.list_tickets(TicketCriteria(), 0, 1))[0]

        await service.assign_ticket(ticket.id, "u-sam")
        assigned = await service.list_tickets(
            TicketCriteria(assigned_to="u-sam"), 0, 100
        )
        assert ticket.id in [t.id for t in assigned]

        await service.assign_ticket(ticket.id, None)
        unassigned = await service.list_tickets(
            TicketCriteria(assigned_to="unassigned"), 0, 100
        )
        assert ticket.id in [t.id for t in unassigned]

    async def test_activity_summary(self, service):
        ticket = (await service.list_tickets(TicketCriteria(), 0, 1))[0]
        await service.update_ticket_status(ticket.id, "closed", "demo-user")

        summary = await service.collector_activity_summary()
        dana = next(s for s in summary if s.user_id == "demo-user")
        assert dana.tickets_closed == 1
        assert dana.status_changes == 1


class TestNotes:
    async def test_add_and_list(self, service):
        note = await service.add_note("customer", "C100", "  Called AP  ", "demo-user")
        assert note.body == "Called AP"
        assert await service.list_notes("customer", "C100") == [note]

    async def test_blank_note_rejected(self, service):
        with pytest.raises(ServiceError):
            await service.add_note("invoice", "INV-00001", " ", "demo-user")


class TestAnalyticsCache:
    async def test_cached_until_exclusions_change(self, tmp_path, monkeypatch):
        from collections_ui.lib import paths
        from collections_ui.services.collections_service_demo import (
            DemoCollectionsService,
        )

        monkeypatch.setattr(paths, "temp_dir", lambda: tmp_path)
        service = DemoCollectionsService(latency=0, analytics_ttl=60)
        spy = AsyncMock(wraps=service.fetch_customer_analytics)
        service.fetch_customer_analytics = spy
        criteria = CustomerCriteria()

        first = await service.customer_analytics(criteria, ["C100"])
        second = await service.customer_analytics(criteria, ["C100"])
        await service.customer_analytics(criteria, ["C100", "C101"])

        assert first == second
        assert spy.await_count == 2
