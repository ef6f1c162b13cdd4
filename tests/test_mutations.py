from unittest.mock import AsyncMock

from collections_ui.listing import (
    PagedList,
    load_page,
    needs_reload,
    run_batch_mutation,
    run_mutation,
)
from collections_ui.models.common import MutationResult
from collections_ui.models.criteria import InvoiceCriteria, TicketCriteria


async def _tickets(service, criteria: TicketCriteria) -> PagedList:
    listing = PagedList(criteria, page_size=100)
    await load_page(listing, listing.refresh(), service.page_tickets)
    return listing


class TestMutationResult:
    def test_applied_and_failed(self):
        applied = MutationResult.applied({"status": "closed"}, reload=True)
        assert applied.ok and applied.reload
        assert applied.patch == {"status": "closed"}
        failed = MutationResult.failed("nope")
        assert not failed.ok
        assert failed.reason == "nope"


class TestNeedsReload:
    def test_filtered_field(self):
        listing = PagedList(TicketCriteria(status="open"))
        assert needs_reload(listing, {"status": "closed"})
        assert not needs_reload(listing, {"priority": "high"})

    def test_sort_column(self):
        listing = PagedList(TicketCriteria(sort_by="priority"))
        assert needs_reload(listing, {"priority": "high"})

    def test_search_fields(self):
        listing = PagedList(InvoiceCriteria(search="freight"))
        assert needs_reload(listing, {"description": "Parts"})
        assert not needs_reload(listing, {"color_status": "red"})


class TestRunMutation:
    async def test_confirmed_write_patches_row_in_place(self, service):
        listing = await _tickets(service, TicketCriteria())
        row = listing.rows[0]
        new_priority = "urgent" if row.priority != "urgent" else "low"

        result = await run_mutation(
            listing,
            row.id,
            {"priority": new_priority},
            lambda: service.update_ticket_priority(row.id, new_priority, "demo-user"),
        )

        assert result.ok and not result.reload
        assert listing.rows[0].priority == new_priority
        assert len(listing.rows) > 1

    async def test_filtered_field_requests_reload(self, service):
        listing = await _tickets(service, TicketCriteria(status="open"))
        row = listing.rows[0]

        result = await run_mutation(
            listing,
            row.id,
            {"status": "closed"},
            lambda: service.update_ticket_status(row.id, "closed", "demo-user"),
        )

        assert result.ok and result.reload
        assert listing.rows[0].status == "open"

        await load_page(listing, listing.refresh(), service.page_tickets)
        assert listing.find(row.id) is None

    async def test_failed_write_leaves_rows_untouched(self, service):
        listing = await _tickets(service, TicketCriteria())
        before = list(listing.rows)
        write = AsyncMock(side_effect=ConnectionError("timeout"))

        result = await run_mutation(
            listing, before[0].id, {"priority": "urgent"}, write, "update priority"
        )

        assert not result.ok
        assert result.reason == "Failed to update priority: timeout"
        assert listing.rows == before

    async def test_rejected_value_is_not_applied(self, service):
        listing = await _tickets(service, TicketCriteria())
        row = listing.rows[0]

        result = await run_mutation(
            listing,
            row.id,
            {"priority": "whenever"},
            lambda: service.update_ticket_priority(row.id, "whenever", "demo-user"),
        )

        assert not result.ok
        assert listing.rows[0].priority == row.priority


class TestRunBatchMutation:
    async def test_batch_color_update(self, service):
        listing = PagedList(InvoiceCriteria(filter="open"), page_size=10)
        await load_page(listing, listing.refresh(), service.page_invoices)
        targets = listing.rows[:3]

        result = await run_batch_mutation(
            listing,
            [r.id for r in targets],
            {"color_status": "green"},
            lambda: service.batch_update_invoice_color_status(
                [r.reference_number for r in targets], "green", "demo-user"
            ),
        )

        assert result.ok and not result.reload
        assert all(r.color_status == "green" for r in listing.rows[:3])

    async def test_empty_selection_fails_without_write(self):
        write = AsyncMock()
        result = await run_batch_mutation(
            PagedList(InvoiceCriteria()), [], {"color_status": "red"}, write
        )
        assert not result.ok
        write.assert_not_awaited()
