from collections_ui.listing import DeepLink, LinkAction, PagedList, row_element_id
from collections_ui.models.common import ListPage
from collections_ui.models.criteria import CustomerCriteria, TicketCriteria
from collections_ui.models.records import TicketRow


def _listing(page_size: int = 2) -> PagedList:
    return PagedList(CustomerCriteria(), page_size=page_size)


class TestDeepLink:
    def test_waits_for_first_page(self):
        listing = _listing()
        listing.refresh()
        assert DeepLink("C100").step(listing) is LinkAction.WAIT

    def test_selects_cached_row(self, make_customers):
        listing = _listing()
        listing.complete(listing.refresh(), ListPage(make_customers(2), 2, 0, 2))
        link = DeepLink("C101")

        assert link.step(listing) is LinkAction.SELECT
        assert link.resolved
        assert link.element_id == "row-C101"
        assert link.step(listing) is LinkAction.DROP

    def test_pages_until_found(self, make_customers):
        listing = _listing()
        listing.complete(listing.refresh(), ListPage(make_customers(2), 6, 0, 2))
        link = DeepLink("C104")

        assert link.step(listing) is LinkAction.LOAD_MORE
        ticket = listing.next_page()
        assert link.step(listing) is LinkAction.WAIT
        listing.complete(ticket, ListPage(make_customers(2, 2), 6, 2, 2))
        assert link.step(listing) is LinkAction.LOAD_MORE
        listing.complete(listing.next_page(), ListPage(make_customers(2, 4), 6, 4, 2))

        assert link.step(listing) is LinkAction.SELECT

    def test_drops_when_exhausted(self, make_customers):
        listing = _listing()
        listing.complete(listing.refresh(), ListPage(make_customers(1), 1, 0, 2))
        link = DeepLink("C999")

        assert link.step(listing) is LinkAction.DROP
        assert link.resolved

    def test_drops_after_failure(self, make_customers):
        listing = _listing()
        listing.complete(listing.refresh(), ListPage(make_customers(2), 6, 0, 2))
        listing.complete(listing.next_page(), None, "network down")

        assert DeepLink("C105").step(listing) is LinkAction.DROP

    def test_element_id(self):
        assert row_element_id("TKT-0001") == "row-TKT-0001"

    def test_drops_excluded_target(self, make_customers):
        listing = _listing()
        rows = make_customers(2)
        listing.complete(listing.refresh(), ListPage(rows, 6, 0, 2))
        link = DeepLink("C100")

        assert link.step(listing, visible=rows[1:]) is LinkAction.DROP
        assert link.resolved

    def test_selects_visible_target(self, make_customers):
        listing = _listing()
        rows = make_customers(2)
        listing.complete(listing.refresh(), ListPage(rows, 6, 0, 2))

        assert DeepLink("C101").step(listing, visible=rows[1:]) is LinkAction.SELECT

    def test_ticket_link_uses_ticket_id(self):
        tickets = [
            TicketRow(id="TKT-0041", ticket_number="T-1041"),
            TicketRow(id="TKT-0042", ticket_number="T-1042"),
        ]
        listing = PagedList(TicketCriteria(), page_size=2)
        listing.complete(listing.refresh(), ListPage(tickets, 2, 0, 2))

        assert DeepLink("TKT-0042").step(listing) is LinkAction.SELECT
        assert DeepLink("T-1042").step(listing) is LinkAction.DROP
