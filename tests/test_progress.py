from collections_ui.listing import DeepLink, PagedList, advance
from collections_ui.models.common import ListPage
from collections_ui.models.criteria import CustomerCriteria


def _loaded(rows, total, page_size=2) -> PagedList:
    listing = PagedList(CustomerCriteria(), page_size=page_size)
    listing.complete(listing.refresh(), ListPage(rows, total, 0, page_size))
    return listing


class TestAdvance:
    def test_nothing_to_do(self, make_customers):
        listing = _loaded(make_customers(2), 6)

        progress = advance(listing)

        assert progress.ticket is None
        assert progress.element_id is None
        assert [r.customer_id for r in progress.visible] == ["C100", "C101"]
        assert listing.window.offset == 0

    def test_fully_excluded_page_fetches_next(self, make_customers):
        listing = _loaded(make_customers(2), 6)

        progress = advance(listing, excluded_ids={"C100", "C101"})

        assert progress.visible == []
        assert progress.ticket.offset == 2
        assert progress.ticket.append is True

    def test_partly_excluded_page_waits_for_scroll(self, make_customers):
        listing = _loaded(make_customers(2), 6)

        progress = advance(listing, excluded_ids={"C100"})

        assert progress.ticket is None
        assert len(progress.visible) == 1

    def test_fully_excluded_last_page_stops(self, make_customers):
        listing = _loaded(make_customers(1), 1)

        assert advance(listing, excluded_ids={"C100"}).ticket is None

    def test_found_link_returns_element_id(self, make_customers):
        listing = _loaded(make_customers(2), 6)

        progress = advance(listing, DeepLink("C101"))

        assert progress.selected == "C101"
        assert progress.element_id == "row-C101"
        assert progress.link is None
        assert progress.ticket is None

    def test_missing_link_loads_next_page(self, make_customers):
        listing = _loaded(make_customers(2), 6)
        link = DeepLink("C104")

        progress = advance(listing, link)

        assert progress.link is link
        assert progress.ticket.offset == 2
        assert progress.selected is None

    def test_link_followed_across_pages(self, make_customers):
        listing = _loaded(make_customers(2), 6)
        link = DeepLink("C103")

        ticket = advance(listing, link).ticket
        listing.complete(ticket, ListPage(make_customers(2, 2), 6, 2, 2))
        progress = advance(listing, link)

        assert progress.element_id == "row-C103"
        assert progress.link is None

    def test_exhausted_list_drops_link(self, make_customers):
        listing = _loaded(make_customers(1), 1)

        progress = advance(listing, DeepLink("C999"))

        assert progress.link is None
        assert progress.ticket is None
        assert progress.element_id is None

    def test_excluded_link_target_is_dropped(self, make_customers):
        listing = _loaded(make_customers(2), 6)

        progress = advance(listing, DeepLink("C100"), excluded_ids={"C100"})

        assert progress.link is None
        assert progress.selected is None
        assert progress.element_id is None

    def test_failed_page_drops_link(self, make_customers):
        listing = _loaded(make_customers(2), 6)
        listing.complete(listing.next_page(), None, "network down")

        progress = advance(listing, DeepLink("C105"))

        assert progress.link is None
        assert progress.ticket is None
