from collections_ui.listing import PagedList, ScrollState, ScrollTrigger
from collections_ui.models.common import ListPage
from collections_ui.models.criteria import CustomerCriteria


def _loaded(rows, total, page_size=2) -> PagedList:
    listing = PagedList(CustomerCriteria(), page_size=page_size)
    listing.complete(listing.refresh(), ListPage(rows, total, 0, page_size))
    return listing


class TestScrollTrigger:
    def test_watches_last_row(self, make_customers):
        listing = _loaded(make_customers(2), 5)
        trigger = ScrollTrigger()

        assert trigger.sync(listing) is ScrollState.WATCHING
        assert trigger.target == "C101"

    def test_visible_target_loads_next_page(self, make_customers):
        listing = _loaded(make_customers(2), 5)
        trigger = ScrollTrigger()
        trigger.sync(listing)

        ticket = trigger.on_visible("C101", listing)

        assert ticket.offset == 2
        assert trigger.state is ScrollState.TRIGGERED

    def test_stale_observer_is_ignored(self, make_customers):
        listing = _loaded(make_customers(2), 5)
        trigger = ScrollTrigger()
        trigger.sync(listing)

        assert trigger.on_visible("C100", listing) is None
        assert listing.window.offset == 0

    def test_single_fetch_while_in_flight(self, make_customers):
        listing = _loaded(make_customers(2), 5)
        trigger = ScrollTrigger()
        trigger.sync(listing)

        assert trigger.on_visible("C101", listing) is not None
        assert trigger.on_visible("C101", listing) is None

    def test_reattaches_to_new_last_row(self, make_customers):
        listing = _loaded(make_customers(2), 6)
        trigger = ScrollTrigger()
        trigger.sync(listing)
        ticket = trigger.on_visible("C101", listing)
        listing.complete(ticket, ListPage(make_customers(2, 2), 6, 2, 2))

        trigger.sync(listing)

        assert trigger.target == "C103"
        assert trigger.on_visible("C101", listing) is None

    def test_exhausted_until_reset(self, make_customers):
        listing = _loaded(make_customers(1), 1)
        trigger = ScrollTrigger()

        assert trigger.sync(listing) is ScrollState.EXHAUSTED
        assert trigger.attach("C100", True) is ScrollState.EXHAUSTED
        assert trigger.on_visible("C100", listing) is None

        trigger.reset()
        assert trigger.state is ScrollState.IDLE
        assert trigger.attach("C100", True) is ScrollState.WATCHING

    def test_empty_rows_stay_idle(self):
        trigger = ScrollTrigger()
        assert trigger.attach(None, True) is ScrollState.IDLE

    def test_watches_last_visible_row(self, make_customers):
        rows = make_customers(3)
        listing = _loaded(rows, 6, page_size=3)
        trigger = ScrollTrigger()

        assert trigger.sync(listing, rows[:2]) is ScrollState.WATCHING
        assert trigger.target == "C101"
        assert trigger.on_visible("C102", listing) is None

    def test_nothing_visible_stays_idle(self, make_customers):
        listing = _loaded(make_customers(2), 6)
        trigger = ScrollTrigger()

        assert trigger.sync(listing, []) is ScrollState.IDLE
        assert trigger.target is None
