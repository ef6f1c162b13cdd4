import asyncio
from unittest.mock import AsyncMock

from collections_ui.listing import PagedList, load_page
from collections_ui.models.common import ListPage, PageWindow
from collections_ui.models.criteria import CustomerCriteria


def _listing(page_size: int = 100) -> PagedList:
    return PagedList(CustomerCriteria(), page_size=page_size)


class TestPageWindow:
    def test_advance_and_retreat(self):
        window = PageWindow(page_size=10).advance().advance()
        assert window.offset == 20
        assert window.retreat().offset == 10
        assert PageWindow(page_size=10).retreat().offset == 0

    def test_settle_marks_short_page_exhausted(self):
        window = PageWindow(page_size=10)
        assert window.settle(10).has_more is True
        assert window.settle(3).has_more is False

    def test_reset_keeps_page_size(self):
        window = PageWindow(offset=40, page_size=20, has_more=False).reset()
        assert window == PageWindow(offset=0, page_size=20, has_more=True)


class TestCriteriaChange:
    def test_identical_criteria_schedule_nothing(self):
        listing = _listing()
        assert listing.set_criteria(CustomerCriteria()) is None
        assert listing.generation == 0

    def test_change_resets_window_and_rows(self, make_customers, make_page):
        listing = _listing(page_size=2)
        first = listing.refresh()
        listing.complete(first, make_page(make_customers(2), 5, limit=2))
        listing.complete(
            listing.next_page(), make_page(make_customers(2, 2), 5, 2, 2)
        )
        assert len(listing.rows) == 4

        ticket = listing.set_criteria(CustomerCriteria(search="apex"))

        assert ticket.offset == 0
        assert ticket.append is False
        assert listing.window.offset == 0
        assert listing.rows == []
        assert listing.total == 0
        assert listing.loading is True

    def test_short_first_page_exhausts(self, make_customers, make_page):
        criteria = CustomerCriteria(balance="positive", min_balance="10000")
        listing = PagedList(criteria, page_size=100)
        ticket = listing.refresh()
        listing.complete(ticket, make_page(make_customers(3, balance=20000.0), 3))

        assert listing.has_more is False
        assert listing.total == 3
        assert listing.next_page() is None


class TestStaleResponses:
    async def test_first_filter_response_is_discarded(
        self, make_customers
    ):
        listing = _listing()
        f1_rows = make_customers(5)
        f2_rows = make_customers(2, start=50)
        release_f1 = asyncio.Event()

        async def fetch(criteria, offset, limit):
            if criteria.search == "first":
                await release_f1.wait()
                return ListPage(f1_rows, 5, offset, limit)
            return ListPage(f2_rows, 2, offset, limit)

        f1 = listing.set_criteria(CustomerCriteria(search="first"))
        f1_task = asyncio.create_task(load_page(listing, f1, fetch))
        await asyncio.sleep(0)

        f2 = listing.set_criteria(CustomerCriteria(search="second"))
        assert await load_page(listing, f2, fetch) is True

        release_f1.set()
        assert await f1_task is False

        assert listing.rows == f2_rows
        assert listing.total == 2
        assert listing.loading is False

    def test_stale_completion_keeps_newer_loading_flag(self, make_customers):
        listing = _listing()
        old = listing.refresh()
        listing.refresh()

        listing.complete(old, ListPage(make_customers(3), 3))

        assert listing.loading is True
        assert listing.rows == []


class TestNextPage:
    def test_appends_and_detects_end(self, make_customers, make_page):
        listing = _listing(page_size=3)
        listing.complete(listing.refresh(), make_page(make_customers(3), 5, limit=3))

        ticket = listing.next_page()
        assert ticket.offset == 3
        assert ticket.append is True
        listing.complete(ticket, make_page(make_customers(2, 3), 5, 3, 3))

        assert [r.customer_id for r in listing.rows] == [
            "C100",
            "C101",
            "C102",
            "C103",
            "C104",
        ]
        assert listing.has_more is False
        assert listing.next_page() is None

    def test_no_ticket_while_in_flight(self, make_customers, make_page):
        listing = _listing(page_size=2)
        listing.complete(listing.refresh(), make_page(make_customers(2), 9, limit=2))
        assert listing.next_page() is not None
        assert listing.next_page() is None

    def test_no_ticket_before_first_page(self):
        listing = _listing()
        listing.refresh()
        assert listing.next_page() is None

    def test_full_last_page_needs_one_more_request(self, make_customers, make_page):
        listing = _listing(page_size=2)
        listing.complete(listing.refresh(), make_page(make_customers(2), 2, limit=2))
        assert listing.has_more is True

        ticket = listing.next_page()
        listing.complete(ticket, make_page([], 2, 2, 2))

        assert listing.has_more is False
        assert len(listing.rows) == 2


class TestFailures:
    async def test_failed_first_page_sets_error(self):
        listing = _listing()
        fetch = AsyncMock(side_effect=RuntimeError("connection refused"))

        applied = await load_page(listing, listing.refresh(), fetch)

        assert applied is False
        assert listing.error == "connection refused"
        assert listing.loaded is True
        assert listing.loading is False

    async def test_failed_append_rolls_back_offset(self, make_customers, make_page):
        listing = _listing(page_size=2)
        listing.complete(listing.refresh(), make_page(make_customers(2), 6, limit=2))
        fetch = AsyncMock(side_effect=TimeoutError())

        await load_page(listing, listing.next_page(), fetch)

        assert [r.customer_id for r in listing.rows] == ["C100", "C101"]
        assert listing.window.offset == 0
        assert listing.error == "TimeoutError"
        retry = listing.next_page()
        assert retry.offset == 2

    async def test_success_clears_previous_error(self, make_customers):
        listing = _listing()
        await load_page(listing, listing.refresh(), AsyncMock(side_effect=OSError("x")))

        fetch = AsyncMock(return_value=ListPage(make_customers(1), 1))
        await load_page(listing, listing.refresh(), fetch)

        assert listing.error is None
        assert len(listing.rows) == 1

    async def test_none_ticket_is_noop(self):
        fetch = AsyncMock()
        assert await load_page(_listing(), None, fetch) is False
        fetch.assert_not_awaited()


class TestPatchRow:
    def test_replaces_only_the_keyed_row(self, make_customers, make_page):
        listing = _listing()
        listing.complete(listing.refresh(), make_page(make_customers(3), 3))
        before = list(listing.rows)

        patched = listing.patch_row("C101", {"days_past_due_threshold": 60})

        assert patched.days_past_due_threshold == 60
        assert listing.rows[0] is before[0]
        assert listing.rows[2] is before[2]
        assert before[1].days_past_due_threshold == 30

    def test_unknown_key_returns_none(self):
        assert _listing().patch_row("missing", {"status": "x"}) is None
