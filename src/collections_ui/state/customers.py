"""
Reflex state for the customer list.

Customers are listed with their server-computed balances. Excluded
customers are hidden from the table, its export and footer totals; the
analytics cards are computed server-side with the excluded ids passed in.
"""

from typing import ClassVar

import reflex as rx

from collections_ui import config
from collections_ui.export import CUSTOMER_COLUMNS
from collections_ui.lib import logs
from collections_ui.listing import run_mutation
from collections_ui.models.criteria import CustomerCriteria
from collections_ui.models.records import CustomerAnalytics, CustomerRow
from collections_ui.state.base import ListState, _service
from collections_ui.state.exclusions import ExclusionState
from collections_ui.utils import format_currency, format_date, parse_int

LOG = logs.logger(__file__)


def _analytics_cards(analytics: CustomerAnalytics) -> dict[str, str]:
    return {
        "total_customers": f"{analytics.total_customers:,}",
        "active_customers": f"{analytics.active_customers:,}",
        "total_balance": format_currency(analytics.total_balance),
        "avg_balance": format_currency(analytics.avg_balance),
        "customers_with_debt": f"{analytics.customers_with_debt:,}",
        "total_open_invoices": f"{analytics.total_open_invoices:,}",
        "customers_with_overdue": f"{analytics.customers_with_overdue:,}",
    }


class CustomerState(ListState, rx.State):
    """Customer table, analytics cards and exclusion actions."""

    CRITERIA: ClassVar[type[CustomerCriteria]] = CustomerCriteria
    EXPORT_COLUMNS: ClassVar[tuple] = CUSTOMER_COLUMNS
    USES_EXCLUSIONS: ClassVar[bool] = True
    LINK_PARAM: ClassVar[str] = "customer"
    SUMMARY_FIELD: ClassVar[str] = "balance"
    TITLE: ClassVar[str] = "Customers"

    show_analytics: bool = config.SHOW_ANALYTICS
    analytics: dict[str, str] = _analytics_cards(CustomerAnalytics())
    analytics_loading: bool = False
    analytics_error: str = ""

    exclude_target: str = ""
    exclude_label: str = ""
    exclude_reason: str = ""

    _analytics_request: int = 0

    def _fetcher(self):
        return _service().page_customers

    def _display(self, row: CustomerRow) -> dict[str, str]:
        return {
            "customer_id": row.customer_id,
            "customer_name": row.customer_name,
            "status": row.status,
            "country": row.country,
            "email": row.email,
            "balance": format_currency(row.balance),
            "balance_sign": (
                "negative" if row.balance < 0 else "zero" if row.balance == 0 else ""
            ),
            "open_invoice_count": str(row.open_invoice_count),
            "red_count": str(row.red_count),
            "yellow_count": str(row.yellow_count),
            "green_count": str(row.green_count),
            "max_days_overdue": str(row.max_days_overdue),
            "overdue": (
                "true" if row.max_days_overdue > row.days_past_due_threshold else ""
            ),
            "days_past_due_threshold": str(row.days_past_due_threshold),
            "last_modified": format_date(row.last_modified),
        }

    def _on_reset(self) -> list:
        return [CustomerState.load_analytics] if self.show_analytics else []

    # Analytics

    @rx.event(background=True)
    async def load_analytics(self):
        """Fetch the analytics cards for the current criteria and exclusions."""
        async with self:
            self._analytics_request += 1
            request = self._analytics_request
            criteria = self._ensure_listing().criteria
            excluded = await self._excluded_ids()
            self.analytics_loading = True
            self.analytics_error = ""
        try:
            analytics = await _service().customer_analytics(criteria, excluded)
        except Exception as e:
            LOG.error("Failed to load customer analytics: %s", e, exc_info=True)
            async with self:
                if request == self._analytics_request:
                    self.analytics_error = f"Failed to load analytics: {e}"
                    self.analytics_loading = False
            return
        async with self:
            if request != self._analytics_request:
                LOG.debug("Discarding stale analytics - request:%s", request)
                return
            self.analytics = _analytics_cards(analytics)
            self.analytics_loading = False

    # Exclusions

    def start_exclude(self, customer_id: str, label: str):
        """Open the exclude dialog for one customer."""
        self.exclude_target = customer_id
        self.exclude_label = label
        self.exclude_reason = ""

    def set_exclude_reason(self, reason: str):
        self.exclude_reason = reason

    def cancel_exclude(self):
        self.exclude_target = ""
        self.exclude_label = ""
        self.exclude_reason = ""

    def set_exclude_open(self, is_open: bool):
        if not is_open:
            self.cancel_exclude()

    async def _after_exclusions(self):
        await self._mirror()
        return [CustomerState.load_analytics] if self.show_analytics else []

    @rx.event
    async def confirm_exclude(self):
        """Persist the exclusion opened in the dialog."""
        exclusions = await self.get_state(ExclusionState)
        result = await exclusions._exclude(self.exclude_target, self.exclude_reason)
        if not result.ok:
            return rx.window_alert(result.reason)
        LOG.info("Customer excluded - customer:%s", self.exclude_target)
        self.cancel_exclude()
        return await self._after_exclusions()

    @rx.event
    async def include(self, customer_id: str):
        exclusions = await self.get_state(ExclusionState)
        result = await exclusions._include(customer_id)
        if not result.ok:
            return rx.window_alert(result.reason)
        return await self._after_exclusions()

    @rx.event
    async def include_all(self):
        exclusions = await self.get_state(ExclusionState)
        result = await exclusions._include_all()
        if not result.ok:
            return rx.window_alert(result.reason)
        return await self._after_exclusions()

    # Edits

    @rx.event
    async def set_threshold(self, customer_id: str, value: str):
        """
        Change a customer's past-due threshold.

        Args:
            customer_id: Customer to update.
            value: Whole number of days, as typed.
        """
        invalid = self._check_user()
        if invalid:
            return invalid
        days = parse_int(value)
        if days is None or days < 0:
            return rx.window_alert("Threshold must be a whole number of days")
        service = _service()
        result = await run_mutation(
            self._ensure_listing(),
            customer_id,
            {"days_past_due_threshold": days},
            lambda: service.update_customer_threshold(customer_id, days),
            "update threshold",
        )
        return await self._settle(result)
