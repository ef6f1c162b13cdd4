from collections_ui.models.criteria import (
    CRITERIA_BY_VIEW,
    CustomerCriteria,
    InvoiceCriteria,
    TicketCriteria,
)


class TestFilterCriteria:
    def test_defaults(self):
        criteria = CustomerCriteria()
        assert criteria.balance == "positive"
        assert criteria.sort_by == "customer_name"
        assert criteria.active_count() == 0
        assert criteria.with_changes(balance="all").active_count() == 1

    def test_values_are_normalized_to_strings(self):
        criteria = CustomerCriteria(search="  apex ", min_balance=100, status=None)
        assert criteria.search == "apex"
        assert criteria.min_balance == "100"
        assert criteria.status == "all"

    def test_sentinels_are_unset(self):
        criteria = InvoiceCriteria(color_status="all", customer_id="")
        assert criteria.value("color_status") is None
        assert criteria.value("customer_id") is None
        assert criteria.active_count() == 0

    def test_config_round_trip_ignores_unknown_keys(self):
        criteria = TicketCriteria(status="open", priority="high", sort_order="desc")
        config = {**criteria.to_config(), "legacy": "x"}
        assert TicketCriteria.from_config(config) == criteria

    def test_missing_keys_take_defaults(self):
        assert InvoiceCriteria.from_config({"filter": "open"}) == InvoiceCriteria(
            filter="open"
        )
        assert InvoiceCriteria.from_config(None) == InvoiceCriteria()

    def test_numeric_accessors(self):
        criteria = CustomerCriteria(
            min_balance="1,250.50", min_open_invoices="2.7", date_from="2025-01-31"
        )
        assert criteria.number("min_balance") == 1250.5
        assert criteria.integer("min_open_invoices") == 2
        assert criteria.day("date_from").isoformat() == "2025-01-31"
        assert criteria.number("max_balance") is None

    def test_toggle_sort(self):
        criteria = CustomerCriteria()
        flipped = criteria.toggle_sort("customer_name")
        assert flipped.sort_order == "desc"
        assert flipped.toggle_sort("customer_name").sort_order == "asc"
        other = flipped.toggle_sort("balance")
        assert (other.sort_by, other.sort_order) == ("balance", "asc")

    def test_filtered_fields(self):
        criteria = InvoiceCriteria(color_status="red", search="freight")
        fields = criteria.filtered_fields()
        assert "color_status" in fields
        assert "description" in fields
        assert "amount" not in fields

    def test_clear_returns_defaults(self):
        assert TicketCriteria(status="open").clear() == TicketCriteria()

    def test_views_are_registered(self):
        assert set(CRITERIA_BY_VIEW) == {"customers", "invoices", "tickets", "payments"}
