from collections_ui.models.records import (
    CollectorActivity,
    CustomerAnalytics,
    CustomerRow,
    ExclusionEntry,
    InvoiceRow,
    NoteRow,
    PaymentRow,
    TicketRow,
)


class TestCustomerRow:
    def test_rpc_row(self):
        row = CustomerRow.from_row(
            {
                "customer_id": "C100",
                "customer_name": "Apex Supply",
                "customer_status": "Active",
                "calculated_balance": "1520.75",
                "open_invoice_count": 3,
                "color_status_counts": {"red": 1, "yellow": None, "green": "2"},
                "days_past_due_threshold": None,
            }
        )
        assert row.key == "C100"
        assert row.status == "Active"
        assert row.balance == 1520.75
        assert (row.red_count, row.yellow_count, row.green_count) == (1, 0, 2)
        assert row.days_past_due_threshold == 30

    def test_bad_numbers_default_to_zero(self):
        row = CustomerRow.from_row({"id": "C1", "balance": "n/a"})
        assert row.customer_id == "C1"
        assert row.balance == 0.0


class TestInvoiceRow:
    def test_unknown_color_is_none(self):
        row = InvoiceRow.from_row(
            {"id": "INV-1", "reference_nbr": "000001", "color_status": "blue"}
        )
        assert row.reference_number == "000001"
        assert row.color_status is None

    def test_known_color(self):
        row = InvoiceRow.from_row({"id": "INV-1", "color_status": "red"})
        assert row.color_status == "red"


class TestTicketRow:
    def test_nested_joins(self):
        row = TicketRow.from_row(
            {
                "id": "TKT-1",
                "ticket_number": "T-1001",
                "customer": {"customer_name": "Birch Logistics"},
                "collector": {"full_name": "", "email": "sam@example.com"},
                "ticket_status": "promised",
            }
        )
        assert row.customer_name == "Birch Logistics"
        assert row.assigned_collector_name == "sam@example.com"
        assert row.status == "promised"
        assert row.priority == "medium"


class TestOtherRecords:
    def test_payment_amount_aliases(self):
        row = PaymentRow.from_row({"id": "P1", "payment_amount": 99.5})
        assert row.amount == 99.5

    def test_note_aliases(self):
        note = NoteRow.from_row(
            {"id": 1, "entity_type": "ticket", "entity_id": "T", "note_text": "hi"}
        )
        assert note.body == "hi"

    def test_exclusion_entry_round_trip(self):
        entry = ExclusionEntry("C100", "disputed", "2025-06-01T00:00:00+00:00")
        assert ExclusionEntry.from_row(entry.to_dict()) == entry

    def test_analytics_accepts_rpc_list(self):
        analytics = CustomerAnalytics.from_row([{"total_customers": "12"}])
        assert analytics.total_customers == 12
        assert CustomerAnalytics.from_row([]) == CustomerAnalytics()

    def test_collector_display_name(self):
        activity = CollectorActivity.from_row({"user_id": "u1", "email": "a@b.c"})
        assert activity.display_name == "a@b.c"
