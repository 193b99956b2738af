"""Tests for effective document status."""

from datetime import date, datetime, timedelta

import pytest

from billflow_core.models import DisplayStatus, Invoice, InvoiceStatus, Project, Quote, QuoteStatus
from billflow_core.status import effective_status, is_converted, is_past_due


TODAY = date(2025, 6, 15)


class TestQuoteEffectiveStatus:
    """Tests for quotes."""

    def test_sent_quote_expired_yesterday(self):
        """A SENT quote past its expiry date shows as EXPIRED."""
        quote = Quote(id="q-1", status=QuoteStatus.SENT, expiry_date=TODAY - timedelta(days=1))
        assert effective_status(quote, TODAY) == DisplayStatus.EXPIRED

    def test_sent_quote_expiring_tomorrow(self):
        """A SENT quote before its expiry date stays SENT."""
        quote = Quote(id="q-1", status=QuoteStatus.SENT, expiry_date=TODAY + timedelta(days=1))
        assert effective_status(quote, TODAY) == DisplayStatus.SENT

    def test_expiry_today_is_not_expired(self):
        """The expiry date itself is still valid."""
        quote = Quote(id="q-1", status=QuoteStatus.SENT, expiry_date=TODAY)
        assert effective_status(quote, TODAY) == DisplayStatus.SENT

    @pytest.mark.parametrize("status", [QuoteStatus.DRAFT, QuoteStatus.ACCEPTED, QuoteStatus.REJECTED])
    def test_only_sent_quotes_expire(self, status: QuoteStatus):
        """Other statuses are shown as stored."""
        quote = Quote(id="q-1", status=status, expiry_date=TODAY - timedelta(days=30))
        assert effective_status(quote, TODAY) == DisplayStatus(status.value)

    def test_converted_quote_is_invoiced(self):
        """Any conversion signal shows INVOICED, even when expired."""
        quote = Quote(
            id="q-1",
            status=QuoteStatus.SENT,
            expiry_date=TODAY - timedelta(days=1),
            invoice_id="inv-1",
        )
        assert is_converted(quote)
        assert effective_status(quote, TODAY) == DisplayStatus.INVOICED

    def test_datetime_reference_is_accepted(self):
        """A datetime is compared by its date only."""
        quote = Quote(id="q-1", status=QuoteStatus.SENT, expiry_date=TODAY)
        assert effective_status(quote, datetime(2025, 6, 15, 23, 59)) == DisplayStatus.SENT

    def test_resolution_does_not_modify_quote(self):
        """EXPIRED is never written back."""
        quote = Quote(id="q-1", status=QuoteStatus.SENT, expiry_date=TODAY - timedelta(days=1))
        effective_status(quote, TODAY)
        assert quote.status == QuoteStatus.SENT


class TestInvoiceEffectiveStatus:
    """Tests for invoices."""

    def test_stored_status_is_shown(self):
        """Invoices show their stored status."""
        invoice = Invoice(id="inv-1", status=InvoiceStatus.OVERDUE)
        assert effective_status(invoice, TODAY) == DisplayStatus.OVERDUE

    def test_past_due_is_not_derived(self):
        """A past-due SENT invoice stays SENT until the job stores OVERDUE."""
        invoice = Invoice(id="inv-1", status=InvoiceStatus.SENT, due_date=TODAY - timedelta(days=3))
        assert effective_status(invoice, TODAY) == DisplayStatus.SENT
        assert is_past_due(invoice, TODAY)

    def test_paid_invoice_is_never_past_due(self):
        """Paid invoices are not candidates for OVERDUE."""
        invoice = Invoice(id="inv-1", status=InvoiceStatus.PAID, due_date=TODAY - timedelta(days=3))
        assert not is_past_due(invoice, TODAY)

    def test_unsupported_type(self):
        """Only quotes and invoices have a status."""
        with pytest.raises(TypeError):
            effective_status(Project(id="p-1"), TODAY)
