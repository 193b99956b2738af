"""Tests for payment acceptance and payment-driven status."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from billflow_core.exceptions import ValidationError
from billflow_core.models import Invoice, InvoiceStatus
from billflow_core.payments import (
    balance_due,
    status_after_payments,
    status_on_send,
    validate_payment,
)


TODAY = date(2025, 6, 15)


@pytest.fixture
def sent_invoice() -> Invoice:
    """A sent invoice for 220 with 100 already paid."""
    return Invoice(
        id="inv-1",
        status=InvoiceStatus.SENT,
        total="220",
        paid_amount="100",
        due_date=TODAY + timedelta(days=10),
    )


class TestValidatePayment:
    """Tests for validate_payment."""

    def test_accepts_full_balance(self, sent_invoice: Invoice):
        """Paying the exact balance is allowed."""
        assert balance_due(sent_invoice) == Decimal("120.00")
        assert validate_payment(sent_invoice, "120") == Decimal("120.00")

    def test_rounds_amount(self, sent_invoice: Invoice):
        """Amounts are rounded half-up to cents."""
        assert validate_payment(sent_invoice, "10.005") == Decimal("10.01")

    def test_rejects_overpayment(self, sent_invoice: Invoice):
        """A payment above the balance due is rejected."""
        with pytest.raises(ValidationError, match="exceeds balance due"):
            validate_payment(sent_invoice, "120.01")

    @pytest.mark.parametrize("amount", ["0", "-5"])
    def test_rejects_non_positive(self, sent_invoice: Invoice, amount: str):
        """Zero and negative payments are rejected."""
        with pytest.raises(ValidationError):
            validate_payment(sent_invoice, amount)

    @pytest.mark.parametrize("status", [InvoiceStatus.DRAFT, InvoiceStatus.PAID])
    def test_rejects_unpayable_status(self, sent_invoice: Invoice, status: InvoiceStatus):
        """Only sent or overdue invoices accept payments."""
        invoice = sent_invoice.model_copy(update={"status": status})
        with pytest.raises(ValidationError) as exc_info:
            validate_payment(invoice, "10")
        assert exc_info.value.field == "status"

    def test_overdue_invoice_accepts_payment(self, sent_invoice: Invoice):
        """Overdue invoices can still be paid."""
        invoice = sent_invoice.model_copy(update={"status": InvoiceStatus.OVERDUE})
        assert validate_payment(invoice, "50") == Decimal("50.00")


class TestStatusAfterPayments:
    """Tests for status_after_payments."""

    def test_full_payment_marks_paid(self, sent_invoice: Invoice):
        """Paying the total settles the invoice."""
        assert status_after_payments(sent_invoice, "220", TODAY) == InvoiceStatus.PAID

    def test_partial_payment_keeps_status(self, sent_invoice: Invoice):
        """A partial payment leaves the invoice as it was."""
        assert status_after_payments(sent_invoice, "150", TODAY) == InvoiceStatus.SENT

    def test_removed_payment_reverts_to_overdue(self, sent_invoice: Invoice):
        """A paid invoice past its due date reverts to OVERDUE."""
        invoice = sent_invoice.model_copy(update={
            "status": InvoiceStatus.PAID,
            "due_date": TODAY - timedelta(days=1),
        })
        assert status_after_payments(invoice, "100", TODAY) == InvoiceStatus.OVERDUE

    def test_removed_payment_reverts_to_sent(self, sent_invoice: Invoice):
        """A paid invoice not yet due reverts to SENT."""
        invoice = sent_invoice.model_copy(update={"status": InvoiceStatus.PAID})
        assert status_after_payments(invoice, "100", TODAY) == InvoiceStatus.SENT


class TestStatusOnSend:
    """Tests for status_on_send."""

    def test_future_due_date(self, sent_invoice: Invoice):
        """An invoice not yet due is stored as SENT."""
        assert status_on_send(sent_invoice, TODAY) == InvoiceStatus.SENT

    def test_past_due_date(self, sent_invoice: Invoice):
        """An invoice already past due is stored as OVERDUE."""
        invoice = sent_invoice.model_copy(update={"due_date": TODAY - timedelta(days=1)})
        assert status_on_send(invoice, TODAY) == InvoiceStatus.OVERDUE
