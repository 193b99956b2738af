"""Payment acceptance and the invoice status a payment total implies."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from .exceptions import ValidationError
from .models import Invoice, InvoiceStatus
from .money import Number, round_money, to_decimal
from .status import as_of

logger = structlog.get_logger()

_PAYABLE = (InvoiceStatus.SENT, InvoiceStatus.OVERDUE)


def balance_due(invoice: Invoice) -> Decimal:
    """Stored total minus the amount paid so far."""
    return round_money(invoice.total - invoice.paid_amount)


def validate_payment(invoice: Invoice, amount: Number) -> Decimal:
    """
    Check that a payment may be recorded against an invoice.

    Args:
        invoice: Snapshot of the invoice being paid
        amount: Payment amount

    Returns:
        The amount rounded half-up to two places

    Raises:
        ValidationError: if the invoice is not SENT or OVERDUE, or the
            amount is not positive or exceeds the balance due.
    """
    if invoice.status not in _PAYABLE:
        raise ValidationError(
            f"Payments can only be recorded for sent or overdue invoices; invoice is {invoice.status.value}",
            field="status",
            value=invoice.status.value,
            constraint="SENT or OVERDUE",
        )

    value = round_money(amount)
    if value <= 0:
        raise ValidationError(
            "Payment amount must be greater than zero",
            field="amount",
            value=str(value),
            constraint="> 0",
        )

    due = balance_due(invoice)
    if value > due:
        raise ValidationError(
            f"Payment amount exceeds balance due ({due})",
            field="amount",
            value=str(value),
            constraint=f"<= {due}",
        )
    return value


def status_after_payments(
    invoice: Invoice,
    total_paid: Number,
    today: Optional[date] = None,
) -> InvoiceStatus:
    """
    Status an invoice should have once its payments sum to ``total_paid``.

    Recording a payment can settle the invoice; deleting one can undo a
    settlement, in which case the invoice goes back to OVERDUE or SENT
    depending on its due date.
    """
    paid = to_decimal(total_paid)
    if paid >= invoice.total and invoice.status != InvoiceStatus.DRAFT:
        new_status = InvoiceStatus.PAID
    elif invoice.status == InvoiceStatus.PAID:
        past_due = invoice.due_date is not None and invoice.due_date < as_of(today)
        new_status = InvoiceStatus.OVERDUE if past_due else InvoiceStatus.SENT
    else:
        new_status = invoice.status

    if new_status != invoice.status:
        logger.info(
            "invoice_status_from_payments",
            invoice_id=invoice.id,
            from_status=invoice.status.value,
            to_status=new_status.value,
            total_paid=str(paid),
        )
    return new_status


def status_on_send(invoice: Invoice, today: Optional[date] = None) -> InvoiceStatus:
    """Status stored when an invoice is marked as sent.

    An invoice whose due date has already passed goes straight to OVERDUE.
    """
    if invoice.due_date is not None and invoice.due_date < as_of(today):
        return InvoiceStatus.OVERDUE
    return InvoiceStatus.SENT
