"""Effective (user-visible) document status.

The stored status of a quote never changes on its own, but a SENT quote
whose expiry date has passed must be shown as EXPIRED. That depends on
the current date, so it is derived on every read and never written back.
"""

from datetime import date, datetime
from typing import Optional

from .models import DisplayStatus, Document, Invoice, InvoiceStatus, Quote, QuoteStatus


def as_of(today: Optional[date] = None) -> date:
    """Reference date with time of day dropped; defaults to today."""
    if today is None:
        return date.today()
    if isinstance(today, datetime):
        return today.date()
    return today


def is_converted(quote: Quote) -> bool:
    """True if any conversion signal is present.

    Different code paths set different signals when a quote becomes an
    invoice, so all three are accepted as equivalent evidence.
    """
    return (
        quote.status == QuoteStatus.INVOICED
        or quote.converted_to_invoice
        or bool(quote.invoice_id)
    )


def is_expired(quote: Quote, today: Optional[date] = None) -> bool:
    """True if the quote's expiry date lies strictly before today."""
    if quote.expiry_date is None:
        return False
    return quote.expiry_date < as_of(today)


def quote_effective_status(quote: Quote, today: Optional[date] = None) -> DisplayStatus:
    if is_converted(quote):
        return DisplayStatus.INVOICED
    if quote.status == QuoteStatus.SENT and is_expired(quote, today):
        return DisplayStatus.EXPIRED
    return DisplayStatus(quote.status.value)


def invoice_effective_status(invoice: Invoice, today: Optional[date] = None) -> DisplayStatus:
    # OVERDUE is stored by the scheduled job; the stored value is authoritative.
    return DisplayStatus(invoice.status.value)


def effective_status(document: Document, today: Optional[date] = None) -> DisplayStatus:
    """
    Map a document's stored status and dates to the status users see.

    Args:
        document: A quote or invoice snapshot (not modified)
        today: Reference date; defaults to ``date.today()``. Dates are
            compared without time of day.

    Returns:
        The display status
    """
    if isinstance(document, Quote):
        return quote_effective_status(document, today)
    if isinstance(document, Invoice):
        return invoice_effective_status(document, today)
    raise TypeError(f"Unsupported document type: {type(document).__name__}")


def is_past_due(invoice: Invoice, today: Optional[date] = None) -> bool:
    """True if an unpaid invoice's due date lies strictly before today.

    Helper for the external job that stores OVERDUE; the resolver itself
    never derives it.
    """
    if invoice.due_date is None:
        return False
    if invoice.status not in (InvoiceStatus.SENT, InvoiceStatus.OVERDUE):
        return False
    return invoice.due_date < as_of(today)
