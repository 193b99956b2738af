"""Payment terms and the due/expiry dates they imply."""

from datetime import date, timedelta
from enum import Enum
from typing import Optional

from .exceptions import ValidationError


class PaymentTerms(str, Enum):
    """Payment terms offered on quotes and invoices."""

    DUE_ON_RECEIPT = "Due on Receipt"
    NET_15 = "Net 15"
    NET_30 = "Net 30"
    NET_45 = "Net 45"
    NET_60 = "Net 60"
    CUSTOM = "Custom"

    @property
    def days(self) -> Optional[int]:
        """Days until due; None for custom terms."""
        return _TERM_DAYS.get(self)


_TERM_DAYS = {
    PaymentTerms.DUE_ON_RECEIPT: 0,
    PaymentTerms.NET_15: 15,
    PaymentTerms.NET_30: 30,
    PaymentTerms.NET_45: 45,
    PaymentTerms.NET_60: 60,
}


def parse_terms(value) -> Optional[PaymentTerms]:
    """Parse stored terms text; None/empty means no terms.

    Raises:
        ValidationError: for text that is not a known term.
    """
    if value is None or isinstance(value, PaymentTerms):
        return value
    text = str(value).strip()
    if not text:
        return None
    for terms in PaymentTerms:
        if terms.value.lower() == text.lower():
            return terms
    raise ValidationError(
        f"Unknown payment terms: {text}",
        field="payment_terms",
        value=text,
        constraint=", ".join(t.value for t in PaymentTerms),
    )


def resolve_due_date(
    issue_date: date,
    terms=None,
    explicit: Optional[date] = None,
) -> Optional[date]:
    """
    Due date (invoices) or expiry date (quotes) for a document.

    An explicitly supplied date always wins. Custom or missing terms give
    no date; "Due on Receipt" is the issue date itself.
    """
    if explicit is not None:
        return explicit
    parsed = parse_terms(terms)
    if parsed is None or parsed.days is None:
        return None
    return issue_date + timedelta(days=parsed.days)
