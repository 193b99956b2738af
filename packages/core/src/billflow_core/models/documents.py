"""Quote, invoice and line item records.

These models are plain data snapshots handed over by the persistence
layer. They carry no behaviour beyond input coercion and a few derived
conveniences; every business rule lives in the engine modules.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator


class LineItemType(str, Enum):
    """Stored type tag of a document row."""

    ITEM = "ITEM"
    HEADER = "HEADER"
    TIMESHEET = "TIMESHEET"


class DocumentKind(str, Enum):
    """Kind of billing document."""

    QUOTE = "quote"
    INVOICE = "invoice"


class QuoteStatus(str, Enum):
    """Stored quote statuses."""

    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    INVOICED = "INVOICED"


class InvoiceStatus(str, Enum):
    """Stored invoice statuses."""

    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class DisplayStatus(str, Enum):
    """User-visible status after read-time derivation.

    EXPIRED only ever appears here; it is never stored.
    """

    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    INVOICED = "INVOICED"
    EXPIRED = "EXPIRED"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


def coerce_decimal(v):
    """Coerce int/float/str input to Decimal without binary float noise."""
    if v is None or isinstance(v, Decimal):
        return v
    if isinstance(v, bool):
        raise ValueError("boolean is not a number")
    if isinstance(v, (int, float)):
        return Decimal(str(v))
    if isinstance(v, str):
        return Decimal(v.strip() or "0")
    return v


class LineItem(BaseModel):
    """A single row of a quote or invoice.

    ``type`` may be missing on rows saved before type tags existed; an
    unrecognised tag is treated the same as a missing one so the
    classifier can fall back to its name heuristic.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "type": "TIMESHEET",
                    "name": "Work on 15/01/2025",
                    "quantity": "4",
                    "rate": "1500",
                    "tax_rate": "0",
                }
            ]
        }
    }

    type: Optional[LineItemType] = Field(
        default=None,
        description="Stored type tag; None when missing or unrecognised",
    )
    name: str = Field(default="", description="Row label shown on the document")
    description: Optional[str] = Field(default=None)
    quantity: Decimal = Field(default=Decimal("0"))
    rate: Decimal = Field(default=Decimal("0"))
    tax_rate: Decimal = Field(
        default=Decimal("0"),
        ge=Decimal("0"),
        le=Decimal("100"),
        description="Tax percentage applied to the row amount",
    )
    item_id: Optional[str] = Field(
        default=None,
        description="Reference to a catalogue item, if the row came from one",
    )

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        """Accept tags case-insensitively; unknown tags become None."""
        if v is None or isinstance(v, LineItemType):
            return v
        if isinstance(v, str):
            tag = v.strip().upper()
            if tag in LineItemType.__members__:
                return LineItemType(tag)
        return None

    @field_validator("quantity", "rate", "tax_rate", mode="before")
    @classmethod
    def coerce_numbers(cls, v):
        """Coerce numeric input to Decimal."""
        return coerce_decimal(v)


class BillingDocument(BaseModel):
    """Fields shared by quotes and invoices."""

    id: str
    number: Optional[str] = None
    contact_id: Optional[str] = None
    project_id: Optional[str] = None
    issue_date: Optional[date] = None
    payment_terms: Optional[str] = None
    items: list[LineItem] = Field(default_factory=list)
    subtotal: Decimal = Field(default=Decimal("0"))
    tax_amount: Decimal = Field(default=Decimal("0"))
    total: Decimal = Field(default=Decimal("0"))

    @field_validator("subtotal", "tax_amount", "total", mode="before")
    @classmethod
    def coerce_amounts(cls, v):
        """Coerce stored amounts to Decimal."""
        return coerce_decimal(v)


class Quote(BillingDocument):
    """A quote (estimate) sent to a contact."""

    status: QuoteStatus = QuoteStatus.DRAFT
    expiry_date: Optional[date] = None
    converted_to_invoice: bool = False
    invoice_id: Optional[str] = None

    @property
    def kind(self) -> DocumentKind:
        return DocumentKind.QUOTE


class Invoice(BillingDocument):
    """An invoice issued to a contact."""

    status: InvoiceStatus = InvoiceStatus.DRAFT
    due_date: Optional[date] = None
    quote_id: Optional[str] = None
    paid_amount: Decimal = Field(default=Decimal("0"))

    @field_validator("paid_amount", mode="before")
    @classmethod
    def coerce_paid(cls, v):
        """Coerce paid amount to Decimal; None means nothing paid."""
        if v is None:
            return Decimal("0")
        return coerce_decimal(v)

    @property
    def kind(self) -> DocumentKind:
        return DocumentKind.INVOICE


Document = Union[Quote, Invoice]
