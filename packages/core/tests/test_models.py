"""Tests for the data models."""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import get_args

import pytest

from billflow_core.exceptions import (
    BillingError,
    DocumentLocked,
    PartialComputationFailure,
    ValidationError,
)
from billflow_core.models import (
    ActivityRecord,
    Document,
    DocumentKind,
    Invoice,
    LineItem,
    LineItemType,
    Project,
    ProjectHours,
    Quote,
    QuoteStatus,
    Timesheet,
)


class TestLineItem:
    """Tests for LineItem."""

    def test_defaults(self):
        """A bare row is untagged with zero amounts."""
        item = LineItem(name="Design")
        assert item.type is None
        assert item.quantity == Decimal("0")
        assert item.tax_rate == Decimal("0")

    def test_numbers_coerced_to_decimal(self):
        """Floats, ints and strings become Decimals."""
        item = LineItem(name="Design", quantity=1.1, rate=" 20 ", tax_rate=5)
        assert item.quantity == Decimal("1.1")
        assert item.rate == Decimal("20")
        assert item.tax_rate == Decimal("5")

    def test_tax_rate_bounds(self):
        """Tax rate is a percentage between 0 and 100."""
        with pytest.raises(ValueError):
            LineItem(name="Design", tax_rate=101)

    def test_tag_normalized(self):
        """Tags are upper-cased; unknown tags dropped."""
        assert LineItem(type=" timesheet ", name="x").type == LineItemType.TIMESHEET
        assert LineItem(type="bogus", name="x").type is None


class TestDocuments:
    """Tests for Quote and Invoice."""

    def test_quote_defaults(self):
        """New quotes are unconverted drafts."""
        quote = Quote(id="q-1")
        assert quote.status == QuoteStatus.DRAFT
        assert not quote.converted_to_invoice
        assert quote.kind == DocumentKind.QUOTE

    def test_document_alias_covers_both_kinds(self):
        """Document is the single quote-or-invoice type used by the rules."""
        from billflow_core import lifecycle, status

        assert set(get_args(Document)) == {Quote, Invoice}
        assert status.Document is Document
        assert lifecycle.Document is Document

    def test_invoice_paid_amount_none_is_zero(self):
        """A missing paid amount means nothing paid."""
        invoice = Invoice(id="inv-1", paid_amount=None, total="10.5")
        assert invoice.paid_amount == Decimal("0")
        assert invoice.total == Decimal("10.5")
        assert invoice.kind == DocumentKind.INVOICE


class TestProjectsAndTimesheets:
    """Tests for Project and Timesheet."""

    def test_missing_rate_is_zero(self):
        """A project without a rate bills at zero."""
        assert Project(id="p-1", hourly_rate=None).hourly_rate == Decimal("0")

    def test_negative_rate_rejected(self):
        """Hourly rates are not negative."""
        with pytest.raises(ValueError):
            Project(id="p-1", hourly_rate="-1")

    def test_date_bounds(self):
        """Both dates are needed for date-based progress."""
        assert not Project(id="p-1", start_date=date(2025, 1, 1)).has_date_bounds
        assert Project(id="p-1", start_date=date(2025, 1, 1), end_date=date(2025, 2, 1)).has_date_bounds

    def test_hours_must_be_positive(self):
        """Zero-hour timesheets are rejected."""
        with pytest.raises(ValueError):
            Timesheet(id="t-1", project_id="p-1", date=date(2025, 1, 1), hours=0)


class TestResults:
    """Tests for result models."""

    def test_zeroed_project_hours(self):
        """Zeroed metrics are flagged as failed."""
        hours = ProjectHours.zeroed("p-1", Decimal("100"))
        assert hours.failed
        assert hours.unbilled_amount == Decimal("0")
        assert hours.is_fully_billed

    def test_unbilled_hours_never_negative(self):
        """Negative unbilled hours are rejected."""
        with pytest.raises(ValueError):
            ProjectHours(project_id="p-1", unbilled_hours=Decimal("-1"))

    def test_activity_timestamp_is_utc(self):
        """Naive timestamps are taken as UTC."""
        record = ActivityRecord(
            action="INVOICE_STATUS_CHANGED",
            document_id="inv-1",
            document_kind=DocumentKind.INVOICE,
            from_status="SENT",
            to_status="PAID",
            timestamp=datetime(2025, 1, 1, 12, 0),
        )
        assert record.timestamp.tzinfo == timezone.utc


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        """All engine errors derive from BillingError."""
        assert issubclass(ValidationError, BillingError)
        assert issubclass(DocumentLocked, BillingError)
        assert issubclass(PartialComputationFailure, BillingError)

    def test_details_merged(self):
        """Subclass fields are copied into details."""
        error = DocumentLocked("locked", document_id="q-1", status="SENT", action="edit")
        assert error.details == {"document_id": "q-1", "status": "SENT", "action": "edit"}
        assert str(error) == "locked"
        assert "DocumentLocked(" in repr(error)

    def test_partial_failure_is_recoverable(self):
        """Batch failures are recoverable by default."""
        error = PartialComputationFailure("timed out", entity_id="p-1", cause="timeout")
        assert error.recoverable
        assert error.details["entity_id"] == "p-1"
