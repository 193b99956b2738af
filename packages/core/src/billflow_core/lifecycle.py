"""Quote and invoice lifecycle rules.

The validator answers "may this happen?" for status changes, edits,
deletes and quote-to-invoice conversion. It never writes: the caller
applies an allowed transition at the persistence layer (with
compare-and-swap on the prior status) and records the activity.

Quote transitions:
    DRAFT -> SENT, REJECTED
    SENT  -> ACCEPTED, REJECTED, INVOICED
    ACCEPTED, REJECTED, INVOICED are terminal

Invoice transitions:
    DRAFT   -> SENT
    SENT    -> PAID
    OVERDUE -> PAID

EXPIRED (quotes) and OVERDUE (invoices) are never manual targets.
"""

from datetime import datetime
from typing import Optional

import structlog
from pydantic import BaseModel

from .exceptions import DocumentLocked, ValidationError
from .models import (
    ActivityRecord,
    DisplayStatus,
    Document,
    DocumentKind,
    Invoice,
    InvoiceStatus,
    LineItem,
    Quote,
    QuoteStatus,
)
from .status import is_converted

logger = structlog.get_logger()


QUOTE_TRANSITIONS: dict[QuoteStatus, frozenset[QuoteStatus]] = {
    QuoteStatus.DRAFT: frozenset({QuoteStatus.SENT, QuoteStatus.REJECTED}),
    QuoteStatus.SENT: frozenset({
        QuoteStatus.ACCEPTED,
        QuoteStatus.REJECTED,
        QuoteStatus.INVOICED,
    }),
    QuoteStatus.ACCEPTED: frozenset(),
    QuoteStatus.REJECTED: frozenset(),
    QuoteStatus.INVOICED: frozenset(),
}

INVOICE_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.SENT}),
    InvoiceStatus.SENT: frozenset({InvoiceStatus.PAID}),
    InvoiceStatus.OVERDUE: frozenset({InvoiceStatus.PAID}),
    InvoiceStatus.PAID: frozenset(),
}

# Statuses only ever produced by derivation or by the scheduled job.
_NON_TARGETS = {
    DocumentKind.QUOTE: {DisplayStatus.EXPIRED.value: "EXPIRED is derived from the expiry date and is never stored"},
    DocumentKind.INVOICE: {InvoiceStatus.OVERDUE.value: "OVERDUE is set by the scheduled overdue check, not by a manual transition"},
}


class TransitionDecision(BaseModel):
    """Outcome of a transition check.

    ``to_status`` is the status the document would have afterwards: the
    target when allowed, the unchanged current status when denied.
    ``notify`` is True when the caller should trigger the email sender
    (a successful "mark as sent").
    """

    document_kind: DocumentKind
    document_id: Optional[str] = None
    allowed: bool
    from_status: str
    requested_status: str
    to_status: str
    reason: Optional[str] = None
    notify: bool = False

    def require(self) -> "TransitionDecision":
        """Return self if allowed, otherwise raise DocumentLocked."""
        if not self.allowed:
            raise DocumentLocked(
                self.reason or "Transition not allowed",
                document_id=self.document_id,
                status=self.from_status,
                action=f"transition:{self.requested_status}",
            )
        return self

    def to_activity_record(
        self,
        actor_id: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> ActivityRecord:
        """Build the audit log record for an applied transition.

        Raises:
            DocumentLocked: if the decision was a denial.
        """
        self.require()
        fields = dict(
            actor_id=actor_id,
            action=f"{self.document_kind.value.upper()}_STATUS_CHANGED",
            document_id=self.document_id or "",
            document_kind=self.document_kind,
            from_status=self.from_status,
            to_status=self.to_status,
        )
        if timestamp is not None:
            fields["timestamp"] = timestamp
        return ActivityRecord(**fields)


def _kind_of(document: Document) -> DocumentKind:
    if isinstance(document, Quote):
        return DocumentKind.QUOTE
    if isinstance(document, Invoice):
        return DocumentKind.INVOICE
    raise TypeError(f"Unsupported document type: {type(document).__name__}")


def _status_value(status) -> str:
    value = status.value if hasattr(status, "value") else str(status)
    return value.strip().upper()


class LifecycleValidator:
    """
    Enforce the quote and invoice state machines.

    Every check is made against the status of the snapshot passed in;
    callers re-read and re-validate if the stored status changed
    before their write.
    """

    def allowed_targets(self, document: Document) -> frozenset:
        """Statuses the document may legally move to from its stored status."""
        if isinstance(document, Quote):
            return QUOTE_TRANSITIONS[document.status]
        return INVOICE_TRANSITIONS[document.status]

    def validate_transition(
        self,
        document: Document,
        target,
        expected_status=None,
    ) -> TransitionDecision:
        """
        Decide whether ``document`` may move to ``target``.

        Args:
            document: Snapshot of the quote or invoice
            target: Requested status (enum member or string)
            expected_status: Status the caller read earlier; a mismatch
                with the snapshot denies the transition as stale

        Returns:
            TransitionDecision (never raises for a denial)

        Raises:
            ValidationError: if ``target`` is not a status of any kind.
        """
        kind = _kind_of(document)
        current = document.status.value
        requested = _status_value(target)

        def decide(allowed: bool, reason: Optional[str] = None) -> TransitionDecision:
            decision = TransitionDecision(
                document_kind=kind,
                document_id=document.id,
                allowed=allowed,
                from_status=current,
                requested_status=requested,
                to_status=requested if allowed else current,
                reason=reason,
                notify=allowed and requested == "SENT",
            )
            logger.info(
                "transition_validated",
                document_kind=kind.value,
                document_id=document.id,
                from_status=current,
                requested_status=requested,
                allowed=allowed,
                reason=reason,
            )
            return decision

        if requested in _NON_TARGETS[kind]:
            return decide(False, _NON_TARGETS[kind][requested])

        status_enum = QuoteStatus if kind == DocumentKind.QUOTE else InvoiceStatus
        try:
            target_status = status_enum(requested)
        except ValueError as e:
            raise ValidationError(
                f"Unknown {kind.value} status: {requested}",
                field="status",
                value=requested,
                constraint=", ".join(s.value for s in status_enum),
            ) from e

        if expected_status is not None and _status_value(expected_status) != current:
            return decide(
                False,
                f"Stored status is {current}, expected {_status_value(expected_status)}; re-read and retry",
            )

        if target_status.value == current:
            return decide(False, f"{kind.value.capitalize()} is already {current}")

        if isinstance(document, Quote) and is_converted(document):
            return decide(False, "Quote has already been converted to an invoice")

        if target_status not in self.allowed_targets(document):
            return decide(
                False,
                f"Cannot move {kind.value} from {current} to {target_status.value}",
            )

        return decide(True)

    def can_edit(self, document: Document) -> bool:
        """Only drafts may be edited."""
        return document.status.value == "DRAFT"

    def ensure_editable(self, document: Document) -> None:
        """
        Guard a full field edit.

        Raises:
            DocumentLocked: unless the document is a draft.
        """
        if not self.can_edit(document):
            kind = _kind_of(document)
            raise DocumentLocked(
                f"Only draft {kind.value}s can be edited; this {kind.value} is {document.status.value}",
                document_id=document.id,
                status=document.status.value,
                action="edit",
            )

    def ensure_deletable(self, document: Document) -> None:
        """
        Guard a delete request.

        Raises:
            DocumentLocked: unless the document is a draft.
        """
        if not self.can_edit(document):
            kind = _kind_of(document)
            raise DocumentLocked(
                f"Cannot delete a {kind.value} that has been {document.status.value.lower()}",
                document_id=document.id,
                status=document.status.value,
                action="delete",
            )

    def ensure_convertible(self, quote: Quote) -> None:
        """
        Guard quote-to-invoice conversion.

        Raises:
            DocumentLocked: if the quote is already converted or not SENT.
        """
        if is_converted(quote):
            raise DocumentLocked(
                "Quote has already been converted to an invoice",
                document_id=quote.id,
                status=quote.status.value,
                action="convert",
            )
        if quote.status != QuoteStatus.SENT:
            raise DocumentLocked(
                "Only sent quotes can be converted to invoices",
                document_id=quote.id,
                status=quote.status.value,
                action="convert",
            )

    def invoice_items_from_quote(self, quote: Quote) -> list[LineItem]:
        """
        Copy a convertible quote's rows for the new invoice.

        Type tags are preserved so TIMESHEET rows stay recognisable as
        billed hours on the invoice.
        """
        self.ensure_convertible(quote)
        return [item.model_copy(deep=True) for item in quote.items]


_default_validator = LifecycleValidator()


def validate_transition(document: Document, target, expected_status=None) -> TransitionDecision:
    """Check a transition with the default validator."""
    return _default_validator.validate_transition(document, target, expected_status)


def ensure_editable(document: Document) -> None:
    """Raise DocumentLocked unless the document is a draft."""
    _default_validator.ensure_editable(document)


def ensure_deletable(document: Document) -> None:
    """Raise DocumentLocked unless the document is a draft."""
    _default_validator.ensure_deletable(document)


def ensure_convertible(quote: Quote) -> None:
    """Raise DocumentLocked unless the quote can become an invoice."""
    _default_validator.ensure_convertible(quote)


def invoice_items_from_quote(quote: Quote) -> list[LineItem]:
    """Rows for an invoice created from ``quote``."""
    return _default_validator.invoice_items_from_quote(quote)
