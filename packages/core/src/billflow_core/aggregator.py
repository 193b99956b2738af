"""Document totals: subtotal, tax, total, balance due and total in words.

Rows are classified first; HEADER rows never touch money. Each row's
amount and tax are rounded half-up to two places before summing, so
the subtotal always equals the sum of the amounts printed on the
document. Sums are carried in integer minor units.
"""

from typing import Iterable, Optional

import structlog

from .classifier import LineItemClassifier
from .config import AmountWordsConfig, BillingConfig
from .exceptions import ValidationError
from .models import (
    BillingDocument,
    DocumentTotals,
    Invoice,
    LineAmount,
    LineItem,
    LineItemType,
)
from .money import (
    Number,
    from_minor_units,
    line_amount_minor,
    line_tax_minor,
    round_money,
    to_minor_units,
)
from .words import amount_to_words

logger = structlog.get_logger()


def validate_line_item(item: LineItem, index: Optional[int] = None) -> None:
    """Reject rows the aggregator must not be given.

    The aggregator itself assumes validated input; callers run this
    first. HEADER rows are exempt from numeric checks.

    Raises:
        ValidationError: negative quantity or rate, or an empty name.
    """
    location = f"items[{index}]" if index is not None else "item"
    if not item.name or not item.name.strip():
        raise ValidationError(
            "Line item name is required",
            field=f"{location}.name",
            constraint="non-empty",
        )
    if item.type == LineItemType.HEADER:
        return
    if item.quantity < 0:
        raise ValidationError(
            "Quantity must not be negative",
            field=f"{location}.quantity",
            value=str(item.quantity),
            constraint=">= 0",
        )
    if item.rate < 0:
        raise ValidationError(
            "Rate must not be negative",
            field=f"{location}.rate",
            value=str(item.rate),
            constraint=">= 0",
        )


def validate_items(items: Iterable[LineItem]) -> None:
    """Validate every row of a document; at least one row is required."""
    items = list(items)
    if not items:
        raise ValidationError(
            "At least one item is required",
            field="items",
            constraint="min length 1",
        )
    for index, item in enumerate(items):
        validate_line_item(item, index)


class FinancialAggregator:
    """
    Compute the financial aggregate of a quote or invoice.

    The aggregator is pure: it never mutates the rows it is given and
    performs no I/O. Precondition: quantity and rate are not negative
    (see ``validate_line_item``).
    """

    def __init__(
        self,
        classifier: Optional[LineItemClassifier] = None,
        words_config: Optional[AmountWordsConfig] = None,
    ):
        self.classifier = classifier or LineItemClassifier()
        self.words_config = words_config or AmountWordsConfig()

    @classmethod
    def from_config(cls, config: BillingConfig) -> "FinancialAggregator":
        """Build an aggregator from the root configuration."""
        return cls(
            classifier=LineItemClassifier(config=config.classifier),
            words_config=config.words,
        )

    def aggregate(
        self,
        items: Iterable[LineItem],
        paid_amount: Optional[Number] = None,
    ) -> DocumentTotals:
        """
        Aggregate rows into document totals.

        Args:
            items: The document's rows, in display order
            paid_amount: Amount already paid; None counts as zero.
                ``balance_due`` may be negative

        Returns:
            DocumentTotals with per-row amounts and the total in words
        """
        lines: list[LineAmount] = []
        subtotal_minor = 0
        tax_minor = 0

        for index, item in enumerate(items):
            kind = self.classifier.classify(item)
            if kind == LineItemType.HEADER:
                continue
            amount_minor = line_amount_minor(item.quantity, item.rate)
            row_tax_minor = line_tax_minor(amount_minor, item.tax_rate)
            subtotal_minor += amount_minor
            tax_minor += row_tax_minor
            lines.append(LineAmount(
                index=index,
                kind=kind,
                amount=from_minor_units(amount_minor),
                tax=from_minor_units(row_tax_minor),
            ))

        total_minor = subtotal_minor + tax_minor

        paid_minor = to_minor_units(paid_amount if paid_amount is not None else 0)
        paid = from_minor_units(paid_minor)
        balance = from_minor_units(total_minor - paid_minor)

        logger.debug(
            "document_totals_aggregated",
            rows=len(lines),
            subtotal=str(from_minor_units(subtotal_minor)),
            tax=str(from_minor_units(tax_minor)),
            total=str(from_minor_units(total_minor)),
            balance_due=str(balance),
        )

        return DocumentTotals(
            subtotal=from_minor_units(subtotal_minor),
            tax_amount=from_minor_units(tax_minor),
            total=from_minor_units(total_minor),
            paid_amount=paid,
            balance_due=balance,
            total_in_words=amount_to_words(
                from_minor_units(total_minor), self.words_config
            ),
            lines=lines,
        )

    def totals_for(self, document: BillingDocument) -> DocumentTotals:
        """Aggregate a stored document; invoices include their paid amount."""
        paid = document.paid_amount if isinstance(document, Invoice) else None
        return self.aggregate(document.items, paid_amount=paid)

    def stored_totals_mismatch(self, document: BillingDocument) -> list[str]:
        """Names of stored total fields that disagree with a recomputation."""
        totals = self.totals_for(document)
        mismatched = []
        for field_name in ("subtotal", "tax_amount", "total"):
            stored = getattr(document, field_name)
            if round_money(stored) != getattr(totals, field_name):
                mismatched.append(field_name)
        if mismatched:
            logger.warning(
                "stored_totals_mismatch",
                document_id=document.id,
                fields=mismatched,
            )
        return mismatched


_default_aggregator = FinancialAggregator()


def aggregate(
    items: Iterable[LineItem],
    paid_amount: Optional[Number] = None,
) -> DocumentTotals:
    """Aggregate rows with the default classifier and words settings."""
    return _default_aggregator.aggregate(items, paid_amount=paid_amount)
