"""Result models produced by the engine.

Every result is a flat, serializable pydantic model so that renderers,
HTTP handlers and dashboards all read exactly the same numbers.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, computed_field

from billflow_core.models.documents import LineItemType


class LineAmount(BaseModel):
    """Per-row amounts as shown on the document."""

    index: int = Field(ge=0, description="Position of the row in the document")
    kind: LineItemType = Field(description="Classified row kind")
    amount: Decimal = Field(description="quantity * rate, rounded half-up to 2dp")
    tax: Decimal = Field(description="Row tax, rounded half-up to 2dp")

    @computed_field
    @property
    def total(self) -> Decimal:
        """Row amount including tax."""
        return self.amount + self.tax


class DocumentTotals(BaseModel):
    """Financial aggregate of a quote or invoice.

    ``balance_due`` is ``total - paid_amount``, a missing paid amount
    counting as zero. It is never clamped: a negative balance is an overpayment and is
    exposed through ``credit``.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "subtotal": "200.00",
                    "tax_amount": "20.00",
                    "total": "220.00",
                    "paid_amount": "100.00",
                    "balance_due": "120.00",
                    "total_in_words": "Two Hundred Twenty",
                    "lines": [],
                }
            ]
        }
    }

    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    paid_amount: Decimal = Decimal("0.00")
    balance_due: Decimal
    total_in_words: str
    lines: list[LineAmount] = Field(default_factory=list)

    @computed_field
    @property
    def credit(self) -> Decimal:
        """Overpaid amount as a positive figure; zero when not overpaid."""
        if self.balance_due >= 0:
            return Decimal("0.00")
        return -self.balance_due

    @computed_field
    @property
    def is_settled(self) -> bool:
        """True when something was owed and nothing remains due."""
        return self.total > 0 and self.balance_due <= 0


class ProjectHours(BaseModel):
    """Hours and amounts reconciled for one project."""

    project_id: str
    hourly_rate: Decimal = Decimal("0")
    logged_hours: Decimal = Decimal("0")
    billable_hours: Decimal = Decimal("0")
    billed_hours: Decimal = Decimal("0")
    unbilled_hours: Decimal = Field(default=Decimal("0"), ge=Decimal("0"))
    billed_amount: Decimal = Decimal("0.00")
    unbilled_amount: Decimal = Decimal("0.00")
    progress: Decimal = Field(
        default=Decimal("0"),
        ge=Decimal("0"),
        le=Decimal("100"),
        description="Completion percentage (0-100)",
    )
    failed: bool = Field(
        default=False,
        description="True when the metrics were zeroed after a lookup failure",
    )

    @computed_field
    @property
    def is_fully_billed(self) -> bool:
        """True when no billable hours are left to bill."""
        return self.unbilled_hours == 0

    @classmethod
    def zeroed(cls, project_id: str, hourly_rate: Decimal = Decimal("0")) -> "ProjectHours":
        """Metrics substituted for a project whose lookup failed."""
        return cls(project_id=project_id, hourly_rate=hourly_rate, failed=True)
