"""Activity records for the external audit log.

The engine never writes these itself; it builds the record after a
transition is validated and hands it to whatever log the caller uses.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from billflow_core.models.documents import DocumentKind


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


class ActivityRecord(BaseModel):
    """Auditable record of a document status change.

    Attributes:
        actor_id: User who requested the transition
        action: Machine-readable action name (e.g. "QUOTE_STATUS_CHANGED")
        document_id: Quote or invoice identifier
        document_kind: Whether the document is a quote or an invoice
        from_status: Stored status before the transition
        to_status: Stored status after the transition
        timestamp: When the record was created (UTC)
        notes: Additional context
    """

    actor_id: Optional[str] = None
    action: str
    document_id: str
    document_kind: DocumentKind
    from_status: str
    to_status: str
    timestamp: datetime = Field(default_factory=_utc_now)
    notes: Optional[str] = None

    def model_post_init(self, __context) -> None:
        """Ensure timestamp is timezone-aware."""
        if self.timestamp.tzinfo is None:
            object.__setattr__(
                self,
                'timestamp',
                self.timestamp.replace(tzinfo=timezone.utc)
            )

    def describe(self) -> str:
        """Human-readable one-line description.

        Example: "quote q-17: DRAFT -> SENT"
        """
        return (
            f"{self.document_kind.value} {self.document_id}: "
            f"{self.from_status} -> {self.to_status}"
        )
