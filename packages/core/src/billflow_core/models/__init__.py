"""Data models for billflow-core.

This package provides the plain records the engine consumes and the
results it produces:
- Quotes, invoices and line items (documents.py)
- Projects and timesheets (projects.py)
- Totals and reconciled project hours (results.py)
- Activity records for the audit log (activity.py)
"""

from billflow_core.models.documents import (
    # Enumerations
    LineItemType,
    DocumentKind,
    QuoteStatus,
    InvoiceStatus,
    DisplayStatus,
    # Records
    LineItem,
    BillingDocument,
    Quote,
    Invoice,
    Document,
)
from billflow_core.models.projects import (
    ProjectStatus,
    Project,
    Timesheet,
)
from billflow_core.models.results import (
    LineAmount,
    DocumentTotals,
    ProjectHours,
)
from billflow_core.models.activity import ActivityRecord

__all__ = [
    # Enumerations
    "LineItemType",
    "DocumentKind",
    "QuoteStatus",
    "InvoiceStatus",
    "DisplayStatus",
    "ProjectStatus",
    # Records
    "LineItem",
    "BillingDocument",
    "Quote",
    "Invoice",
    "Document",
    "Project",
    "Timesheet",
    # Results
    "LineAmount",
    "DocumentTotals",
    "ProjectHours",
    # Audit
    "ActivityRecord",
]
