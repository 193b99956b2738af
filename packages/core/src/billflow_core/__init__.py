"""Billflow Core - Billing reconciliation and document lifecycle rules."""

__version__ = "0.1.0"

from .aggregator import FinancialAggregator, aggregate
from .classifier import LineItemClassifier, classify
from .config import BillingConfig, configure_logging
from .lifecycle import LifecycleValidator, TransitionDecision, validate_transition
from .matcher import TimesheetBillingMatcher, compute_unbilled, format_hours
from .models import DocumentTotals, Invoice, LineItem, Project, ProjectHours, Quote, Timesheet
from .reconciliation import ProjectReconciler, ReconciliationResult, dashboard_projects
from .status import effective_status
from .words import amount_to_words

__all__ = [
    "FinancialAggregator",
    "aggregate",
    "LineItemClassifier",
    "classify",
    "BillingConfig",
    "configure_logging",
    "LifecycleValidator",
    "TransitionDecision",
    "validate_transition",
    "TimesheetBillingMatcher",
    "compute_unbilled",
    "format_hours",
    "DocumentTotals",
    "Invoice",
    "LineItem",
    "Project",
    "ProjectHours",
    "Quote",
    "Timesheet",
    "ProjectReconciler",
    "ReconciliationResult",
    "dashboard_projects",
    "effective_status",
    "amount_to_words",
]
