"""Reconcile logged timesheet hours against billed document rows.

Billable hours are whatever was logged as billable. Billed hours are the
quantities of TIMESHEET rows found on the project's invoices (any
status) and on quotes that have not been converted to an invoice. A
converted quote's rows are skipped because the resulting invoice already
carries them; a pending quote's rows count as provisionally billed so
the same hours are not offered again.

Recompute-on-read: every call rescans all related documents.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Iterator, NamedTuple, Optional

import structlog

from .classifier import LineItemClassifier
from .models import Invoice, Project, ProjectHours, Quote, Timesheet
from .money import multiply_money, to_decimal
from .status import as_of, is_converted

logger = structlog.get_logger()

HUNDRED = Decimal("100")
ZERO = Decimal("0")


class BilledRow(NamedTuple):
    """A document row recognised as billed hours."""
    document_id: str
    index: int
    hours: Decimal


def _clamp_percent(value: Decimal) -> Decimal:
    value = max(ZERO, min(HUNDRED, value))
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def project_progress(
    project: Project,
    billable_hours: Decimal,
    billed_hours: Decimal,
    today: Optional[date] = None,
) -> Decimal:
    """
    Completion percentage of a project, 0-100.

    With both start and end dates the elapsed share of the date range is
    used; hours only decide when the dates are missing.

    Args:
        project: The project (dates are read, nothing is modified)
        billable_hours: Hours logged as billable
        billed_hours: Hours already on documents
        today: Reference date; defaults to ``date.today()``

    Returns:
        Percentage rounded half-up to two places
    """
    if project.has_date_bounds:
        today = as_of(today)
        start, end = project.start_date, project.end_date
        if today > end:
            return _clamp_percent(HUNDRED)
        if today < start:
            return _clamp_percent(ZERO)
        total_days = (end - start).days
        if total_days <= 0:
            return _clamp_percent(HUNDRED)
        elapsed = (today - start).days
        return _clamp_percent(Decimal(elapsed) * HUNDRED / Decimal(total_days))

    if billable_hours > 0:
        return _clamp_percent(billed_hours * HUNDRED / billable_hours)
    return _clamp_percent(ZERO)


class TimesheetBillingMatcher:
    """
    Compute billable, billed and unbilled hours for a project.

    The matcher is pure; fetching the inputs is the caller's job (see
    ``reconciliation.ProjectReconciler`` for the concurrent batch form).
    """

    def __init__(self, classifier: Optional[LineItemClassifier] = None):
        self.classifier = classifier or LineItemClassifier()

    def billed_rows(
        self,
        related_quotes: Iterable[Quote],
        related_invoices: Iterable[Invoice],
    ) -> Iterator[BilledRow]:
        """Yield every TIMESHEET row that counts as billed."""
        for invoice in related_invoices:
            yield from self._timesheet_rows(invoice)
        for quote in related_quotes:
            if is_converted(quote):
                continue
            yield from self._timesheet_rows(quote)

    def _timesheet_rows(self, document) -> Iterator[BilledRow]:
        for index, item in enumerate(document.items):
            if self.classifier.is_timesheet(item):
                yield BilledRow(document.id, index, to_decimal(item.quantity))

    def compute_unbilled(
        self,
        project: Project,
        timesheets: Iterable[Timesheet],
        related_quotes: Iterable[Quote],
        related_invoices: Iterable[Invoice],
        today: Optional[date] = None,
    ) -> ProjectHours:
        """
        Reconcile one project's hours.

        Args:
            project: The project being reconciled
            timesheets: All timesheets logged against the project
            related_quotes: Quotes referencing the project
            related_invoices: Invoices referencing the project
            today: Reference date for the progress figure

        Returns:
            ProjectHours; ``unbilled_hours`` is never negative
        """
        timesheets = list(timesheets)
        logged_hours = sum((t.hours for t in timesheets), ZERO)
        billable_hours = sum((t.hours for t in timesheets if t.billable), ZERO)
        billed_hours = sum(
            (row.hours for row in self.billed_rows(related_quotes, related_invoices)),
            ZERO,
        )

        unbilled_hours = max(ZERO, billable_hours - billed_hours)
        if billed_hours > billable_hours:
            logger.warning(
                "billed_hours_exceed_billable",
                project_id=project.id,
                billable_hours=str(billable_hours),
                billed_hours=str(billed_hours),
            )

        result = ProjectHours(
            project_id=project.id,
            hourly_rate=project.hourly_rate,
            logged_hours=logged_hours,
            billable_hours=billable_hours,
            billed_hours=billed_hours,
            unbilled_hours=unbilled_hours,
            billed_amount=multiply_money(billed_hours, project.hourly_rate),
            unbilled_amount=multiply_money(unbilled_hours, project.hourly_rate),
            progress=project_progress(project, billable_hours, billed_hours, today),
        )

        logger.debug(
            "project_hours_reconciled",
            project_id=project.id,
            billable_hours=str(billable_hours),
            billed_hours=str(billed_hours),
            unbilled_hours=str(unbilled_hours),
            unbilled_amount=str(result.unbilled_amount),
        )
        return result


def format_hours(hours) -> str:
    """Render hours as HH:MM, e.g. Decimal("7.5") -> "07:30"."""
    minutes = int((to_decimal(hours) * 60).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if minutes < 0 else ""
    h, m = divmod(abs(minutes), 60)
    return f"{sign}{h:02d}:{m:02d}"


_default_matcher = TimesheetBillingMatcher()


def compute_unbilled(
    project: Project,
    timesheets: Iterable[Timesheet],
    related_quotes: Iterable[Quote],
    related_invoices: Iterable[Invoice],
    today: Optional[date] = None,
) -> ProjectHours:
    """Reconcile one project's hours with the default classifier."""
    return _default_matcher.compute_unbilled(
        project, timesheets, related_quotes, related_invoices, today=today
    )
