"""Concurrent reconciliation of many projects (the dashboard view).

Each project's timesheets, quotes and invoices are fetched through a
``ProjectDataSource``. The three fetches for a project run together and
share one timeout; projects run concurrently up to a configured limit.
A project whose lookup fails or times out, or whose records cannot be
reconciled, gets zeroed metrics and a recorded failure; the rest of the
batch carries on.

Example Usage:
    ```python
    reconciler = ProjectReconciler(source, BillingConfig())
    result = await reconciler.reconcile(dashboard_projects(projects))
    print(result.total_unbilled_amount)
    ```
"""

from __future__ import annotations

import asyncio
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional, Protocol, Sequence, runtime_checkable

import structlog
from pydantic import BaseModel, Field, computed_field

from .classifier import LineItemClassifier
from .config import BillingConfig
from .exceptions import PartialComputationFailure
from .matcher import TimesheetBillingMatcher
from .models import Invoice, Project, ProjectHours, ProjectStatus, Quote, Timesheet
from .money import round_money
from .status import as_of

logger = structlog.get_logger()


@runtime_checkable
class ProjectDataSource(Protocol):
    """Where a project's related records come from.

    Any object with these three coroutines qualifies; no inheritance is
    needed.
    """

    async def fetch_timesheets(self, project_id: str) -> Sequence[Timesheet]:
        """Timesheets logged against the project."""
        ...

    async def fetch_quotes(self, project_id: str) -> Sequence[Quote]:
        """Quotes referencing the project."""
        ...

    async def fetch_invoices(self, project_id: str) -> Sequence[Invoice]:
        """Invoices referencing the project."""
        ...


class ReconciliationStatus(str, Enum):
    """Outcome of a batch reconciliation."""

    SUCCESS = "success"
    """Every project was reconciled."""

    PARTIAL = "partial"
    """At least one project failed and was zeroed."""


class ReconciliationResult(BaseModel):
    """Per-project hours plus dashboard totals for a batch.

    Totals are summed over every project, including zeroed ones, so a
    failed project contributes nothing rather than stale numbers.
    """

    status: ReconciliationStatus = Field(
        default=ReconciliationStatus.SUCCESS,
        description="SUCCESS, or PARTIAL when any project failed",
    )
    projects: list[ProjectHours] = Field(
        default_factory=list,
        description="Reconciled hours, in input order",
    )
    failures: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Details of each PartialComputationFailure",
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-fatal issues encountered during the batch",
    )

    @computed_field
    @property
    def total_billed_hours(self) -> Decimal:
        return sum((p.billed_hours for p in self.projects), Decimal("0"))

    @computed_field
    @property
    def total_billed_amount(self) -> Decimal:
        return round_money(sum((p.billed_amount for p in self.projects), Decimal("0")))

    @computed_field
    @property
    def total_unbilled_hours(self) -> Decimal:
        return sum((p.unbilled_hours for p in self.projects), Decimal("0"))

    @computed_field
    @property
    def total_unbilled_amount(self) -> Decimal:
        return round_money(sum((p.unbilled_amount for p in self.projects), Decimal("0")))

    @property
    def is_success(self) -> bool:
        """Check if every project was reconciled."""
        return self.status == ReconciliationStatus.SUCCESS

    def for_project(self, project_id: str) -> Optional[ProjectHours]:
        """Hours for one project, or None if it was not in the batch."""
        for hours in self.projects:
            if hours.project_id == project_id:
                return hours
        return None


def dashboard_projects(projects: Iterable[Project]) -> list[Project]:
    """Active projects flagged for the dashboard."""
    return [
        p for p in projects
        if p.status == ProjectStatus.ACTIVE and p.add_to_dashboard
    ]


class ProjectReconciler:
    """
    Reconcile a batch of projects against a data source.

    Args:
        source: Supplies each project's timesheets, quotes and invoices
        config: Timeout, concurrency and classifier settings
        matcher: Matcher override; built from ``config`` when omitted
    """

    def __init__(
        self,
        source: ProjectDataSource,
        config: Optional[BillingConfig] = None,
        matcher: Optional[TimesheetBillingMatcher] = None,
    ):
        self.source = source
        self.config = config or BillingConfig()
        self.matcher = matcher or TimesheetBillingMatcher(
            LineItemClassifier(config=self.config.classifier)
        )

    async def _fetch(self, project_id: str):
        results = await asyncio.gather(
            self.source.fetch_timesheets(project_id),
            self.source.fetch_quotes(project_id),
            self.source.fetch_invoices(project_id),
        )
        # A source may return None for "nothing found".
        return [list(records or []) for records in results]

    async def reconcile_project(
        self,
        project: Project,
        today: Optional[date] = None,
    ) -> ProjectHours:
        """
        Fetch and reconcile a single project.

        Raises:
            PartialComputationFailure: if a fetch fails, the project
                exceeds its timeout, or its records cannot be reconciled.
        """
        timeout = self.config.reconciliation.project_timeout
        try:
            timesheets, quotes, invoices = await asyncio.wait_for(
                self._fetch(project.id), timeout=timeout
            )
        except asyncio.TimeoutError as e:
            raise PartialComputationFailure(
                f"Lookup for project {project.id} timed out after {timeout}s",
                entity_id=project.id,
                cause="timeout",
            ) from e
        except Exception as e:
            raise PartialComputationFailure(
                f"Lookup for project {project.id} failed: {e}",
                entity_id=project.id,
                cause=f"{type(e).__name__}: {e}",
            ) from e

        try:
            return self.matcher.compute_unbilled(
                project, timesheets, quotes, invoices, today=today
            )
        except Exception as e:
            raise PartialComputationFailure(
                f"Reconciliation of project {project.id} failed: {e}",
                entity_id=project.id,
                cause=f"{type(e).__name__}: {e}",
            ) from e

    async def reconcile(
        self,
        projects: Iterable[Project],
        today: Optional[date] = None,
    ) -> ReconciliationResult:
        """
        Reconcile every project concurrently.

        Args:
            projects: Projects to reconcile (see ``dashboard_projects``)
            today: Reference date shared by the whole batch

        Returns:
            ReconciliationResult with one entry per project, in input order
        """
        projects = list(projects)
        today = as_of(today)
        semaphore = asyncio.Semaphore(self.config.reconciliation.max_concurrency)
        failures: list[PartialComputationFailure] = []

        async def run(project: Project) -> ProjectHours:
            async with semaphore:
                try:
                    return await self.reconcile_project(project, today=today)
                except PartialComputationFailure as e:
                    logger.warning(
                        "project_reconciliation_failed",
                        project_id=project.id,
                        error=e.message,
                        cause=e.cause,
                    )
                    failures.append(e)
                    return ProjectHours.zeroed(project.id, project.hourly_rate)

        hours = await asyncio.gather(*(run(p) for p in projects))

        result = ReconciliationResult(
            status=ReconciliationStatus.PARTIAL if failures else ReconciliationStatus.SUCCESS,
            projects=list(hours),
            failures=[dict(e.details, message=e.message) for e in failures],
            warnings=[e.message for e in failures],
        )
        logger.info(
            "projects_reconciled",
            projects=len(projects),
            failed=len(failures),
            total_unbilled_hours=str(result.total_unbilled_hours),
            total_unbilled_amount=str(result.total_unbilled_amount),
        )
        return result


def reconcile_projects(
    source: ProjectDataSource,
    projects: Iterable[Project],
    config: Optional[BillingConfig] = None,
    today: Optional[date] = None,
) -> ReconciliationResult:
    """Run a batch reconciliation from synchronous code."""
    return asyncio.run(ProjectReconciler(source, config).reconcile(projects, today=today))
