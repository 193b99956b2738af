"""Document rows synthesized from a project's logged hours.

When a quote or invoice is created for a project, billable timesheets
are appended as a HEADER row followed by one TIMESHEET row per entry,
named "Work on <date>". The name is what the classifier's fallback
recognises on rows that lost their type tag.
"""

from decimal import Decimal
from typing import Iterable, Optional

import structlog

from .config import TimesheetItemsConfig
from .models import LineItem, LineItemType, Project, Timesheet
from .money import round_money

logger = structlog.get_logger()


def timesheet_row_name(timesheet: Timesheet, date_format: str = "%d/%m/%Y") -> str:
    """Row name for a timesheet, e.g. "Work on 15/01/2025"."""
    return f"Work on {timesheet.date.strftime(date_format)}"


def build_timesheet_items(
    project: Project,
    timesheets: Iterable[Timesheet],
    config: Optional[TimesheetItemsConfig] = None,
) -> list[LineItem]:
    """
    Build the rows billing a project's billable timesheets.

    Args:
        project: Supplies the hourly rate
        timesheets: Candidate timesheets; non-billable ones are skipped
        config: Header name and date format

    Returns:
        A HEADER row followed by one TIMESHEET row per billable entry in
        date order, or an empty list if nothing is billable
    """
    config = config or TimesheetItemsConfig()
    billable = sorted((t for t in timesheets if t.billable), key=lambda t: t.date)
    if not billable:
        return []

    rate = project.hourly_rate
    items = [
        LineItem(
            type=LineItemType.HEADER,
            name=config.header_name,
            quantity=Decimal("0"),
            rate=Decimal("0"),
        )
    ]
    for timesheet in billable:
        items.append(LineItem(
            type=LineItemType.TIMESHEET,
            name=timesheet_row_name(timesheet, config.date_format),
            description=timesheet.description or f"{timesheet.hours} hours @ {round_money(rate)}/hr",
            quantity=timesheet.hours,
            rate=rate,
            tax_rate=Decimal("0"),
        ))

    logger.debug(
        "timesheet_items_built",
        project_id=project.id,
        rows=len(billable),
    )
    return items


def has_timesheet_items(items: Iterable[LineItem]) -> bool:
    """True if any row is tagged TIMESHEET (rows are then not synthesized again)."""
    return any(item.type == LineItemType.TIMESHEET for item in items)
