"""Tests for rows synthesized from logged hours."""

from datetime import date
from decimal import Decimal

import pytest

from billflow_core.aggregator import aggregate
from billflow_core.classifier import classify
from billflow_core.config import TimesheetItemsConfig
from billflow_core.models import LineItemType, Project, Timesheet
from billflow_core.timesheet_items import build_timesheet_items, has_timesheet_items


@pytest.fixture
def project() -> Project:
    """A project billed at 1500 per hour."""
    return Project(id="p-1", name="Migration", hourly_rate="1500")


@pytest.fixture
def timesheets() -> list[Timesheet]:
    """Two billable entries out of date order and one non-billable."""
    return [
        Timesheet(id="t-2", project_id="p-1", date=date(2025, 1, 16), hours="2.5"),
        Timesheet(id="t-1", project_id="p-1", date=date(2025, 1, 15), hours="4", description="Schema work"),
        Timesheet(id="t-3", project_id="p-1", date=date(2025, 1, 17), hours="1", billable=False),
    ]


class TestBuildTimesheetItems:
    """Tests for build_timesheet_items."""

    def test_header_then_rows(self, project, timesheets):
        """A header row precedes one row per billable timesheet, by date."""
        items = build_timesheet_items(project, timesheets)

        assert [item.type for item in items] == [
            LineItemType.HEADER,
            LineItemType.TIMESHEET,
            LineItemType.TIMESHEET,
        ]
        assert items[0].name == "Timesheet Hours"
        assert items[1].name == "Work on 15/01/2025"
        assert items[1].description == "Schema work"
        assert items[2].name == "Work on 16/01/2025"
        assert items[2].quantity == Decimal("2.5")
        assert items[2].rate == Decimal("1500")
        assert items[2].tax_rate == Decimal("0")
        assert has_timesheet_items(items)

    def test_no_billable_timesheets(self, project):
        """Nothing billable means no rows at all."""
        timesheet = Timesheet(id="t-1", project_id="p-1", date=date(2025, 1, 15), hours="3", billable=False)
        assert build_timesheet_items(project, [timesheet]) == []

    def test_rows_total(self, project, timesheets):
        """Only the timesheet rows carry money."""
        totals = aggregate(build_timesheet_items(project, timesheets))
        assert totals.total == Decimal("9750.00")

    def test_untagged_copies_still_recognised(self, project, timesheets):
        """Rows that lose their tag are recognised by name."""
        items = build_timesheet_items(project, timesheets)
        untagged = [item.model_copy(update={"type": None}) for item in items[1:]]
        assert all(classify(item) == LineItemType.TIMESHEET for item in untagged)

    def test_configured_header_and_date_format(self, project, timesheets):
        """Header name and date format come from config."""
        config = TimesheetItemsConfig(header_name="Hours", date_format="%Y-%m-%d")
        items = build_timesheet_items(project, timesheets, config)
        assert items[0].name == "Hours"
        assert items[1].name == "Work on 2025-01-15"
