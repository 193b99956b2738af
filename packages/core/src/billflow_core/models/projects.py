"""Project and timesheet records."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from billflow_core.models.documents import coerce_decimal


class ProjectStatus(str, Enum):
    """Project lifecycle statuses."""

    ACTIVE = "ACTIVE"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Project(BaseModel):
    """A client project that owns timesheets and is billed by the hour."""

    id: str
    name: Optional[str] = None
    hourly_rate: Decimal = Field(default=Decimal("0"), ge=Decimal("0"))
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    add_to_dashboard: bool = Field(
        default=False,
        description="Whether the project is shown on the dashboard",
    )

    @field_validator("hourly_rate", mode="before")
    @classmethod
    def coerce_rate(cls, v):
        """Coerce rate to Decimal; a missing rate bills at zero."""
        if v is None:
            return Decimal("0")
        return coerce_decimal(v)

    @property
    def has_date_bounds(self) -> bool:
        """True when both start and end dates are set."""
        return self.start_date is not None and self.end_date is not None


class Timesheet(BaseModel):
    """Hours logged against a project on a single day."""

    id: str
    project_id: str
    date: date
    hours: Decimal = Field(gt=Decimal("0"))
    billable: bool = True
    description: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None

    @field_validator("hours", mode="before")
    @classmethod
    def coerce_hours(cls, v):
        """Coerce hours to Decimal."""
        return coerce_decimal(v)
