"""
WBS Schedule Models - Task tree and scheduled-output schemas.

Defines:
- Resource: Person/equipment assigned to a task with bill and cost rates
- WbsTask: Node of the work-breakdown tree (input to scheduling)
- ScheduledTask: WbsTask annotated with start/work_start/end and cost rollup
- ScheduleRequest / ScheduleResult: Whole-project scheduling call
"""

from __future__ import annotations

import math
import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Span of the datetime range; anything longer cannot be placed on the calendar.
MAX_DAY_COUNT = (datetime.max - datetime.min).days
MAX_HOURS = float(MAX_DAY_COUNT * 24)


def coerce_number(value: Any) -> float:
    """Non-numeric, missing, NaN, infinite and negative values all become 0."""
    if isinstance(value, bool):
        value = int(value)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def coerce_whole(value: Any) -> int:
    """Like coerce_number, truncated to a whole count."""
    return int(coerce_number(value))


def coerce_day_count(value: Any) -> int:
    """Whole days, capped at MAX_DAY_COUNT."""
    return min(coerce_whole(value), MAX_DAY_COUNT)


def coerce_hours(value: Any) -> float:
    return min(coerce_number(value), MAX_HOURS)


def new_id() -> str:
    return uuid.uuid4().hex


class ScheduleMode(str, Enum):
    """Relationship of a task to the sibling directly above it."""
    SEQUENTIAL = "sequential"  # After the previous sequential sibling ends
    CONCURRENT = "concurrent"  # Alongside the previous sibling's start


class Resource(BaseModel):
    """Resource assigned to a task, or held in a project's pool."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    bill_rate: float = Field(default=0.0, validation_alias=AliasChoices("bill_rate", "billRate", "rate"))
    cost_rate: float = Field(default=0.0, validation_alias=AliasChoices("cost_rate", "costRate", "cost"))

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("bill_rate", "cost_rate", mode="before")
    @classmethod
    def _coerce_rates(cls, value: Any) -> float:
        return coerce_number(value)


class WbsTask(BaseModel):
    """Single node of the work-breakdown structure."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str = ""

    # Scheduling
    duration_days: int = Field(default=0, validation_alias=AliasChoices("duration_days", "durationDays"))
    duration_hours: float = Field(default=0.0, validation_alias=AliasChoices("duration_hours", "durationHours"))
    lead_time_days: int = Field(default=0, validation_alias=AliasChoices("lead_time_days", "leadTimeDays"))
    is_247: bool = Field(default=False, validation_alias=AliasChoices("is_247", "is247"))
    schedule_mode: ScheduleMode = Field(
        default=ScheduleMode.SEQUENTIAL,
        validation_alias=AliasChoices("schedule_mode", "scheduleMode"),
    )

    # Billing
    rate: float = 0.0

    # Tree
    children: List[WbsTask] = Field(default_factory=list)
    resources: List[Resource] = Field(default_factory=list)

    # Presentation only
    is_expanded: bool = Field(default=True, validation_alias=AliasChoices("is_expanded", "isExpanded"))

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("duration_days", "lead_time_days", mode="before")
    @classmethod
    def _coerce_counts(cls, value: Any) -> int:
        return coerce_day_count(value)

    @field_validator("duration_hours", mode="before")
    @classmethod
    def _coerce_hours(cls, value: Any) -> float:
        return coerce_hours(value)

    @field_validator("rate", mode="before")
    @classmethod
    def _coerce_rate(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("schedule_mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> ScheduleMode:
        if isinstance(value, ScheduleMode):
            return value
        try:
            return ScheduleMode(str(value).lower())
        except ValueError:
            return ScheduleMode.SEQUENTIAL

    @field_validator("children", "resources", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_leaf(self) -> bool:
        return not self.children


class ScheduledTask(WbsTask):
    """WbsTask with computed schedule and financial fields."""
    start: datetime
    work_start: datetime
    end: datetime

    total_cost: float = 0.0
    profit: float = 0.0
    margin: float = 0.0
    resource_billing: float = 0.0

    children: List[ScheduledTask] = Field(default_factory=list)


class ScheduleRequest(BaseModel):
    """Request to schedule a task forest from a project start date."""
    project_start: date = Field(validation_alias=AliasChoices("project_start", "projectStart"))
    tasks: List[WbsTask] = Field(default_factory=list)


class ScheduleResult(BaseModel):
    """Scheduled forest with project-level summary."""
    model_config = ConfigDict(frozen=True)

    project_start: datetime
    project_end: Optional[datetime] = None
    tasks: List[ScheduledTask] = Field(default_factory=list)

    task_count: int = 0
    total_cost: float = 0.0
    total_rate: float = 0.0
    total_profit: float = 0.0
    margin: float = 0.0


WbsTask.model_rebuild()
ScheduledTask.model_rebuild()
