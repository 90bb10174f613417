"""
Gantt View Models.

Row, bar and header structures a chart renderer consumes. Built only from
scheduled output; nothing here feeds back into scheduling.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from wbs_engines.wbs_schedule.models import ScheduleMode


class ChartWindow(BaseModel):
    start: datetime
    end: datetime

    @property
    def total_seconds(self) -> float:
        return (self.end - self.start).total_seconds()


class GanttBar(BaseModel):
    """
    Bar geometry as percentages of the chart window.

    The lead segment spans start..work_start (waiting), the work segment
    work_start..end.
    """
    lead_offset_pct: float = 0.0
    lead_width_pct: float = 0.0
    work_offset_pct: float = 0.0
    work_width_pct: float = 0.0


class GanttRow(BaseModel):
    id: str
    name: str
    level: int
    has_children: bool = False
    is_expanded: bool = True
    schedule_mode: ScheduleMode = ScheduleMode.SEQUENTIAL

    start: datetime
    work_start: datetime
    end: datetime

    rate: float = 0.0
    total_cost: float = 0.0
    profit: float = 0.0
    margin: float = 0.0

    bar: Optional[GanttBar] = None


class DayCell(BaseModel):
    day: date
    is_weekend: bool = False


class MonthBucket(BaseModel):
    """Header group, e.g. "July 2025", with the window days falling in it."""
    name: str
    days: List[DayCell] = Field(default_factory=list)
    width_pct: float = 0.0


class GanttChart(BaseModel):
    window: ChartWindow
    months: List[MonthBucket] = Field(default_factory=list)
    rows: List[GanttRow] = Field(default_factory=list)

    project_end: Optional[datetime] = None
    total_cost: float = 0.0
    total_profit: float = 0.0
    margin: float = 0.0
