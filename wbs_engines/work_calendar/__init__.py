"""Work calendar - workweek arithmetic for scheduling."""

from wbs_engines.work_calendar.service import (
    WORKDAY_START,
    advance_working_days,
    at_workday_start,
    continues_same_workday,
    is_workday,
    project_anchor,
    snap_to_next_workday,
)

__all__ = [
    "WORKDAY_START",
    "advance_working_days",
    "at_workday_start",
    "continues_same_workday",
    "is_workday",
    "project_anchor",
    "snap_to_next_workday",
]
