"""WBS schedule - calendar-aware scheduling and cost rollup."""

from wbs_engines.wbs_schedule.models import (
    Resource,
    ScheduledTask,
    ScheduleMode,
    ScheduleRequest,
    ScheduleResult,
    WbsTask,
)
from wbs_engines.wbs_schedule.service import (
    WbsScheduleService,
    get_schedule_service,
    schedule,
    schedule_project,
    set_schedule_service,
)

__all__ = [
    "Resource",
    "ScheduledTask",
    "ScheduleMode",
    "ScheduleRequest",
    "ScheduleResult",
    "WbsTask",
    "WbsScheduleService",
    "get_schedule_service",
    "schedule",
    "schedule_project",
    "set_schedule_service",
]
