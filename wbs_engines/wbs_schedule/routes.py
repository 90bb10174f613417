"""
FastAPI routes for stateless WBS scheduling.

POST /wbs/schedule
- Input: project_start date and an ordered task forest
- Output: ScheduleResult with start/work_start/end and cost rollup per task
"""

from fastapi import APIRouter, Body, Depends

from wbs_engines.wbs_schedule.models import ScheduleRequest, ScheduleResult
from wbs_engines.wbs_schedule.service import WbsScheduleService, get_schedule_service

router = APIRouter(prefix="/wbs", tags=["wbs"])


def get_service() -> WbsScheduleService:
    return get_schedule_service()


@router.post("/schedule", response_model=ScheduleResult)
def schedule_tasks(
    request: ScheduleRequest = Body(
        ...,
        description="Project start date and task forest to schedule",
    ),
    service: WbsScheduleService = Depends(get_service),
) -> ScheduleResult:
    """
    Schedule a task forest without storing it.

    Tasks are placed on the Monday-Friday 07:00 calendar from the project
    start; malformed numeric fields are treated as zero.
    """
    return service.run(request)
