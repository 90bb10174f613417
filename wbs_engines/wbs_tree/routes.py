"""
FastAPI routes for WBS projects.

Projects, task tree edits, resource pool and assignments. Every edit is
applied copy-on-write; schedule and gantt reads recompute from the stored
tree.
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response

from wbs_engines.common.error_envelope import wbs_errors
from wbs_engines.common.identity import RequestContext, get_request_context
from wbs_engines.gantt_view.models import GanttChart
from wbs_engines.wbs_schedule.models import Resource, ScheduleResult, WbsTask
from wbs_engines.wbs_tree.models import (
    ProjectCreate,
    ProjectUpdate,
    ResourceAssign,
    ResourceCreate,
    TaskCreate,
    TaskFieldUpdate,
    TaskMove,
    WbsProject,
)
from wbs_engines.wbs_tree.service import WbsProjectService, get_project_service

router = APIRouter(prefix="/wbs/projects", tags=["wbs"])


def get_service() -> WbsProjectService:
    return get_project_service()


@router.post("", response_model=WbsProject, status_code=201)
def create_project(
    request: Optional[ProjectCreate] = Body(default=None),
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> WbsProject:
    with wbs_errors():
        return service.create_project(context, request or ProjectCreate())


@router.get("", response_model=List[WbsProject])
def list_projects(
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> List[WbsProject]:
    return service.list_projects(context)


@router.get("/{project_id}", response_model=WbsProject)
def get_project(
    project_id: str,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> WbsProject:
    with wbs_errors():
        return service.get_project(context, project_id)


@router.patch("/{project_id}", response_model=WbsProject)
def update_project(
    project_id: str,
    request: ProjectUpdate,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> WbsProject:
    with wbs_errors():
        return service.update_project(context, project_id, request)


@router.delete("/{project_id}", status_code=204)
def delete_project(
    project_id: str,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> Response:
    with wbs_errors():
        service.delete_project(context, project_id)
    return Response(status_code=204)


@router.post("/{project_id}/tasks", response_model=WbsTask, status_code=201)
def add_root_task(
    project_id: str,
    request: Optional[TaskCreate] = Body(default=None),
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> WbsTask:
    with wbs_errors():
        return service.add_root_task(context, project_id, request)


@router.post("/{project_id}/tasks/{task_id}/children", response_model=WbsTask, status_code=201)
def add_child_task(
    project_id: str,
    task_id: str,
    request: Optional[TaskCreate] = Body(default=None),
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> WbsTask:
    with wbs_errors():
        return service.add_child_task(context, project_id, task_id, request)


@router.delete("/{project_id}/tasks/{task_id}", response_model=WbsProject)
def remove_task(
    project_id: str,
    task_id: str,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> WbsProject:
    with wbs_errors():
        return service.remove_task(context, project_id, task_id)


@router.patch("/{project_id}/tasks/{task_id}", response_model=WbsTask)
def update_task(
    project_id: str,
    task_id: str,
    request: TaskFieldUpdate,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> WbsTask:
    with wbs_errors():
        return service.update_task(context, project_id, task_id, request.field, request.value)


@router.post("/{project_id}/tasks/{task_id}/move", response_model=WbsProject)
def move_task(
    project_id: str,
    task_id: str,
    request: TaskMove,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> WbsProject:
    with wbs_errors():
        return service.move_task(context, project_id, task_id, request.before_id)


@router.post("/{project_id}/resources", response_model=Resource, status_code=201)
def add_pool_resource(
    project_id: str,
    request: ResourceCreate,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> Resource:
    resource = Resource(name=request.name, bill_rate=request.bill_rate, cost_rate=request.cost_rate)
    with wbs_errors():
        return service.add_pool_resource(context, project_id, resource)


@router.delete("/{project_id}/resources/{resource_id}", response_model=WbsProject)
def remove_pool_resource(
    project_id: str,
    resource_id: str,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> WbsProject:
    with wbs_errors():
        return service.remove_pool_resource(context, project_id, resource_id)


@router.get("/{project_id}/tasks/{task_id}/available-resources", response_model=List[Resource])
def available_resources(
    project_id: str,
    task_id: str,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> List[Resource]:
    with wbs_errors():
        return service.available_resources(context, project_id, task_id)


@router.post("/{project_id}/tasks/{task_id}/resources", response_model=WbsTask, status_code=201)
def assign_resource(
    project_id: str,
    task_id: str,
    request: ResourceAssign,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> WbsTask:
    with wbs_errors():
        return service.assign_resource(context, project_id, task_id, request.resource_id)


@router.delete("/{project_id}/tasks/{task_id}/resources/{assignment_id}", response_model=WbsTask)
def unassign_resource(
    project_id: str,
    task_id: str,
    assignment_id: str,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> WbsTask:
    with wbs_errors():
        return service.unassign_resource(context, project_id, task_id, assignment_id)


@router.get("/{project_id}/schedule", response_model=ScheduleResult)
def get_schedule(
    project_id: str,
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> ScheduleResult:
    with wbs_errors():
        return service.get_schedule(context, project_id)


@router.get("/{project_id}/gantt", response_model=GanttChart)
def get_gantt(
    project_id: str,
    include_collapsed: bool = Query(default=False),
    context: RequestContext = Depends(get_request_context),
    service: WbsProjectService = Depends(get_service),
) -> GanttChart:
    with wbs_errors():
        return service.get_gantt(context, project_id, include_collapsed)
