"""
WBS Project Service - Project store, tree edits and rescheduling.

Manages projects with tenant isolation. Every edit builds a new task forest
(see mutations.py) and replaces the stored project; schedules and charts are
recomputed in full from the stored forest on every read.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Tuple

from wbs_engines.common.errors import InvalidMutation, ProjectNotFound, WbsError
from wbs_engines.common.identity import RequestContext
from wbs_engines.config import runtime_config
from wbs_engines.gantt_view.models import GanttChart
from wbs_engines.gantt_view.service import build_gantt_chart
from wbs_engines.logging.audit import emit_audit_event
from wbs_engines.resource_pool import service as pool
from wbs_engines.resource_pool.catalog import default_pool
from wbs_engines.wbs_schedule.models import Resource, ScheduleResult, WbsTask
from wbs_engines.wbs_schedule.service import schedule_project
from wbs_engines.wbs_tree import mutations
from wbs_engines.wbs_tree.models import (
    ProjectCreate,
    ProjectUpdate,
    TaskCreate,
    WbsProject,
)
from wbs_engines.wbs_tree.repository import InMemoryWbsProjectRepository, WbsProjectRepository

logger = logging.getLogger(__name__)

TreeEdit = Callable[[WbsProject], Tuple[WbsProject, Optional[str]]]


def _build_task(default_name: str, request: Optional[TaskCreate]) -> WbsTask:
    fields = request.provided_fields() if request else {}
    name = fields.pop("name", default_name)
    return mutations.new_task(name, **fields)


class WbsProjectService:
    """
    Service for editing WBS projects.
    Currently in-memory storage.
    """

    def __init__(self, repo: Optional[WbsProjectRepository] = None):
        self.repo = repo or InMemoryWbsProjectRepository()
        # Serialises read-modify-replace so concurrent edits are not lost
        self._write_lock = threading.RLock()

    # -- projects ---------------------------------------------------------

    def create_project(self, ctx: RequestContext, request: ProjectCreate) -> WbsProject:
        tenant_id, env = ctx.scope()
        tasks: List[WbsTask] = []
        for task in request.tasks:
            tasks = mutations.add_root(tasks, task)
        resource_pool = default_pool() if request.resource_pool is None else list(request.resource_pool)

        project = WbsProject(
            tenant_id=tenant_id,
            env=env,
            title=request.title,
            subtitle=request.subtitle,
            start_date=request.start_date or runtime_config.get_default_project_start(),
            tasks=tasks,
            resource_pool=resource_pool,
        )
        self.repo.create(project)
        emit_audit_event(ctx, "wbs_project.create", project_id=project.id)
        logger.info("Created project %s for %s/%s", project.id, tenant_id, env)
        return project

    def get_project(self, ctx: RequestContext, project_id: str) -> WbsProject:
        tenant_id, env = ctx.scope()
        project = self.repo.get(tenant_id, env, project_id)
        if project is None:
            raise ProjectNotFound(project_id)
        return project

    def list_projects(self, ctx: RequestContext) -> List[WbsProject]:
        tenant_id, env = ctx.scope()
        projects = self.repo.list(tenant_id, env)
        projects.sort(key=lambda p: p.created_at)
        return projects

    def update_project(self, ctx: RequestContext, project_id: str, request: ProjectUpdate) -> WbsProject:
        changes = request.model_dump(exclude_none=True)

        def edit(project: WbsProject) -> Tuple[WbsProject, Optional[str]]:
            return project.model_copy(update=changes), None

        return self._apply(ctx, project_id, "wbs_project.update", edit, {"fields": sorted(changes)})

    def delete_project(self, ctx: RequestContext, project_id: str) -> None:
        tenant_id, env = ctx.scope()
        with self._write_lock:
            if not self.repo.delete(tenant_id, env, project_id):
                raise ProjectNotFound(project_id)
        emit_audit_event(ctx, "wbs_project.delete", project_id=project_id)

    # -- tree edits ---------------------------------------------------------

    def _apply(
        self,
        ctx: RequestContext,
        project_id: str,
        action: str,
        edit: TreeEdit,
        metadata: Optional[dict] = None,
    ) -> WbsProject:
        with self._write_lock:
            current = self.get_project(ctx, project_id)
            try:
                edited, task_id = edit(current)
            except WbsError as exc:
                logger.warning("Rejected %s on project %s: %s", action, project_id, exc)
                raise
            updated = edited.model_copy(
                update={
                    "revision": current.revision + 1,
                    "updated_at": datetime.now(timezone.utc),
                }
            )
            self.repo.replace(updated)
        emit_audit_event(ctx, action, project_id=project_id, task_id=task_id, metadata=metadata)
        return updated

    def _with_tasks(self, project: WbsProject, tasks: List[WbsTask]) -> WbsProject:
        return project.model_copy(update={"tasks": tasks})

    def add_root_task(self, ctx: RequestContext, project_id: str, request: Optional[TaskCreate] = None) -> WbsTask:
        task = _build_task("New Task", request)

        def edit(project: WbsProject) -> Tuple[WbsProject, Optional[str]]:
            return self._with_tasks(project, mutations.add_root(project.tasks, task)), task.id

        self._apply(ctx, project_id, "wbs_task.add_root", edit)
        return task

    def add_child_task(
        self,
        ctx: RequestContext,
        project_id: str,
        parent_id: str,
        request: Optional[TaskCreate] = None,
    ) -> WbsTask:
        task = _build_task("New Sub-task", request)

        def edit(project: WbsProject) -> Tuple[WbsProject, Optional[str]]:
            return self._with_tasks(project, mutations.add_child(project.tasks, parent_id, task)), task.id

        self._apply(ctx, project_id, "wbs_task.add_child", edit, {"parent_id": parent_id})
        return task

    def remove_task(self, ctx: RequestContext, project_id: str, task_id: str) -> WbsProject:
        def edit(project: WbsProject) -> Tuple[WbsProject, Optional[str]]:
            return self._with_tasks(project, mutations.remove(project.tasks, task_id)), task_id

        return self._apply(ctx, project_id, "wbs_task.remove", edit)

    def update_task(
        self,
        ctx: RequestContext,
        project_id: str,
        task_id: str,
        field: str,
        value: Any,
    ) -> WbsTask:
        def edit(project: WbsProject) -> Tuple[WbsProject, Optional[str]]:
            return self._with_tasks(project, mutations.update(project.tasks, task_id, field, value)), task_id

        project = self._apply(ctx, project_id, "wbs_task.update", edit, {"field": field})
        return mutations.find_task(project.tasks, task_id)

    def move_task(
        self,
        ctx: RequestContext,
        project_id: str,
        task_id: str,
        before_id: Optional[str],
    ) -> WbsProject:
        def edit(project: WbsProject) -> Tuple[WbsProject, Optional[str]]:
            return self._with_tasks(project, mutations.move(project.tasks, task_id, before_id)), task_id

        return self._apply(ctx, project_id, "wbs_task.move", edit, {"before_id": before_id})

    # -- resources ----------------------------------------------------------

    def add_pool_resource(self, ctx: RequestContext, project_id: str, resource: Resource) -> Resource:
        added: List[Resource] = []

        def edit(project: WbsProject) -> Tuple[WbsProject, Optional[str]]:
            updated_pool = pool.add_to_pool(project.resource_pool, resource)
            added.append(updated_pool[-1])
            return project.model_copy(update={"resource_pool": updated_pool}), None

        self._apply(ctx, project_id, "resource_pool.add", edit, {"name": resource.name})
        return added[0]

    def remove_pool_resource(self, ctx: RequestContext, project_id: str, resource_id: str) -> WbsProject:
        """Drop a pool entry; copies already assigned to tasks are untouched."""

        def edit(project: WbsProject) -> Tuple[WbsProject, Optional[str]]:
            updated_pool = pool.remove_from_pool(project.resource_pool, resource_id)
            return project.model_copy(update={"resource_pool": updated_pool}), None

        return self._apply(ctx, project_id, "resource_pool.remove", edit, {"resource_id": resource_id})

    def assign_resource(self, ctx: RequestContext, project_id: str, task_id: str, resource_id: str) -> WbsTask:
        def edit(project: WbsProject) -> Tuple[WbsProject, Optional[str]]:
            source = pool.find_resource(project.resource_pool, resource_id)
            task = mutations.find_task(project.tasks, task_id)
            if pool.find_by_name(task.resources, source.name) is not None:
                raise InvalidMutation(f"Resource {source.name!r} already assigned to task {task_id}")
            resources = [*task.resources, pool.copy_for_assignment(source)]
            return self._with_tasks(project, mutations.set_resources(project.tasks, task_id, resources)), task_id

        project = self._apply(ctx, project_id, "wbs_task.assign_resource", edit, {"resource_id": resource_id})
        return mutations.find_task(project.tasks, task_id)

    def unassign_resource(self, ctx: RequestContext, project_id: str, task_id: str, assignment_id: str) -> WbsTask:
        def edit(project: WbsProject) -> Tuple[WbsProject, Optional[str]]:
            task = mutations.find_task(project.tasks, task_id)
            pool.find_resource(task.resources, assignment_id)
            resources = [r for r in task.resources if r.id != assignment_id]
            return self._with_tasks(project, mutations.set_resources(project.tasks, task_id, resources)), task_id

        project = self._apply(
            ctx, project_id, "wbs_task.unassign_resource", edit, {"assignment_id": assignment_id}
        )
        return mutations.find_task(project.tasks, task_id)

    def available_resources(self, ctx: RequestContext, project_id: str, task_id: str) -> List[Resource]:
        """Pool entries not yet assigned to the task."""
        project = self.get_project(ctx, project_id)
        task = mutations.find_task(project.tasks, task_id)
        return pool.unassigned(project.resource_pool, task.resources)

    # -- derived views ------------------------------------------------------

    def get_schedule(self, ctx: RequestContext, project_id: str) -> ScheduleResult:
        project = self.get_project(ctx, project_id)
        return schedule_project(project.tasks, project.start_date)

    def get_gantt(
        self,
        ctx: RequestContext,
        project_id: str,
        include_collapsed: bool = False,
        now: Optional[datetime] = None,
    ) -> GanttChart:
        return build_gantt_chart(self.get_schedule(ctx, project_id), include_collapsed, now)


# Module-level default service
_default_service: Optional[WbsProjectService] = None


def get_project_service() -> WbsProjectService:
    """Get default project service."""
    global _default_service
    if _default_service is None:
        _default_service = WbsProjectService()
    return _default_service


def set_project_service(service: WbsProjectService) -> None:
    """Override default service (for testing)."""
    global _default_service
    _default_service = service
