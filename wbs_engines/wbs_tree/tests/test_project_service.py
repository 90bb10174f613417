"""
Tests for the WBS project service.
"""

from datetime import date, datetime

import pytest

from wbs_engines.common.errors import (
    DuplicateResource,
    InvalidMutation,
    ProjectLimitReached,
    ProjectNotFound,
    ResourceNotFound,
    TaskNotFound,
)
from wbs_engines.common.identity import RequestContext
from wbs_engines.wbs_schedule.models import Resource, WbsTask
from wbs_engines.wbs_tree.models import ProjectCreate, ProjectUpdate, TaskCreate
from wbs_engines.wbs_tree.repository import InMemoryWbsProjectRepository
from wbs_engines.wbs_tree.service import WbsProjectService


class TestWbsProjectService:

    @pytest.fixture
    def service(self):
        return WbsProjectService()

    @pytest.fixture
    def ctx_a(self):
        return RequestContext(tenant_id="t_tenant_a", env="dev", user_id="u1")

    @pytest.fixture
    def ctx_b(self):
        return RequestContext(tenant_id="t_tenant_b", env="dev")

    @pytest.fixture
    def project(self, service, ctx_a):
        return service.create_project(ctx_a, ProjectCreate(start_date=date(2025, 7, 7)))

    def test_create_seeds_default_pool(self, project):
        assert project.title == "WBS Gantt Chart"
        assert [r.id for r in project.resource_pool] == ["101", "102", "103", "104", "105"]
        assert project.tasks == []
        assert project.revision == 0

    def test_create_with_explicit_empty_pool(self, service, ctx_a):
        project = service.create_project(ctx_a, ProjectCreate(start_date=date(2025, 7, 7), resource_pool=[]))
        assert project.resource_pool == []

    def test_create_uses_configured_start(self, service, ctx_a, monkeypatch):
        monkeypatch.setenv("WBS_DEFAULT_PROJECT_START", "2026-01-05")
        project = service.create_project(ctx_a, ProjectCreate())
        assert project.start_date == date(2026, 1, 5)

    def test_create_rejects_duplicate_task_ids(self, service, ctx_a):
        request = ProjectCreate(start_date=date(2025, 7, 7), tasks=[WbsTask(id="x"), WbsTask(id="x")])
        with pytest.raises(InvalidMutation):
            service.create_project(ctx_a, request)

    def test_isolation(self, service, project, ctx_a, ctx_b):
        assert [p.id for p in service.list_projects(ctx_a)] == [project.id]
        assert service.list_projects(ctx_b) == []
        with pytest.raises(ProjectNotFound):
            service.get_project(ctx_b, project.id)

    def test_env_isolation(self, service, project):
        prod = RequestContext(tenant_id="t_tenant_a", env="prod")
        with pytest.raises(ProjectNotFound):
            service.get_project(prod, project.id)

    def test_update_and_delete(self, service, project, ctx_a):
        updated = service.update_project(ctx_a, project.id, ProjectUpdate(title="Bridge"))
        assert updated.title == "Bridge"
        assert updated.start_date == project.start_date
        assert updated.revision == 1

        service.delete_project(ctx_a, project.id)
        with pytest.raises(ProjectNotFound):
            service.delete_project(ctx_a, project.id)

    def test_project_limit(self, ctx_a):
        service = WbsProjectService(InMemoryWbsProjectRepository(max_projects=1))
        service.create_project(ctx_a, ProjectCreate(start_date=date(2025, 7, 7)))
        with pytest.raises(ProjectLimitReached):
            service.create_project(ctx_a, ProjectCreate(start_date=date(2025, 7, 7)))

    def test_tree_edits(self, service, project, ctx_a):
        root = service.add_root_task(ctx_a, project.id)
        child = service.add_child_task(ctx_a, project.id, root.id, TaskCreate(name="Pour", duration_days=2))
        other = service.add_root_task(ctx_a, project.id, TaskCreate(name="Cure"))

        assert root.name == "New Task"
        assert child.name == "Pour"
        assert child.duration_hours == 8

        service.update_task(ctx_a, project.id, child.id, "durationHours", 6)
        service.move_task(ctx_a, project.id, other.id, root.id)

        stored = service.get_project(ctx_a, project.id)
        assert [t.id for t in stored.tasks] == [other.id, root.id]
        assert stored.tasks[1].children[0].duration_hours == 6
        assert stored.revision == 5

        stored = service.remove_task(ctx_a, project.id, root.id)
        assert [t.id for t in stored.tasks] == [other.id]

    def test_default_child_name(self, service, project, ctx_a):
        root = service.add_root_task(ctx_a, project.id)
        child = service.add_child_task(ctx_a, project.id, root.id)
        assert child.name == "New Sub-task"

    def test_rejected_edit_keeps_revision(self, service, project, ctx_a):
        with pytest.raises(TaskNotFound):
            service.remove_task(ctx_a, project.id, "missing")
        assert service.get_project(ctx_a, project.id).revision == 0

    def test_assign_copies_pool_entry(self, service, project, ctx_a):
        task = service.add_root_task(ctx_a, project.id)
        assigned = service.assign_resource(ctx_a, project.id, task.id, "103")

        [assignment] = assigned.resources
        assert assignment.name == "Welder"
        assert assignment.id != "103"
        assert "Welder" not in [r.name for r in service.available_resources(ctx_a, project.id, task.id)]

        with pytest.raises(InvalidMutation):
            service.assign_resource(ctx_a, project.id, task.id, "103")

        unassigned = service.unassign_resource(ctx_a, project.id, task.id, assignment.id)
        assert unassigned.resources == []
        pool = service.get_project(ctx_a, project.id).resource_pool
        assert "103" in [r.id for r in pool]

    def test_assign_unknown_resource(self, service, project, ctx_a):
        task = service.add_root_task(ctx_a, project.id)
        with pytest.raises(ResourceNotFound):
            service.assign_resource(ctx_a, project.id, task.id, "999")
        with pytest.raises(ResourceNotFound):
            service.unassign_resource(ctx_a, project.id, task.id, "999")

    def test_add_pool_resource(self, service, project, ctx_a):
        added = service.add_pool_resource(ctx_a, project.id, Resource(id="101", name="Surveyor", bill_rate=80))
        assert added.id != "101"
        assert service.get_project(ctx_a, project.id).resource_pool[-1] == added

        with pytest.raises(DuplicateResource):
            service.add_pool_resource(ctx_a, project.id, Resource(name="crane"))

    def test_remove_pool_resource_keeps_assignments(self, service, project, ctx_a):
        task = service.add_root_task(ctx_a, project.id)
        service.assign_resource(ctx_a, project.id, task.id, "102")

        updated = service.remove_pool_resource(ctx_a, project.id, "102")
        assert "102" not in [r.id for r in updated.resource_pool]
        assert [r.name for r in updated.tasks[0].resources] == ["Crane"]

        with pytest.raises(ResourceNotFound):
            service.remove_pool_resource(ctx_a, project.id, "102")

    def test_schedule_and_gantt(self, service, project, ctx_a):
        task = service.add_root_task(ctx_a, project.id, TaskCreate(rate=1000))
        service.assign_resource(ctx_a, project.id, task.id, "101")

        result = service.get_schedule(ctx_a, project.id)
        assert result.project_end == datetime(2025, 7, 7, 15, 0)
        assert result.total_cost == pytest.approx(720.0)
        assert result.margin == pytest.approx(28.0)

        chart = service.get_gantt(ctx_a, project.id)
        assert [row.id for row in chart.rows] == [task.id]
        assert chart.total_cost == result.total_cost

    def test_edits_are_audited(self, service, ctx_a, audit_events):
        project = service.create_project(ctx_a, ProjectCreate(start_date=date(2025, 7, 7)))
        task = service.add_root_task(ctx_a, project.id)
        service.update_task(ctx_a, project.id, task.id, "name", "Renamed")

        assert [e.action for e in audit_events] == [
            "wbs_project.create",
            "wbs_task.add_root",
            "wbs_task.update",
        ]
        assert audit_events[-1].task_id == task.id
        assert audit_events[-1].metadata == {"field": "name"}
        assert audit_events[-1].actor_type == "human"
