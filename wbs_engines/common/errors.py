"""Domain errors raised by the WBS collaborator engines."""
from __future__ import annotations


class WbsError(Exception):
    """Base class; `code` is the machine-readable suffix used in error envelopes."""
    code = "wbs.error"
    resource_kind = "wbs_task"


class ProjectNotFound(WbsError, KeyError):
    code = "wbs_project.not_found"
    resource_kind = "wbs_project"

    def __init__(self, project_id: str):
        super().__init__(f"Project {project_id} not found")
        self.project_id = project_id

    def __str__(self) -> str:
        return self.args[0]


class TaskNotFound(WbsError, KeyError):
    code = "wbs_task.not_found"

    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id

    def __str__(self) -> str:
        return self.args[0]


class ResourceNotFound(WbsError, KeyError):
    code = "resource.not_found"
    resource_kind = "resource"

    def __init__(self, resource_id: str):
        super().__init__(f"Resource {resource_id} not found")
        self.resource_id = resource_id

    def __str__(self) -> str:
        return self.args[0]


class InvalidMutation(WbsError, ValueError):
    code = "wbs_task.invalid_mutation"


class DuplicateResource(WbsError, ValueError):
    code = "resource.duplicate"
    resource_kind = "resource"


class ProjectLimitReached(WbsError, ValueError):
    code = "wbs_project.limit_reached"
    resource_kind = "wbs_project"
