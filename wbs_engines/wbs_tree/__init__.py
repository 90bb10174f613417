"""WBS tree - stored projects, copy-on-write task edits and resource assignment."""

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
from wbs_engines.wbs_tree.repository import InMemoryWbsProjectRepository, WbsProjectRepository
from wbs_engines.wbs_tree.service import (
    WbsProjectService,
    get_project_service,
    set_project_service,
)

__all__ = [
    "ProjectCreate",
    "ProjectUpdate",
    "ResourceAssign",
    "ResourceCreate",
    "TaskCreate",
    "TaskFieldUpdate",
    "TaskMove",
    "WbsProject",
    "InMemoryWbsProjectRepository",
    "WbsProjectRepository",
    "WbsProjectService",
    "get_project_service",
    "set_project_service",
]
