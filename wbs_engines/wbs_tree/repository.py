from __future__ import annotations

import threading
from typing import Dict, List, Optional, Protocol, Tuple

from wbs_engines.common.errors import ProjectLimitReached
from wbs_engines.config import runtime_config
from wbs_engines.wbs_tree.models import WbsProject


class WbsProjectRepository(Protocol):
    def create(self, project: WbsProject) -> WbsProject: ...
    def get(self, tenant_id: str, env: str, project_id: str) -> Optional[WbsProject]: ...
    def list(self, tenant_id: str, env: str) -> List[WbsProject]: ...
    def replace(self, project: WbsProject) -> WbsProject: ...
    def delete(self, tenant_id: str, env: str, project_id: str) -> bool: ...


class InMemoryWbsProjectRepository:
    """Whole-project replacement only; stored projects are never edited in place."""

    def __init__(self, max_projects: Optional[int] = None) -> None:
        self._items: Dict[Tuple[str, str, str], WbsProject] = {}
        self._lock = threading.Lock()
        self.max_projects = max_projects or runtime_config.get_max_projects()

    def create(self, project: WbsProject) -> WbsProject:
        with self._lock:
            scope_count = sum(
                1 for (t, e, _) in self._items if t == project.tenant_id and e == project.env
            )
            if scope_count >= self.max_projects:
                raise ProjectLimitReached(
                    f"Project limit of {self.max_projects} reached for {project.tenant_id}/{project.env}"
                )
            self._items[(project.tenant_id, project.env, project.id)] = project
        return project

    def get(self, tenant_id: str, env: str, project_id: str) -> Optional[WbsProject]:
        return self._items.get((tenant_id, env, project_id))

    def list(self, tenant_id: str, env: str) -> List[WbsProject]:
        with self._lock:
            items = list(self._items.items())
        return [p for (t, e, _), p in items if t == tenant_id and e == env]

    def replace(self, project: WbsProject) -> WbsProject:
        with self._lock:
            self._items[(project.tenant_id, project.env, project.id)] = project
        return project

    def delete(self, tenant_id: str, env: str, project_id: str) -> bool:
        with self._lock:
            return self._items.pop((tenant_id, env, project_id), None) is not None
