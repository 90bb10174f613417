"""
WBS Project Models - Stored project and request bodies for tree edits.

Defines:
- WbsProject: Title, start date, task forest and resource pool of one project
- ProjectCreate / ProjectUpdate: Project-level requests
- TaskCreate / TaskFieldUpdate / TaskMove: Tree mutation requests
- ResourceAssign / ResourceCreate: Pool and assignment requests
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from wbs_engines.wbs_schedule.models import Resource, ScheduleMode, WbsTask, new_id


class WbsProject(BaseModel):
    """A project: its editable task forest and reusable resource pool."""
    id: str = Field(default_factory=new_id)
    tenant_id: str
    env: str

    title: str = "WBS Gantt Chart"
    subtitle: str = ""
    start_date: date

    tasks: List[WbsTask] = Field(default_factory=list)
    resource_pool: List[Resource] = Field(default_factory=list)

    revision: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    meta: Dict[str, Any] = Field(default_factory=dict)


class ProjectCreate(BaseModel):
    title: str = "WBS Gantt Chart"
    subtitle: str = ""
    start_date: Optional[date] = None  # Falls back to configured default
    tasks: List[WbsTask] = Field(default_factory=list)
    resource_pool: Optional[List[Resource]] = None  # None seeds the default pool


class ProjectUpdate(BaseModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    start_date: Optional[date] = None


class TaskCreate(BaseModel):
    """New task; omitted fields take the editor defaults."""
    id: Optional[str] = None
    name: Optional[str] = None
    duration_days: Optional[int] = None
    duration_hours: Optional[float] = None
    lead_time_days: Optional[int] = None
    is_247: Optional[bool] = None
    rate: Optional[float] = None
    schedule_mode: Optional[ScheduleMode] = None

    def provided_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class TaskFieldUpdate(BaseModel):
    field: str
    value: Any = None


class TaskMove(BaseModel):
    before_id: Optional[str] = None  # None moves to the end


class ResourceAssign(BaseModel):
    resource_id: str  # Pool entry to copy onto the task


class ResourceCreate(BaseModel):
    name: str
    bill_rate: float = 0.0
    cost_rate: float = 0.0
