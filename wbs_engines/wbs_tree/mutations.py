"""
WBS Tree Mutations - Copy-on-write edits of a task forest.

Every function takes a forest and returns a new one; input nodes are never
modified. Unchanged subtrees are shared between the old and new forest.
Any change invalidates computed schedule fields, so callers re-run
scheduling on the returned forest.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, List, Optional, Sequence, Set

from pydantic import ValidationError

from wbs_engines.common.errors import InvalidMutation, TaskNotFound
from wbs_engines.wbs_schedule.models import Resource, ScheduleMode, WbsTask

EDITABLE_FIELDS = frozenset({
    "name",
    "duration_days",
    "duration_hours",
    "lead_time_days",
    "is_247",
    "rate",
    "schedule_mode",
    "is_expanded",
})

# Field names as sent by the browser client
FIELD_ALIASES = {
    "durationDays": "duration_days",
    "durationHours": "duration_hours",
    "leadTimeDays": "lead_time_days",
    "is247": "is_247",
    "scheduleMode": "schedule_mode",
    "isExpanded": "is_expanded",
}


def new_task(name: str = "New Task", **fields: Any) -> WbsTask:
    """Task with the editor's defaults: one 8-hour sequential working day."""
    data = {
        "name": name,
        "duration_days": 1,
        "duration_hours": 8,
        "lead_time_days": 0,
        "is_247": False,
        "rate": 0,
        "schedule_mode": ScheduleMode.SEQUENTIAL,
        "is_expanded": True,
    }
    data.update(fields)
    return WbsTask.model_validate(data)


def iter_tasks(tasks: Sequence[WbsTask]) -> Iterator[WbsTask]:
    """Depth-first, pre-order walk."""
    for task in tasks:
        yield task
        yield from iter_tasks(task.children)


def find_task(tasks: Sequence[WbsTask], task_id: str) -> WbsTask:
    for task in iter_tasks(tasks):
        if task.id == task_id:
            return task
    raise TaskNotFound(task_id)


def find_parent(tasks: Sequence[WbsTask], task_id: str) -> Optional[WbsTask]:
    """Parent of `task_id`, or None for a root. Raises TaskNotFound if absent."""
    for task in tasks:
        if task.id == task_id:
            return None
    for parent in iter_tasks(tasks):
        if any(child.id == task_id for child in parent.children):
            return parent
    raise TaskNotFound(task_id)


def _ids(tasks: Sequence[WbsTask]) -> Set[str]:
    return {task.id for task in iter_tasks(tasks)}


def _check_insertable(tasks: Sequence[WbsTask], task: WbsTask) -> None:
    incoming = [t.id for t in iter_tasks([task])]
    if len(incoming) != len(set(incoming)):
        raise InvalidMutation(f"Task {task.id} contains duplicate ids")
    clash = _ids(tasks).intersection(incoming)
    if clash:
        raise InvalidMutation(f"Task id(s) already in tree: {', '.join(sorted(clash))}")


def _replace(
    tasks: Sequence[WbsTask],
    task_id: str,
    fn: Callable[[WbsTask], WbsTask],
) -> List[WbsTask]:
    """New forest with `fn` applied to the node `task_id`; raises TaskNotFound."""
    found = False

    def walk(items: Sequence[WbsTask]) -> List[WbsTask]:
        nonlocal found
        result: List[WbsTask] = []
        for item in items:
            if not found and item.id == task_id:
                found = True
                result.append(fn(item))
            elif not found and item.children:
                children = walk(item.children)
                result.append(item.model_copy(update={"children": children}) if found else item)
            else:
                result.append(item)
        return result

    updated = walk(tasks)
    if not found:
        raise TaskNotFound(task_id)
    return updated


def add_root(tasks: Sequence[WbsTask], task: WbsTask) -> List[WbsTask]:
    _check_insertable(tasks, task)
    return [*tasks, task]


def add_child(tasks: Sequence[WbsTask], parent_id: str, task: WbsTask) -> List[WbsTask]:
    _check_insertable(tasks, task)
    return _replace(
        tasks,
        parent_id,
        lambda parent: parent.model_copy(update={"children": [*parent.children, task]}),
    )


def remove(tasks: Sequence[WbsTask], task_id: str) -> List[WbsTask]:
    """Remove a node and its entire subtree."""
    if task_id not in _ids(tasks):
        raise TaskNotFound(task_id)

    def prune(items: Sequence[WbsTask]) -> List[WbsTask]:
        result: List[WbsTask] = []
        for item in items:
            if item.id == task_id:
                continue
            if item.children:
                children = prune(item.children)
                if len(children) != len(item.children) or any(
                    new is not old for new, old in zip(children, item.children)
                ):
                    item = item.model_copy(update={"children": children})
            result.append(item)
        return result

    return prune(tasks)


def normalize_field(field: str) -> str:
    name = FIELD_ALIASES.get(field, field)
    if name not in EDITABLE_FIELDS:
        raise InvalidMutation(f"Field {field!r} is not editable")
    return name


def update(tasks: Sequence[WbsTask], task_id: str, field: str, value: Any) -> List[WbsTask]:
    """Set one editable field; numeric input is coerced like any other task input."""
    name = normalize_field(field)

    def apply(task: WbsTask) -> WbsTask:
        data = task.model_dump(exclude={"children"})
        data[name] = value
        try:
            updated = WbsTask.model_validate(data)
        except ValidationError as exc:
            raise InvalidMutation(f"Invalid value for {name}: {exc.errors()[0]['msg']}") from exc
        return updated.model_copy(update={"children": task.children})

    return _replace(tasks, task_id, apply)


def move(tasks: Sequence[WbsTask], task_id: str, before_id: Optional[str]) -> List[WbsTask]:
    """
    Reorder a root task so it sits directly before `before_id`.

    `before_id=None` moves it to the end. Only root tasks can be moved, and
    only among roots.
    """
    roots = [t.id for t in tasks]
    if task_id not in roots:
        parent = find_parent(tasks, task_id)
        raise InvalidMutation(
            f"Task {task_id} is a child of {parent.id}; only root tasks can be moved"
        )
    if before_id == task_id:
        return list(tasks)

    moving = tasks[roots.index(task_id)]
    remaining = [t for t in tasks if t.id != task_id]
    if before_id is None:
        return [*remaining, moving]

    for index, task in enumerate(remaining):
        if task.id == before_id:
            return [*remaining[:index], moving, *remaining[index:]]
    find_task(tasks, before_id)
    raise InvalidMutation(f"Task {before_id} is not a root task; cannot move before it")


def set_resources(tasks: Sequence[WbsTask], task_id: str, resources: Sequence[Resource]) -> List[WbsTask]:
    return _replace(
        tasks,
        task_id,
        lambda task: task.model_copy(update={"resources": list(resources)}),
    )
