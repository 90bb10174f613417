"""
WBS Schedule Service - Calendar-aware scheduling with cost rollup.

Implements:
- Recursive sibling fold producing start / work_start / end per task
- Sequential vs concurrent sibling placement
- Lead time, 24/7 tasks and the Monday-Friday 07:00 calendar
- Cost rollup in the same pass (see costing.py)
- Service with caching keyed by request content hash
"""

from __future__ import annotations

import hashlib
import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from wbs_engines.wbs_schedule.costing import margin_pct, rollup
from wbs_engines.wbs_schedule.models import (
    ScheduledTask,
    ScheduleMode,
    ScheduleRequest,
    ScheduleResult,
    WbsTask,
)
from wbs_engines.work_calendar.service import (
    advance_working_days,
    at_workday_start,
    continues_same_workday,
    project_anchor,
    snap_to_next_workday,
)

logger = logging.getLogger(__name__)

# Rescheduling a ScheduledTask must not carry its old computed values.
_INPUT_FIELDS = set(WbsTask.model_fields) - {"children"}


class SiblingCursor(NamedTuple):
    """Rolling state carried from one sibling to the next."""
    sequential_end: datetime  # End of the latest sequential sibling
    chain_start: datetime  # Start of the immediately previous sibling


def schedule(nodes: Sequence[WbsTask], anchor: datetime) -> List[ScheduledTask]:
    """Schedule an ordered sibling list (and, recursively, its subtrees) from `anchor`."""
    scheduled, _ = schedule_siblings(nodes, anchor)
    return scheduled


def schedule_siblings(
    nodes: Sequence[WbsTask],
    anchor: datetime,
) -> Tuple[List[ScheduledTask], SiblingCursor]:
    """Fold over siblings, returning the scheduled list and the final cursor."""
    cursor = SiblingCursor(sequential_end=anchor, chain_start=anchor)
    scheduled: List[ScheduledTask] = []
    for index, task in enumerate(nodes):
        item, cursor = _schedule_task(task, index == 0, cursor)
        scheduled.append(item)
    return scheduled, cursor


def _schedule_task(
    task: WbsTask,
    is_first: bool,
    cursor: SiblingCursor,
) -> Tuple[ScheduledTask, SiblingCursor]:
    start = _resolve_start(task, is_first, cursor)
    work_start = _shift(start, timedelta(days=task.lead_time_days))

    if task.children:
        children = schedule(task.children, work_start)
        end = max((child.end for child in children), default=work_start)
    else:
        children = []
        end = _leaf_end(task, work_start)

    costs = rollup(task, children)
    scheduled = ScheduledTask(
        **task.model_dump(include=_INPUT_FIELDS),
        children=children,
        start=start,
        work_start=work_start,
        end=end,
        total_cost=costs.total_cost,
        profit=costs.profit,
        margin=costs.margin,
        resource_billing=costs.resource_billing,
    )

    sequential_end = end if task.schedule_mode is ScheduleMode.SEQUENTIAL else cursor.sequential_end
    return scheduled, SiblingCursor(sequential_end=sequential_end, chain_start=start)


def _resolve_start(task: WbsTask, is_first: bool, cursor: SiblingCursor) -> datetime:
    follows_chain = task.schedule_mode is ScheduleMode.CONCURRENT and not is_first
    if follows_chain:
        # Parallel with the sibling directly above; used verbatim.
        return cursor.chain_start

    tentative = cursor.sequential_end
    if task.is_247:
        return tentative

    snapped = snap_to_next_workday(tentative)
    if continues_same_workday(cursor.sequential_end, snapped):
        return cursor.sequential_end
    return at_workday_start(snapped)


def _shift(instant: datetime, delta: timedelta) -> datetime:
    """Add `delta`, saturating at datetime.max past the end of the calendar."""
    try:
        return instant + delta
    except OverflowError:
        return datetime.max


def _leaf_end(task: WbsTask, work_start: datetime) -> datetime:
    hours = timedelta(hours=task.duration_hours)
    if task.is_247:
        return _shift(_shift(work_start, timedelta(days=task.duration_days)), hours)
    if task.duration_days > 0:
        try:
            last_day = advance_working_days(work_start, task.duration_days - 1)
        except OverflowError:
            return datetime.max
        return _shift(at_workday_start(last_day), hours)
    return _shift(work_start, hours)


def iter_scheduled(tasks: Sequence[ScheduledTask]) -> Iterator[ScheduledTask]:
    """Depth-first, pre-order walk over a scheduled forest."""
    for task in tasks:
        yield task
        yield from iter_scheduled(task.children)


def schedule_project(tasks: Sequence[WbsTask], project_start: date) -> ScheduleResult:
    """Schedule a whole forest from a project start date (anchored at 07:00)."""
    anchor = project_anchor(project_start)
    scheduled = schedule(tasks, anchor)

    total_cost = sum(t.total_cost for t in scheduled)
    total_rate = sum(t.rate for t in scheduled)
    project_end = max((t.end for t in scheduled), default=None)
    task_count = sum(1 for _ in iter_scheduled(scheduled))

    logger.debug(
        "Scheduled %d tasks (%d roots) from %s; project end %s",
        task_count,
        len(scheduled),
        anchor.isoformat(),
        project_end.isoformat() if project_end else None,
    )

    return ScheduleResult(
        project_start=anchor,
        project_end=project_end,
        tasks=scheduled,
        task_count=task_count,
        total_cost=total_cost,
        total_rate=total_rate,
        total_profit=total_rate - total_cost,
        margin=margin_pct(total_rate, total_cost),
    )


class ScheduleCache:
    """In-memory cache for schedule results."""

    def __init__(self, max_entries: int = 50):
        self.cache: Dict[str, ScheduleResult] = {}
        self.max_entries = max_entries

    def cache_key(self, request: ScheduleRequest) -> str:
        """Content hash of the full request."""
        raw = request.model_dump_json()
        return hashlib.sha256(raw.encode()).hexdigest()

    def get(self, key: str) -> Optional[ScheduleResult]:
        return self.cache.get(key)

    def put(self, key: str, result: ScheduleResult) -> None:
        if len(self.cache) >= self.max_entries:
            first_key = next(iter(self.cache))
            del self.cache[first_key]
        self.cache[key] = result

    def clear(self) -> None:
        self.cache.clear()


class WbsScheduleService:
    """Schedule task forests; identical requests are served from cache."""

    def __init__(self, cache: Optional[ScheduleCache] = None):
        self.cache = cache or ScheduleCache()

    def run(self, request: ScheduleRequest) -> ScheduleResult:
        key = self.cache.cache_key(request)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Schedule cache hit %s", key[:12])
            return cached.model_copy(deep=True)

        result = schedule_project(request.tasks, request.project_start)
        self.cache.put(key, result)
        # Callers get their own copy; the cached entry stays as computed
        return result.model_copy(deep=True)


# Module-level default service
_default_service: Optional[WbsScheduleService] = None


def get_schedule_service() -> WbsScheduleService:
    """Get default schedule service."""
    global _default_service
    if _default_service is None:
        _default_service = WbsScheduleService()
    return _default_service


def set_schedule_service(service: WbsScheduleService) -> None:
    """Override default service (for testing)."""
    global _default_service
    _default_service = service
