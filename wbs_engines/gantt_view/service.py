"""
Gantt View Service - Turn a scheduled forest into chart rows.

Implements:
- Depth-first flattening that honours collapsed nodes
- Visible time window with configurable padding
- Month header buckets with weekend flags
- Lead/work bar geometry relative to the window
"""

from __future__ import annotations

import calendar
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from wbs_engines.config import runtime_config
from wbs_engines.gantt_view.models import (
    ChartWindow,
    DayCell,
    GanttBar,
    GanttChart,
    GanttRow,
    MonthBucket,
)
from wbs_engines.wbs_schedule.models import ScheduledTask, ScheduleResult
from wbs_engines.work_calendar.service import is_workday

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 3600
ONE_DAY = timedelta(days=1)


def flatten(
    tasks: Sequence[ScheduledTask],
    include_collapsed: bool = False,
    level: int = 0,
) -> List[GanttRow]:
    """Pre-order rows; children of collapsed tasks are skipped unless requested."""
    rows: List[GanttRow] = []
    for task in tasks:
        rows.append(
            GanttRow(
                id=task.id,
                name=task.name,
                level=level,
                has_children=bool(task.children),
                is_expanded=task.is_expanded,
                schedule_mode=task.schedule_mode,
                start=task.start,
                work_start=task.work_start,
                end=task.end,
                rate=task.rate,
                total_cost=task.total_cost,
                profit=task.profit,
                margin=task.margin,
            )
        )
        if task.children and (task.is_expanded or include_collapsed):
            rows.extend(flatten(task.children, include_collapsed, level + 1))
    return rows


def _shift(instant: datetime, delta: timedelta) -> datetime:
    try:
        return instant + delta
    except OverflowError:
        return datetime.max if delta > timedelta(0) else datetime.min


def chart_window(rows: Sequence[GanttRow], now: Optional[datetime] = None) -> ChartWindow:
    """
    Earliest start to latest end, padded on both sides and capped at the
    configured maximum span.

    With no rows the window is `now` plus the configured empty span.
    """
    if not rows:
        start = now or datetime.now()
        return ChartWindow(start=start, end=start + timedelta(days=runtime_config.get_empty_chart_span_days()))

    padding = timedelta(days=runtime_config.get_chart_padding_days())
    start = _shift(min(row.start for row in rows), -padding)
    end = _shift(max(row.end for row in rows), padding)

    longest = timedelta(days=runtime_config.get_max_chart_span_days())
    if end - start > longest:
        logger.warning("Gantt window of %d days cut to %d", (end - start).days, longest.days)
        end = _shift(start, longest)
    return ChartWindow(start=start, end=end)


def month_headers(window: ChartWindow) -> List[MonthBucket]:
    """One bucket per calendar month touched by the window, in order."""
    span_days = window.total_seconds / SECONDS_PER_DAY
    buckets: List[MonthBucket] = []
    current = window.start
    while current <= window.end:
        name = f"{calendar.month_name[current.month]} {current.year}"
        if not buckets or buckets[-1].name != name:
            buckets.append(MonthBucket(name=name))
        buckets[-1].days.append(DayCell(day=current.date(), is_weekend=not is_workday(current)))
        if window.end - current < ONE_DAY:
            break
        current = current + ONE_DAY

    if span_days > 0:
        for bucket in buckets:
            bucket.width_pct = len(bucket.days) / span_days * 100
    return buckets


def bar_for(row: GanttRow, window: ChartWindow) -> GanttBar:
    total = window.total_seconds
    if total <= 0:
        return GanttBar()

    def pct(delta: timedelta) -> float:
        return delta.total_seconds() / total * 100

    return GanttBar(
        lead_offset_pct=pct(row.start - window.start),
        lead_width_pct=pct(row.work_start - row.start),
        work_offset_pct=pct(row.work_start - window.start),
        work_width_pct=pct(row.end - row.work_start),
    )


def build_gantt_chart(
    result: ScheduleResult,
    include_collapsed: bool = False,
    now: Optional[datetime] = None,
) -> GanttChart:
    rows = flatten(result.tasks, include_collapsed)
    window = chart_window(rows, now)
    rows = [row.model_copy(update={"bar": bar_for(row, window)}) for row in rows]
    months = month_headers(window)

    logger.debug(
        "Gantt chart: %d rows, %d months, window %s..%s",
        len(rows),
        len(months),
        window.start.isoformat(),
        window.end.isoformat(),
    )

    return GanttChart(
        window=window,
        months=months,
        rows=rows,
        project_end=result.project_end,
        total_cost=result.total_cost,
        total_profit=result.total_profit,
        margin=result.margin,
    )
