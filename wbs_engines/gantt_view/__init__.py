"""Gantt view - chart rows, window and headers from a scheduled forest."""

from wbs_engines.gantt_view.models import (
    ChartWindow,
    DayCell,
    GanttBar,
    GanttChart,
    GanttRow,
    MonthBucket,
)
from wbs_engines.gantt_view.service import (
    bar_for,
    build_gantt_chart,
    chart_window,
    flatten,
    month_headers,
)

__all__ = [
    "ChartWindow",
    "DayCell",
    "GanttBar",
    "GanttChart",
    "GanttRow",
    "MonthBucket",
    "bar_for",
    "build_gantt_chart",
    "chart_window",
    "flatten",
    "month_headers",
]
