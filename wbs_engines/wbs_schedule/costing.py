"""
Cost Rollup - Resource cost, subtree totals, profit and margin.

Implements:
- Labor hours for a task (per-day hours times working days)
- Direct resource cost and billable value of a task's own assignments
- Subtree rollup of child totals
"""

from __future__ import annotations

from typing import NamedTuple, Sequence

from wbs_engines.wbs_schedule.models import ScheduledTask, WbsTask


class CostRollup(NamedTuple):
    resource_cost: float
    resource_billing: float
    total_cost: float
    profit: float
    margin: float


def effective_hours(task: WbsTask) -> float:
    """
    Labor hours the task's resources are paid for.

    With whole days, `duration_hours` is a daily shift length; with zero days
    it is the total.
    """
    if task.duration_days > 0:
        return task.duration_days * task.duration_hours
    return task.duration_hours


def resource_cost(task: WbsTask) -> float:
    hours = effective_hours(task)
    return sum(res.cost_rate * hours for res in task.resources)


def resource_billing(task: WbsTask) -> float:
    hours = effective_hours(task)
    return sum(res.bill_rate * hours for res in task.resources)


def margin_pct(rate: float, total_cost: float) -> float:
    """Profit as a percentage of the billed rate; 0 when nothing is billed."""
    if rate > 0:
        return (rate - total_cost) / rate * 100
    return 0.0


def rollup(task: WbsTask, children: Sequence[ScheduledTask]) -> CostRollup:
    """Own resource cost plus the already-rolled-up totals of scheduled children."""
    own = resource_cost(task)
    total = own + sum(child.total_cost for child in children)
    return CostRollup(
        resource_cost=own,
        resource_billing=resource_billing(task),
        total_cost=total,
        profit=task.rate - total,
        margin=margin_pct(task.rate, total),
    )
