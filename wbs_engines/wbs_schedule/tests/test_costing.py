"""
Tests for cost rollup, profit and margin.
"""

from datetime import datetime

import pytest

from wbs_engines.wbs_schedule.costing import (
    effective_hours,
    margin_pct,
    resource_billing,
    resource_cost,
    rollup,
)
from wbs_engines.wbs_schedule.models import Resource, WbsTask
from wbs_engines.wbs_schedule.service import schedule

MONDAY = datetime(2025, 7, 7, 7, 0)


def crew(cost_rate: float, bill_rate: float = 0.0) -> Resource:
    return Resource(name="Crew", bill_rate=bill_rate, cost_rate=cost_rate)


class TestEffectiveHours:

    def test_days_multiply_daily_hours(self):
        assert effective_hours(WbsTask(duration_days=3, duration_hours=8)) == 24

    def test_zero_days_uses_hours(self):
        assert effective_hours(WbsTask(duration_days=0, duration_hours=5.5)) == 5.5

    def test_days_without_hours(self):
        assert effective_hours(WbsTask(duration_days=4, duration_hours=0)) == 0


class TestResourceCost:

    def test_sums_every_assignment(self):
        task = WbsTask(
            duration_days=2,
            duration_hours=8,
            resources=[crew(10, 25), crew(5, 15)],
        )
        assert resource_cost(task) == pytest.approx(240.0)
        assert resource_billing(task) == pytest.approx(640.0)

    def test_no_resources(self):
        assert resource_cost(WbsTask(duration_days=2, duration_hours=8)) == 0.0


class TestMargin:

    def test_positive_rate(self):
        assert margin_pct(1000, 600) == pytest.approx(40.0)

    def test_loss(self):
        assert margin_pct(100, 150) == pytest.approx(-50.0)

    @pytest.mark.parametrize("rate", [0, 0.0])
    def test_unbilled_is_zero(self, rate):
        assert margin_pct(rate, 500) == 0.0


class TestRollup:

    def test_parent_totals_include_children(self):
        children = [
            WbsTask(id=f"c{i}", duration_days=1, duration_hours=8, resources=[crew(37.5)])
            for i in range(2)
        ]
        root = WbsTask(id="root", rate=1000, children=children)
        [scheduled] = schedule([root], MONDAY)

        assert scheduled.total_cost == pytest.approx(600.0)
        assert scheduled.profit == pytest.approx(400.0)
        assert scheduled.margin == pytest.approx(40.0)
        for child in scheduled.children:
            assert child.total_cost == pytest.approx(300.0)
            assert child.profit == pytest.approx(-300.0)
            assert child.margin == 0.0

    def test_parent_own_resources_count(self):
        root = WbsTask(
            id="root",
            duration_days=1,
            duration_hours=2,
            rate=100,
            resources=[crew(10)],
            children=[WbsTask(id="c", duration_days=0, duration_hours=3, resources=[crew(10)])],
        )
        [scheduled] = schedule([root], MONDAY)
        assert scheduled.total_cost == pytest.approx(50.0)

    def test_rollup_of_unscheduled_leaf(self):
        costs = rollup(WbsTask(duration_days=1, duration_hours=4, rate=80, resources=[crew(10, 12)]), [])
        assert costs.resource_cost == pytest.approx(40.0)
        assert costs.resource_billing == pytest.approx(48.0)
        assert costs.total_cost == pytest.approx(40.0)
        assert costs.profit == pytest.approx(40.0)
        assert costs.margin == pytest.approx(50.0)


def test_raising_deep_cost_never_lowers_ancestors():
    def tree(deep_cost_rate: float) -> WbsTask:
        deep = WbsTask(id="deep", duration_days=2, duration_hours=8, resources=[crew(deep_cost_rate)])
        return WbsTask(
            id="root",
            rate=5000,
            children=[
                WbsTask(
                    id="phase",
                    children=[
                        WbsTask(id="step", children=[deep, WbsTask(id="side", duration_hours=4, resources=[crew(20)])]),
                        WbsTask(id="other", duration_days=1, duration_hours=8, resources=[crew(15)]),
                    ],
                ),
            ],
        )

    def totals(task) -> dict:
        found = {task.id: task.total_cost}
        for child in task.children:
            found.update(totals(child))
        return found

    [before] = schedule([tree(10)], MONDAY)
    [after] = schedule([tree(25)], MONDAY)
    old, new = totals(before), totals(after)

    assert new["deep"] - old["deep"] == pytest.approx(240.0)
    for ancestor in ("step", "phase", "root"):
        assert new[ancestor] >= old[ancestor]
        assert new[ancestor] - old[ancestor] == pytest.approx(240.0)
    assert new["other"] == old["other"]
    assert after.profit < before.profit
