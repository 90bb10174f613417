"""
Resource Catalog - Default resource pool for new projects.

Rates are hourly: `bill_rate` is what the client is charged, `cost_rate` is
what the resource costs the business.
"""

from typing import List

from wbs_engines.wbs_schedule.models import Resource


def default_pool() -> List[Resource]:
    """Fresh copy of the starter pool (ids are stable across calls)."""
    return [
        Resource(id="101", name="Project Manager", bill_rate=150.0, cost_rate=90.0),
        Resource(id="102", name="Crane", bill_rate=250.0, cost_rate=180.0),
        Resource(id="103", name="Welder", bill_rate=95.0, cost_rate=60.0),
        Resource(id="104", name="Inspector", bill_rate=110.0, cost_rate=75.0),
        Resource(id="105", name="Legal Team", bill_rate=300.0, cost_rate=220.0),
    ]
