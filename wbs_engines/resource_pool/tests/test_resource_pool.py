"""
Tests for the resource pool and copy-on-assign.
"""

import pytest

from wbs_engines.common.errors import DuplicateResource, InvalidMutation, ResourceNotFound
from wbs_engines.resource_pool import (
    add_to_pool,
    copy_for_assignment,
    default_pool,
    find_by_name,
    find_resource,
    remove_from_pool,
    unassigned,
)
from wbs_engines.wbs_schedule.models import Resource


class TestDefaultPool:

    def test_contents(self):
        pool = default_pool()
        assert [r.name for r in pool] == ["Project Manager", "Crane", "Welder", "Inspector", "Legal Team"]
        assert find_resource(pool, "105").cost_rate == 220.0

    def test_fresh_list_each_call(self):
        first = default_pool()
        first.pop()
        assert len(default_pool()) == 5


class TestPoolEdits:

    def test_add(self):
        pool = default_pool()
        updated = add_to_pool(pool, Resource(name="Surveyor", bill_rate=80, cost_rate=45))
        assert updated[-1].name == "Surveyor"
        assert len(pool) == 5

    def test_add_duplicate_name(self):
        with pytest.raises(DuplicateResource):
            add_to_pool(default_pool(), Resource(name="  welder "))

    def test_add_blank_name(self):
        with pytest.raises(InvalidMutation):
            add_to_pool([], Resource(name="   "))

    def test_id_collision_gets_new_id(self):
        updated = add_to_pool(default_pool(), Resource(id="101", name="Surveyor"))
        assert updated[-1].id != "101"

    def test_remove(self):
        updated = remove_from_pool(default_pool(), "102")
        assert find_by_name(updated, "Crane") is None
        with pytest.raises(ResourceNotFound):
            remove_from_pool(updated, "102")


class TestAssignment:

    def test_copy_is_detached(self):
        source = find_resource(default_pool(), "103")
        copy = copy_for_assignment(source)
        assert copy.id != source.id
        assert (copy.name, copy.bill_rate, copy.cost_rate) == (source.name, source.bill_rate, source.cost_rate)

    def test_unassigned_matches_by_name(self):
        pool = default_pool()
        assigned = [copy_for_assignment(find_resource(pool, "101"))]
        assert [r.id for r in unassigned(pool, assigned)] == ["102", "103", "104", "105"]


def test_rate_aliases_and_coercion():
    resource = Resource.model_validate({"id": 9, "name": "Pump", "rate": "12.5", "costRate": -3})
    assert resource.id == "9"
    assert resource.bill_rate == 12.5
    assert resource.cost_rate == 0.0
