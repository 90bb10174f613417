"""
Resource Pool - Reusable resource records and copy-on-assign.

A pool entry and a task assignment are independent after assignment: the
assignment is a copy with its own id, so editing or removing either never
touches the other.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from wbs_engines.common.errors import DuplicateResource, InvalidMutation, ResourceNotFound
from wbs_engines.wbs_schedule.models import Resource, new_id

logger = logging.getLogger(__name__)


def _name_key(name: str) -> str:
    return name.strip().casefold()


def find_resource(pool: Sequence[Resource], resource_id: str) -> Resource:
    for resource in pool:
        if resource.id == resource_id:
            return resource
    raise ResourceNotFound(resource_id)


def find_by_name(pool: Sequence[Resource], name: str) -> Optional[Resource]:
    key = _name_key(name)
    for resource in pool:
        if _name_key(resource.name) == key:
            return resource
    return None


def add_to_pool(pool: Sequence[Resource], resource: Resource) -> List[Resource]:
    """Return a new pool with `resource` appended; names are unique (case-insensitive)."""
    if not resource.name.strip():
        raise InvalidMutation("Resource name must not be blank")
    if find_by_name(pool, resource.name) is not None:
        raise DuplicateResource(f"Resource named {resource.name!r} already in pool")
    if any(existing.id == resource.id for existing in pool):
        resource = resource.model_copy(update={"id": new_id()})
    logger.debug("Adding resource %s (%s) to pool", resource.name, resource.id)
    return [*pool, resource]


def remove_from_pool(pool: Sequence[Resource], resource_id: str) -> List[Resource]:
    find_resource(pool, resource_id)
    return [r for r in pool if r.id != resource_id]


def copy_for_assignment(resource: Resource) -> Resource:
    """Detached copy with a fresh identity."""
    return resource.model_copy(update={"id": new_id()})


def unassigned(pool: Sequence[Resource], assigned: Sequence[Resource]) -> List[Resource]:
    """Pool entries not yet assigned, matched by name."""
    taken = {_name_key(r.name) for r in assigned}
    return [r for r in pool if _name_key(r.name) not in taken]
