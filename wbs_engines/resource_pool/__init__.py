"""Resource pool - reusable resources and copy-on-assign."""

from wbs_engines.resource_pool.catalog import default_pool
from wbs_engines.resource_pool.service import (
    add_to_pool,
    copy_for_assignment,
    find_by_name,
    find_resource,
    remove_from_pool,
    unassigned,
)

__all__ = [
    "default_pool",
    "add_to_pool",
    "copy_for_assignment",
    "find_by_name",
    "find_resource",
    "remove_from_pool",
    "unassigned",
]
