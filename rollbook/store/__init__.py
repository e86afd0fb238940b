"""
Store package initialization.
"""

from rollbook.store.collection import EntityCollection
from rollbook.store.consultation_index import find_overlapping, overlaps
from rollbook.store.roster import EditStep, RosterStore
from rollbook.store.views import (
    filter_entities,
    in_group,
    name_contains_any,
    show_all,
    sort_entities,
)

__all__ = [
    "EntityCollection",
    "EditStep",
    "RosterStore",
    "find_overlapping",
    "overlaps",
    "filter_entities",
    "sort_entities",
    "show_all",
    "in_group",
    "name_contains_any",
]
