"""Resource model policies.

OwnershipPolicy
    ENFORCED    every board mutation checks the owner; category and task
                operations check that the parent board belongs to the caller.
    UNENFORCED  legacy behaviour: only board read/delete check the owner,
                board update and category/task operations do not.

SortOrderPolicy
    SEQUENCE    sort_id comes from an atomic per-collection counter, never
                reused after deletes.
    COUNT       legacy behaviour: sort_id = collection size + 1, counted over
                the whole collection (all owners). Can repeat after deletes
                or under concurrent inserts.
"""
from enum import Enum

from taskboard.core.exceptions import ConfigurationError


class OwnershipPolicy(Enum):
    ENFORCED = 'enforced'
    UNENFORCED = 'unenforced'

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Unknown OWNERSHIP_POLICY '{value}'")


class SortOrderPolicy(Enum):
    SEQUENCE = 'sequence'
    COUNT = 'count'

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Unknown SORT_ORDER_POLICY '{value}'")

    def next_sort_id(self, repo):
        """Allocate the sort_id for a new record in repo's collection."""
        if self is SortOrderPolicy.COUNT:
            return repo.count() + 1
        return repo.next_sequence('sort_id')
