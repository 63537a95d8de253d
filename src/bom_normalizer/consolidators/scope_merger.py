"""
Merger for usage scopes observed several times for the same component.
"""

import logging
from functools import reduce
from typing import Dict, Iterable, Tuple

from ..models import UsageScope

logger = logging.getLogger(__name__)

_R = UsageScope.REQUIRED
_O = UsageScope.OPTIONAL
_E = UsageScope.EXCLUDED
_U = UsageScope.UNKNOWN

# (existing, incoming) -> merged. Total over all sixteen pairs.
MERGE_TABLE: Dict[Tuple[UsageScope, UsageScope], UsageScope] = {
    # Unknown is only upgraded by positive evidence
    (_U, _R): _R, (_U, _O): _U, (_U, _E): _U, (_U, _U): _U,
    # Required absorbs everything
    (_R, _R): _R, (_R, _O): _R, (_R, _E): _R, (_R, _U): _R,
    (_O, _R): _R, (_O, _O): _O, (_O, _E): _O, (_O, _U): _U,
    # Excluded survives only if every observation agrees
    (_E, _R): _R, (_E, _O): _O, (_E, _E): _E, (_E, _U): _U,
}


class ScopeMerger:
    """
    Combines a stored usage scope with a newly observed one.

    The table is commutative and idempotent, so folding the observations of
    one component gives the same result in any order. It orders scopes as
    EXCLUDED < OPTIONAL < UNKNOWN < REQUIRED and keeps the greater.
    """

    def __init__(self):
        """Initialize the merger."""
        self._merge_statistics = {
            "merges_performed": 0,
            "scopes_changed": 0
        }

    def merge(self, existing: UsageScope, incoming: UsageScope) -> UsageScope:
        """
        Merge one more observation into a stored scope.

        Args:
            existing: Scope currently stored on the component
            incoming: Scope of the new occurrence

        Returns:
            Merged scope
        """
        merged = MERGE_TABLE[(existing, incoming)]

        self._merge_statistics["merges_performed"] += 1
        if merged is not existing:
            self._merge_statistics["scopes_changed"] += 1
            logger.debug(f"Scope merged {existing.value} + {incoming.value} -> {merged.value}")

        return merged

    def merge_all(self, scopes: Iterable[UsageScope]) -> UsageScope:
        """
        Fold a sequence of observations, the first one taken as stored.

        Args:
            scopes: Observed scopes; must not be empty

        Returns:
            Merged scope
        """
        return reduce(self.merge, scopes)

    def get_merge_statistics(self):
        """Get merge statistics."""
        return self._merge_statistics.copy()


def merge_scopes(existing: UsageScope, incoming: UsageScope) -> UsageScope:
    """Merge two scopes without tracking statistics."""
    return MERGE_TABLE[(existing, incoming)]
