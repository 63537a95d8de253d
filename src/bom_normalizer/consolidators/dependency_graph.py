"""
Accumulator for the dependency adjacency graph.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Tuple

logger = logging.getLogger(__name__)


class DependencyGraphBuilder:
    """
    Builds the identity -> direct dependencies map across analysis passes.

    Targets of one identity are kept as an insertion-ordered set: adding
    an edge that is already present has no effect, and new targets are
    unioned in rather than replacing earlier ones.
    """

    def __init__(self):
        # dict keys double as an ordered set of targets
        self._edges: Dict[str, Dict[str, None]] = {}
        self._edges_added = 0

    def add_edges(self, from_identity: str, to_identities: Iterable[str]) -> None:
        """
        Record that ``from_identity`` depends on each of ``to_identities``.

        Self-edges are kept; the finalizer removes the root's own.

        Args:
            from_identity: Dependent identity
            to_identities: Its direct dependencies
        """
        targets = self._edges.setdefault(from_identity, {})
        for to_identity in to_identities:
            if to_identity not in targets:
                targets[to_identity] = None
                self._edges_added += 1

    def merge(self, edges: Mapping[str, Iterable[str]]) -> None:
        """Fold a whole module graph into this one."""
        for from_identity, to_identities in edges.items():
            self.add_edges(from_identity, to_identities)

    def depends_on(self, identity: str) -> List[str]:
        return list(self._edges.get(identity, ()))

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for identity, targets in self._edges.items():
            yield identity, list(targets)

    def as_dict(self) -> Dict[str, List[str]]:
        """Snapshot of the graph as plain lists, in insertion order."""
        return dict(self.items())

    def __contains__(self, identity: object) -> bool:
        return identity in self._edges

    def __len__(self) -> int:
        return len(self._edges)

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._edges.values())

    def get_graph_statistics(self):
        return {
            "nodes_with_edges": len(self._edges),
            "edges": self.edge_count,
            "edges_added": self._edges_added
        }
