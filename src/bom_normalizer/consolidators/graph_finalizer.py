"""
Reconciles the accumulated components and edges with the project root.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..error_handling import ConfigurationError
from ..models import Component, Dependency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinalizedGraph:
    """
    Read-only result of finalization.

    Attributes:
        components: Ordinary components, root excluded, in insertion order
        dependencies: Non-empty adjacency records, in insertion order
        root_component: Component describing the project itself
        promoted: True if the root was also seen as an ordinary component
    """
    components: Tuple[Component, ...]
    dependencies: Tuple[Dependency, ...]
    root_component: Component
    promoted: bool = False


class GraphFinalizer:
    """
    Removes the root's provisional entry and cleans up the edge map.

    Edges address components by identity, so removing the root from the
    component list leaves every edge that mentions it valid. The only edges
    dropped are the root's self-edge and entries with no targets.
    """

    def __init__(self):
        self._finalize_statistics = {
            "roots_promoted": 0,
            "roots_synthesized": 0,
            "empty_entries_dropped": 0,
            "self_edges_dropped": 0
        }

    @staticmethod
    def detect(components: Mapping[str, Component], root_identity: str) -> bool:
        """Tell whether the root was also registered as an ordinary component."""
        return root_identity in components

    @staticmethod
    def extract(
        components: Mapping[str, Component],
        root_identity: str
    ) -> Tuple[Dict[str, Component], Optional[Component]]:
        """
        Split the root entry off a component map.

        The input mapping is not modified.

        Args:
            components: Identity to component mapping
            root_identity: Identity of the project

        Returns:
            Tuple of (remaining components, removed root entry or None)
        """
        remaining = dict(components)
        removed = remaining.pop(root_identity, None)
        return remaining, removed

    def finalize(
        self,
        components: Mapping[str, Component],
        edges: Mapping[str, Iterable[str]],
        root_identity: Optional[str],
        project_component: Component
    ) -> FinalizedGraph:
        """
        Finalize the component list and dependency graph.

        Args:
            components: Accumulated identity to component mapping
            edges: Accumulated identity to dependencies mapping
            root_identity: Identity chosen for the project
            project_component: Component built from the project descriptor

        Returns:
            Finalized graph

        Raises:
            ConfigurationError: If no root identity could be determined
        """
        if not root_identity:
            raise ConfigurationError(
                "Unable to determine the project root identity",
                config_section="bom",
                context={"project": project_component.purl or project_component.name}
            )

        if self.detect(components, root_identity):
            remaining, _ = self.extract(components, root_identity)
            promoted = True
            self._finalize_statistics["roots_promoted"] += 1
            logger.debug(f"Promoted {root_identity} from components to project metadata")
        else:
            remaining = dict(components)
            promoted = False
            self._finalize_statistics["roots_synthesized"] += 1

        # the project descriptor wins over the root's registry entry
        root_component = replace(project_component, bom_ref=root_identity)

        dependencies = self._cleanup_dependencies(edges, root_identity)

        logger.debug(
            f"Finalized graph rooted at {root_identity}: "
            f"{len(remaining)} component(s), {len(dependencies)} dependency record(s)"
        )

        return FinalizedGraph(
            components=tuple(remaining.values()),
            dependencies=dependencies,
            root_component=root_component,
            promoted=promoted
        )

    def _cleanup_dependencies(
        self,
        edges: Mapping[str, Iterable[str]],
        root_identity: str
    ) -> Tuple[Dependency, ...]:
        dependencies: List[Dependency] = []
        for ref, targets in edges.items():
            depends_on = list(targets)
            if ref == root_identity and root_identity in depends_on:
                depends_on.remove(root_identity)
                self._finalize_statistics["self_edges_dropped"] += 1

            if not depends_on:
                self._finalize_statistics["empty_entries_dropped"] += 1
                continue

            dependencies.append(Dependency(ref=ref, depends_on=tuple(depends_on)))

        return tuple(dependencies)

    def get_finalize_statistics(self):
        return self._finalize_statistics.copy()
