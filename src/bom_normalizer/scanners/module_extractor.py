"""
Module extraction: folds module contributions into the shared accumulators.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set

from ..config import ScopeFilter
from ..consolidators import ComponentRegistry, DependencyGraphBuilder
from ..error_handling import ExtractionError
from ..generators import ModelConverter
from ..models import Artifact, ModuleContribution

logger = logging.getLogger(__name__)

ANALYSIS_SINGLE = "makeBom"
ANALYSIS_AGGREGATE = "makeAggregateBom"


@dataclass
class ExtractionResult:
    """
    Accumulated state after every contribution has been folded.

    Attributes:
        analysis: Name of the analysis performed
        registry: Deduplicated components by identity
        graph: Dependency edges by identity
        project_identities: Identity of each visited project, keyed by its purl
    """
    analysis: str
    registry: ComponentRegistry
    graph: DependencyGraphBuilder
    project_identities: Dict[str, str] = field(default_factory=dict)

    @property
    def component_count(self) -> int:
        return len(self.registry)


class ModuleExtractor:
    """
    Folds module contributions one at a time into one registry and graph.

    Artifacts outside the included scopes or of an excluded type are left
    out of the components, and edges pointing at them are dropped.
    """

    def __init__(
        self,
        scope_filter: Optional[ScopeFilter] = None,
        exclude_types: Optional[Iterable[str]] = None,
        converter: Optional[ModelConverter] = None
    ):
        """
        Initialize the extractor.

        Args:
            scope_filter: Build scopes whose artifacts are kept
            exclude_types: Artifact types that are never kept
            converter: Model converter; its purl function defines identities
        """
        self.scope_filter = scope_filter or ScopeFilter()
        self.exclude_types: Set[str] = {t.strip().lower() for t in exclude_types or () if t.strip()}
        self.converter = converter or ModelConverter()

        self._extraction_statistics = {
            "modules_extracted": 0,
            "artifacts_seen": 0,
            "artifacts_filtered": 0,
            "edges_dropped": 0
        }

    def extract_single(self, contribution: ModuleContribution) -> ExtractionResult:
        """
        Extract the components and dependencies of one module.

        Args:
            contribution: The module's artifacts, usage report and edges

        Returns:
            Extraction result for analysis ``makeBom``
        """
        logger.info("Resolving Dependencies")
        result = self._new_result(ANALYSIS_SINGLE)
        self.fold(contribution, result)
        return result

    def extract_aggregate(self, contributions: Sequence[ModuleContribution]) -> ExtractionResult:
        """
        Extract several modules into the same accumulators, in the given order.

        Args:
            contributions: Module contributions; the first is the aggregating project

        Returns:
            Extraction result for analysis ``makeAggregateBom``

        Raises:
            ExtractionError: If there is nothing to aggregate
        """
        if not contributions:
            raise ExtractionError("No module contributions to aggregate")

        logger.info("Resolving Aggregated Dependencies")
        result = self._new_result(ANALYSIS_AGGREGATE)
        for contribution in contributions:
            self.fold(contribution, result)

        logger.info(
            f"Aggregated {len(contributions)} module(s) into "
            f"{result.component_count} component(s)"
        )
        return result

    def fold(self, contribution: ModuleContribution, result: ExtractionResult) -> None:
        """
        Fold one contribution into an extraction result.

        Args:
            contribution: Module contribution to fold
            result: Accumulators to update

        Raises:
            ExtractionError: If the contribution has no project
        """
        project = contribution.project
        if project is None:
            raise ExtractionError("Module contribution has no project descriptor")

        module = f"{project.group}:{project.name}:{project.version}"
        project_purl = self.converter.generate_package_url(project.as_artifact())
        result.project_identities[project_purl] = project_purl

        included: List[Artifact] = []
        purl_to_identity: Dict[str, str] = {project_purl: project_purl}
        filtered: Set[str] = set()

        for artifact in contribution.artifacts:
            self._extraction_statistics["artifacts_seen"] += 1
            purl = self.converter.generate_package_url(artifact)
            if self._is_included(artifact):
                included.append(artifact)
                purl_to_identity[purl] = purl
            else:
                filtered.add(purl)
                self._extraction_statistics["artifacts_filtered"] += 1

        # an artifact kept through one path stays reachable through all of them
        filtered -= set(purl_to_identity)

        registered = result.registry.populate(included, purl_to_identity, contribution.usage_report)

        for from_identity, to_identities in contribution.dependencies.items():
            if from_identity in filtered:
                self._extraction_statistics["edges_dropped"] += len(to_identities)
                continue
            targets = [target for target in to_identities if target not in filtered]
            self._extraction_statistics["edges_dropped"] += len(to_identities) - len(targets)
            result.graph.add_edges(from_identity, targets)

        self._extraction_statistics["modules_extracted"] += 1
        logger.debug(
            f"Extracted {module}: {registered} artifact occurrence(s), "
            f"{len(filtered)} filtered identities"
        )

    def _is_included(self, artifact: Artifact) -> bool:
        if artifact.type.lower() in self.exclude_types:
            return False
        return self.scope_filter.includes(artifact.scope)

    def _new_result(self, analysis: str) -> ExtractionResult:
        return ExtractionResult(
            analysis=analysis,
            registry=ComponentRegistry(converter=self.converter),
            graph=DependencyGraphBuilder()
        )

    def get_extraction_statistics(self):
        """Get extraction statistics."""
        return self._extraction_statistics.copy()
