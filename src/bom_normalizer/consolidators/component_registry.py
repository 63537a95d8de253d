"""
Component registry that deduplicates artifact occurrences by identity.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from ..generators.model_converter import ModelConverter
from ..models import Artifact, Component, UsageReport, UsageScope
from .scope_classifier import ScopeClassifier
from .scope_merger import ScopeMerger

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """
    Mapping from identity to the one canonical component for it.

    The first occurrence of an identity creates the component and fixes its
    descriptive fields; every later occurrence only merges its usage scope.
    Insertion order is kept so two runs over the same inputs list components
    in the same order.
    """

    def __init__(
        self,
        converter: Optional[ModelConverter] = None,
        classifier: Optional[ScopeClassifier] = None,
        merger: Optional[ScopeMerger] = None
    ):
        """
        Initialize the registry.

        Args:
            converter: Builds components from artifacts
            classifier: Classifies occurrences against a usage report
            merger: Merges scopes of repeated occurrences
        """
        self.converter = converter or ModelConverter()
        self.classifier = classifier or ScopeClassifier()
        self.merger = merger or ScopeMerger()
        self._components: Dict[str, Component] = {}

        self._registry_statistics = {
            "occurrences_seen": 0,
            "components_created": 0,
            "scope_merges": 0,
            "artifacts_skipped": 0
        }

    def upsert(self, artifact: Artifact, identity: str, scope: UsageScope) -> Component:
        """
        Record one occurrence of an artifact.

        Args:
            artifact: The occurrence
            identity: Identity the artifact maps to
            scope: Usage scope of this occurrence

        Returns:
            The canonical component for the identity
        """
        self._registry_statistics["occurrences_seen"] += 1

        component = self._components.get(identity)
        if component is None:
            component = self.converter.convert(artifact, identity)
            component.scope = scope
            self._components[identity] = component
            self._registry_statistics["components_created"] += 1
            logger.debug(f"Registered component {identity} with scope {scope.value}")
        else:
            component.scope = self.merger.merge(component.scope, scope)
            self._registry_statistics["scope_merges"] += 1

        return component

    def populate(
        self,
        artifacts: Iterable[Artifact],
        purl_to_identity: Optional[Mapping[str, str]] = None,
        usage_report: Optional[UsageReport] = None
    ) -> int:
        """
        Classify and register every artifact of a module.

        When ``purl_to_identity`` is given, artifacts whose purl has no
        identity in it are skipped; otherwise the purl is the identity.

        Args:
            artifacts: Resolved artifacts of the module
            purl_to_identity: Known identities by purl
            usage_report: Usage analysis of the module, or None

        Returns:
            Number of occurrences registered
        """
        registered = 0
        for artifact in artifacts:
            purl = self.converter.generate_package_url(artifact)
            identity = purl if purl_to_identity is None else purl_to_identity.get(purl)
            if identity is None:
                self._registry_statistics["artifacts_skipped"] += 1
                continue

            scope = self.classifier.classify(artifact, usage_report)
            self.upsert(artifact, identity, scope)
            registered += 1

        return registered

    def get(self, identity: str) -> Optional[Component]:
        return self._components.get(identity)

    def remove(self, identity: str) -> Optional[Component]:
        """
        Remove a component by identity.

        Only used to re-home the root component during finalization.
        """
        return self._components.pop(identity, None)

    @property
    def components(self) -> Dict[str, Component]:
        """Live identity-to-component mapping, in insertion order."""
        return self._components

    def values(self) -> List[Component]:
        return list(self._components.values())

    def __contains__(self, identity: object) -> bool:
        return identity in self._components

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self) -> Iterator[str]:
        return iter(self._components)

    def get_registry_statistics(self):
        """Get registry statistics."""
        stats = self._registry_statistics.copy()
        stats["unique_components"] = len(self._components)
        stats["duplicates_merged"] = stats["occurrences_seen"] - stats["components_created"]
        return stats
