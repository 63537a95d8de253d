"""
BOM document model handed to the serializer.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .component import Component

logger = logging.getLogger(__name__)


class SchemaVersion(Enum):
    """CycloneDX schema versions a BOM can be produced for."""
    VERSION_10 = "1.0"
    VERSION_11 = "1.1"
    VERSION_12 = "1.2"
    VERSION_13 = "1.3"
    VERSION_14 = "1.4"

    @property
    def version(self) -> float:
        """Get the numeric version used for feature gating."""
        return float(self.value)

    @property
    def version_string(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, value: Optional[str]) -> 'SchemaVersion':
        """
        Resolve a configured schema version.

        Unrecognized values fall back to the latest supported version.

        Args:
            value: Version string such as "1.2"

        Returns:
            Schema version to use
        """
        for member in cls:
            if member.value == value:
                return member
        logger.warning(f"Unknown schema version '{value}', using {cls.latest().value}")
        return cls.latest()

    @classmethod
    def latest(cls) -> 'SchemaVersion':
        return cls.VERSION_14


@dataclass(frozen=True)
class Tool:
    """Tool that produced the BOM."""
    vendor: str
    name: str
    version: str


@dataclass(frozen=True)
class Dependency:
    """One adjacency record: ``ref`` depends directly on each of ``depends_on``."""
    ref: str
    depends_on: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"ref": self.ref, "dependsOn": list(self.depends_on)}


@dataclass(frozen=True)
class Metadata:
    """
    Distinguished "this project" information of a BOM.

    Attributes:
        component: The root component describing the project itself
        timestamp: Generation time (UTC)
        tools: Tools involved in producing the BOM
        properties: Name/value pairs, including the analysis description
    """
    component: Component
    timestamp: datetime = field(default_factory=datetime.utcnow)
    tools: Tuple[Tool, ...] = ()
    properties: Tuple[Tuple[str, str], ...] = ()

    def get_property(self, name: str) -> Optional[str]:
        for key, value in self.properties:
            if key == name:
                return value
        return None


@dataclass(frozen=True)
class Bom:
    """
    Final, read-only BOM model.

    ``serial_number``, ``metadata`` and ``dependencies`` are only populated
    when the target schema version supports them.
    """
    schema_version: SchemaVersion
    components: Tuple[Component, ...] = ()
    serial_number: Optional[str] = None
    metadata: Optional[Metadata] = None
    dependencies: Optional[Tuple[Dependency, ...]] = None
    version: int = 1

    @property
    def component_count(self) -> int:
        return len(self.components)

    def get_component(self, bom_ref: str) -> Optional[Component]:
        """
        Find a component by its reference.

        Args:
            bom_ref: Identity of the component

        Returns:
            Matching component or None
        """
        for component in self.components:
            if component.bom_ref == bom_ref:
                return component
        return None

    def get_dependency(self, ref: str) -> Optional[Dependency]:
        for dependency in self.dependencies or ():
            if dependency.ref == ref:
                return dependency
        return None

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get summary statistics about the BOM.

        Returns:
            Dictionary of statistics
        """
        scope_breakdown: Dict[str, int] = {}
        for component in self.components:
            key = component.scope.value
            scope_breakdown[key] = scope_breakdown.get(key, 0) + 1

        return {
            "schema_version": self.schema_version.value,
            "component_count": self.component_count,
            "dependency_count": len(self.dependencies or ()),
            "has_serial_number": self.serial_number is not None,
            "has_metadata": self.metadata is not None,
            "scope_breakdown": scope_breakdown
        }
