"""
Artifact and module contribution data models.

These are the externally computed inputs of a BOM generation run: the
resolved artifacts of each module, the optional usage analysis, and the
module's own dependency edges.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional


def coordinate_text(data: Dict[str, Any], key: str) -> str:
    """
    Get a coordinate field that must already be text.

    Numbers are refused, not converted: the version 1.10 read as a
    number is already 1.1.

    Raises:
        KeyError: If the field is missing
        TypeError: If the field is not a string
    """
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string, got {type(value).__name__} {value!r}")
    return value


@dataclass(frozen=True)
class Artifact:
    """
    A resolved build artifact, supplied once per occurrence.

    Equality and hashing use the coordinates only, so the same artifact
    observed under different scopes is one artifact for usage-report lookups.
    """

    group: str
    name: str
    version: str
    type: str = "jar"
    classifier: Optional[str] = None
    scope: Optional[str] = field(default=None, compare=False)
    optional: bool = field(default=False, compare=False)

    @property
    def coordinates(self) -> str:
        """Get the group:name:type[:classifier]:version coordinates."""
        parts = [self.group, self.name, self.type]
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version)
        return ":".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert artifact to dictionary for serialization."""
        return {
            "group": self.group,
            "name": self.name,
            "version": self.version,
            "type": self.type,
            "classifier": self.classifier,
            "scope": self.scope,
            "optional": self.optional
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Artifact':
        """
        Create artifact from dictionary.

        Args:
            data: Dictionary containing at least group, name and version

        Returns:
            Artifact instance
        """
        return cls(
            group=coordinate_text(data, "group"),
            name=coordinate_text(data, "name"),
            version=coordinate_text(data, "version"),
            type=data.get("type") or "jar",
            classifier=data.get("classifier"),
            scope=data.get("scope"),
            optional=bool(data.get("optional", False))
        )


@dataclass(frozen=True)
class UsageReport:
    """Result of a usage analysis over one module's declared dependencies."""

    used_declared: FrozenSet[Artifact] = frozenset()
    used_undeclared: FrozenSet[Artifact] = frozenset()
    unused_declared: FrozenSet[Artifact] = frozenset()
    test_artifacts_with_non_test_scope: FrozenSet[Artifact] = frozenset()

    @classmethod
    def of(
        cls,
        used_declared: Iterable[Artifact] = (),
        used_undeclared: Iterable[Artifact] = (),
        unused_declared: Iterable[Artifact] = (),
        test_artifacts_with_non_test_scope: Iterable[Artifact] = ()
    ) -> 'UsageReport':
        """Build a report from any iterables of artifacts."""
        return cls(
            used_declared=frozenset(used_declared),
            used_undeclared=frozenset(used_undeclared),
            unused_declared=frozenset(unused_declared),
            test_artifacts_with_non_test_scope=frozenset(test_artifacts_with_non_test_scope)
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UsageReport':
        """Create report from a dictionary of artifact dictionaries."""
        def artifacts(key: str) -> List[Artifact]:
            return [Artifact.from_dict(item) for item in data.get(key) or []]

        return cls.of(
            used_declared=artifacts("used_declared"),
            used_undeclared=artifacts("used_undeclared"),
            unused_declared=artifacts("unused_declared"),
            test_artifacts_with_non_test_scope=artifacts("test_artifacts_with_non_test_scope")
        )


@dataclass(frozen=True)
class ProjectDescriptor:
    """Self-identity and descriptive fields of the project being described."""

    group: str
    name: str
    version: str
    packaging: str = "jar"
    description: Optional[str] = None

    def as_artifact(self) -> Artifact:
        """Get the artifact this project publishes."""
        return Artifact(
            group=self.group,
            name=self.name,
            version=self.version,
            type=self.packaging
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectDescriptor':
        """Create project descriptor from dictionary."""
        return cls(
            group=coordinate_text(data, "group"),
            name=coordinate_text(data, "name"),
            version=coordinate_text(data, "version"),
            packaging=data.get("packaging") or "jar",
            description=data.get("description")
        )


@dataclass
class ModuleContribution:
    """
    One module's externally computed facts.

    Attributes:
        project: The module's own coordinates
        artifacts: Resolved artifacts, one entry per occurrence
        usage_report: Usage analysis, or None when it was not performed
        dependencies: Edges of the module's resolved graph, keyed by identity,
            targets in declaration order
    """

    project: ProjectDescriptor
    artifacts: List[Artifact] = field(default_factory=list)
    usage_report: Optional[UsageReport] = None
    dependencies: Dict[str, List[str]] = field(default_factory=dict)
