"""
Data models for the BOM normalizer.
"""

from .artifact import Artifact, UsageReport, ProjectDescriptor, ModuleContribution
from .component import Component, ComponentType, UsageScope
from .bom import Bom, Dependency, Metadata, SchemaVersion, Tool

__all__ = [
    "Artifact",
    "UsageReport",
    "ProjectDescriptor",
    "ModuleContribution",
    "Component",
    "ComponentType",
    "UsageScope",
    "Bom",
    "Dependency",
    "Metadata",
    "SchemaVersion",
    "Tool"
]
