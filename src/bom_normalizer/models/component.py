"""
Component data model for deduplicated BOM entries.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from enum import Enum


class UsageScope(Enum):
    """
    Merged usage classification of a component.

    UNKNOWN means no evidence either way and is rendered as an absent scope.
    """
    REQUIRED = "required"
    OPTIONAL = "optional"
    EXCLUDED = "excluded"
    UNKNOWN = "unknown"

    @property
    def is_known(self) -> bool:
        return self is not UsageScope.UNKNOWN


class ComponentType(Enum):
    """Component type tags accepted for the project component."""
    APPLICATION = "application"
    FRAMEWORK = "framework"
    LIBRARY = "library"
    CONTAINER = "container"
    OPERATING_SYSTEM = "operating-system"
    DEVICE = "device"
    FIRMWARE = "firmware"
    FILE = "file"

    @classmethod
    def from_string(cls, value: str) -> 'ComponentType':
        """
        Look up a component type by its tag.

        Args:
            value: Tag such as "library" or "application"

        Returns:
            Matching component type

        Raises:
            ValueError: If the tag is not a known component type
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Invalid component type: {value}. Valid types: {valid}")


@dataclass
class Component:
    """
    Canonical record for one identity.

    Descriptive fields are filled on first sight and never overwritten;
    only ``scope`` changes as further occurrences are merged in.
    """

    bom_ref: str
    name: str
    version: str
    group: Optional[str] = None
    purl: Optional[str] = None
    component_type: ComponentType = ComponentType.LIBRARY
    description: Optional[str] = None
    scope: UsageScope = UsageScope.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert component to dictionary."""
        return {
            "bom_ref": self.bom_ref,
            "type": self.component_type.value,
            "group": self.group,
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "purl": self.purl,
            "scope": self.scope.value if self.scope.is_known else None
        }
