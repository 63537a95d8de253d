"""
Base classes and interfaces for BOM serialization components.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from enum import Enum

from ..error_handling import UnsupportedOutputFormatError
from ..models import Bom


class BomFormat(Enum):
    """Concrete document formats a BOM can be written in."""
    XML = "xml"
    JSON = "json"


OUTPUT_FORMAT_ALL = "all"


def resolve_output_formats(output_format: Optional[str]) -> List[BomFormat]:
    """
    Expand a configured output format into the formats to write.

    Matching is case-insensitive; ``all`` selects XML then JSON.

    Args:
        output_format: Configured value, one of xml, json or all

    Returns:
        Formats to produce, in writing order

    Raises:
        UnsupportedOutputFormatError: If the value is not a recognized format
    """
    normalized = (output_format or "").strip().lower()
    if normalized == OUTPUT_FORMAT_ALL:
        return [BomFormat.XML, BomFormat.JSON]
    for bom_format in BomFormat:
        if bom_format.value == normalized:
            return [bom_format]
    raise UnsupportedOutputFormatError(output_format)


class BaseFormatter(ABC):
    """Abstract base class for format-specific BOM formatters."""

    @abstractmethod
    def format_bom(self, bom: Bom) -> str:
        """
        Format a BOM model into a specific output format.

        Args:
            bom: BOM to format

        Returns:
            Formatted BOM as string
        """
        pass

    @property
    @abstractmethod
    def format_name(self) -> str:
        """
        Get the name of this format.

        Returns:
            Format name (e.g., 'XML', 'JSON')
        """
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """
        Get the file extension for this format.

        Returns:
            File extension without the dot (e.g., 'xml', 'json')
        """
        pass
