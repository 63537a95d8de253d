"""
BOM generation components: model conversion, assembly and CycloneDX output.
"""

from .base_generator import BaseFormatter, BomFormat, resolve_output_formats
from .model_converter import ModelConverter, generate_package_url, ANALYSIS_PROPERTY
from .bom_assembler import BomAssembler, BomOptions
from .cyclonedx_formatter import (
    CycloneDXFormatter, CycloneDXJsonFormatter, CycloneDXXmlFormatter, BomValidator
)

__all__ = [
    "BaseFormatter",
    "BomFormat",
    "resolve_output_formats",
    "ModelConverter",
    "generate_package_url",
    "ANALYSIS_PROPERTY",
    "BomAssembler",
    "BomOptions",
    "CycloneDXFormatter",
    "CycloneDXJsonFormatter",
    "CycloneDXXmlFormatter",
    "BomValidator"
]
