"""
BOM Normalizer

Turns a build's resolved dependency information into a deduplicated
component inventory and a dependency graph rooted at the project itself,
ready to be written as a CycloneDX Software Bill of Materials.
"""

__version__ = "0.1.0"
__author__ = "BOM Normalizer Team"
__description__ = "Component deduplication, usage scope merging and dependency graph finalization for CycloneDX BOMs"
