"""
Module contribution loading and extraction.
"""

from .contribution_loader import ContributionLoader
from .module_extractor import (
    ModuleExtractor, ExtractionResult, ANALYSIS_SINGLE, ANALYSIS_AGGREGATE
)

__all__ = [
    "ContributionLoader",
    "ModuleExtractor",
    "ExtractionResult",
    "ANALYSIS_SINGLE",
    "ANALYSIS_AGGREGATE"
]
