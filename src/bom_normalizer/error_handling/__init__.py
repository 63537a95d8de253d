"""
Error handling for the BOM normalizer.
"""

from .exceptions import (
    BomNormalizerError, ConfigurationError, UnsupportedOutputFormatError,
    ExtractionError, BomGenerationError, BomValidationError
)
from .error_handler import ErrorHandler, ErrorSeverity, RunStage, run_stage

__all__ = [
    "BomNormalizerError",
    "ConfigurationError",
    "UnsupportedOutputFormatError",
    "ExtractionError",
    "BomGenerationError",
    "BomValidationError",
    "ErrorHandler",
    "ErrorSeverity",
    "RunStage",
    "run_stage"
]
