"""
Custom exceptions for the BOM normalizer.
"""

from typing import Optional, Dict, Any, List


class BomNormalizerError(Exception):
    """
    Base exception for all BOM normalizer errors.

    This is the root exception class that all other custom exceptions
    inherit from, providing common functionality and attributes.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize BOM normalizer error.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None
        }

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [self.message]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"Context: {context_str}")

        if self.cause:
            parts.append(f"Caused by: {self.cause}")

        return " | ".join(parts)


class ConfigurationError(BomNormalizerError):
    """
    Exception for configuration errors.

    Raised when the run cannot proceed with the given configuration, for
    example when no root identity can be resolved for the project or the
    configured project type is not a known component type.
    """

    def __init__(
        self,
        message: str,
        config_section: Optional[str] = None,
        config_key: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize configuration error.

        Args:
            message: Error message
            config_section: Configuration section with error
            config_key: Specific configuration key with error
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if config_section:
            context['config_section'] = config_section
        if config_key:
            context['config_key'] = config_key

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.config_section = config_section
        self.config_key = config_key


class UnsupportedOutputFormatError(ConfigurationError):
    """Raised when the selected output format is not xml, json or all."""

    def __init__(self, output_format: Optional[str], **kwargs):
        super().__init__(
            f"Unsupported output format '{output_format}'. Valid options are XML and JSON",
            config_section="bom",
            config_key="output_format",
            **kwargs
        )
        self.output_format = output_format


class ExtractionError(BomNormalizerError):
    """
    Exception for module extraction errors.

    This exception is raised when a module contribution cannot be read
    or folded into the component registry and dependency graph.
    """

    def __init__(
        self,
        message: str,
        module: Optional[str] = None,
        source_file: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize extraction error.

        Args:
            message: Error message
            module: Coordinates of the module being extracted
            source_file: Contribution document that failed to load
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if module:
            context['module'] = module
        if source_file:
            context['source_file'] = source_file

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.module = module
        self.source_file = source_file


class BomGenerationError(BomNormalizerError):
    """
    Aggregate failure of a BOM generation run.

    Every error detected while normalizing is surfaced as this exception,
    with the failing stage (extraction, merge, finalize, assemble, export)
    recorded so the caller can report where the run stopped.
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        component_count: Optional[int] = None,
        **kwargs
    ):
        """
        Initialize BOM generation error.

        Args:
            message: Error message
            stage: Run stage that failed
            component_count: Number of components being processed
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if stage:
            context['stage'] = stage
        if component_count:
            context['component_count'] = component_count

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.stage = stage
        self.component_count = component_count


class BomValidationError(BomNormalizerError):
    """
    Exception for documents that do not conform to the CycloneDX structure.
    """

    def __init__(
        self,
        message: str,
        bom_format: Optional[str] = None,
        invalid_fields: Optional[List[str]] = None,
        **kwargs
    ):
        """
        Initialize validation error.

        Args:
            message: Error message
            bom_format: Serialization format that failed validation
            invalid_fields: List of problems found in the document
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if bom_format:
            context['bom_format'] = bom_format
        if invalid_fields:
            context['invalid_fields'] = invalid_fields

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.bom_format = bom_format
        self.invalid_fields = invalid_fields or []
