"""
Centralized error handling for BOM generation runs.
"""

import logging
import traceback
from contextlib import contextmanager
from typing import Dict, Any, Iterator, List, Optional
from datetime import datetime
from enum import Enum

from .exceptions import BomNormalizerError, BomGenerationError


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RunStage(Enum):
    """Stages of a BOM generation run, in execution order."""
    EXTRACTION = "extraction"
    MERGE = "merge"
    FINALIZE = "finalize"
    ASSEMBLE = "assemble"
    EXPORT = "export"


@contextmanager
def run_stage(stage: RunStage, component_count: Optional[int] = None) -> Iterator[None]:
    """
    Surface normalizer errors raised inside a stage as one aggregate failure.

    Errors raised by collaborators outside this package (resolvers, purl
    functions, file system) are propagated unchanged.

    Args:
        stage: Stage being executed
        component_count: Number of components known when the stage started

    Raises:
        BomGenerationError: If a BomNormalizerError is raised inside the stage
    """
    try:
        yield
    except BomGenerationError:
        raise
    except BomNormalizerError as e:
        raise BomGenerationError(
            f"BOM generation failed during {stage.value}: {e.message}",
            stage=stage.value,
            component_count=component_count,
            error_code=e.error_code,
            cause=e
        ) from e


class ErrorHandler:
    """
    Error handler used by the command-line entry point.

    Logs errors with a level derived from their severity and keeps a
    bounded history so a summary can be reported at the end of a run.
    """

    def __init__(self, max_history_size: int = 100):
        """Initialize error handler."""
        self.logger = logging.getLogger(__name__)

        self._error_counts: Dict[str, int] = {}
        self._error_history: List[Dict[str, Any]] = []
        self._max_history_size = max_history_size

    def handle_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.HIGH
    ) -> Dict[str, Any]:
        """
        Log and record an error.

        Args:
            error: Exception that occurred
            context: Additional context information
            severity: Error severity level

        Returns:
            The error record that was stored
        """
        error_record = self._create_error_record(error, context, severity)
        self._log_error(error_record)
        self._track_error(error_record)
        return error_record

    def _create_error_record(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]],
        severity: ErrorSeverity
    ) -> Dict[str, Any]:
        """Create a comprehensive error record."""
        error_record = {
            "timestamp": datetime.utcnow(),
            "error_type": type(error).__name__,
            "error_message": str(error),
            "severity": severity.value,
            "context": context or {},
            "traceback": "".join(traceback.format_exception(type(error), error, error.__traceback__))
        }

        if isinstance(error, BomNormalizerError):
            error_record.update({
                "error_code": error.error_code,
                "custom_context": error.context,
                "cause": str(error.cause) if error.cause else None
            })
        if isinstance(error, BomGenerationError):
            error_record["stage"] = error.stage

        return error_record

    def _log_error(self, error_record: Dict[str, Any]) -> None:
        """Log error with appropriate level based on severity."""
        severity = error_record["severity"]
        message = f"{error_record['error_type']}: {error_record['error_message']}"

        if error_record["context"]:
            context_str = ", ".join(f"{k}={v}" for k, v in error_record["context"].items())
            message += f" | Context: {context_str}"

        if severity == ErrorSeverity.CRITICAL.value:
            self.logger.critical(message)
        elif severity == ErrorSeverity.HIGH.value:
            self.logger.error(message)
        elif severity == ErrorSeverity.MEDIUM.value:
            self.logger.warning(message)
        else:
            self.logger.info(message)
        self.logger.debug(error_record["traceback"])

    def _track_error(self, error_record: Dict[str, Any]) -> None:
        error_type = error_record["error_type"]
        self._error_counts[error_type] = self._error_counts.get(error_type, 0) + 1

        self._error_history.append(error_record)
        if len(self._error_history) > self._max_history_size:
            self._error_history.pop(0)

    def get_error_statistics(self) -> Dict[str, Any]:
        """Get error counts and the stages that failed."""
        failed_stages = [
            record["stage"] for record in self._error_history
            if record.get("stage")
        ]
        return {
            "total_errors": sum(self._error_counts.values()),
            "error_counts_by_type": self._error_counts.copy(),
            "failed_stages": failed_stages
        }

    def clear_error_history(self) -> int:
        """
        Clear error history and return number of errors cleared.

        Returns:
            Number of errors that were cleared
        """
        count = len(self._error_history)
        self._error_history.clear()
        self._error_counts.clear()
        return count
