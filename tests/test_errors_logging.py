from __future__ import annotations

import json
import logging

import pytest

from bom_normalizer.error_handling import (
    BomGenerationError, ConfigurationError, ErrorHandler, ExtractionError, RunStage, run_stage
)
from bom_normalizer.logging import ColoredFormatter, StructuredFormatter, get_logging_stats, LoggerConfig, setup_logging


def test_run_stage_wraps_normalizer_errors() -> None:
    with pytest.raises(BomGenerationError) as excinfo:
        with run_stage(RunStage.FINALIZE, component_count=3):
            raise ConfigurationError("no root", config_section="bom")

    error = excinfo.value
    assert error.stage == "finalize"
    assert error.message == "BOM generation failed during finalize: no root"
    assert error.context == {"stage": "finalize", "component_count": 3}
    assert isinstance(error.__cause__, ConfigurationError)


def test_run_stage_keeps_generation_errors_and_foreign_errors() -> None:
    original = BomGenerationError("inner", stage="extraction")
    with pytest.raises(BomGenerationError) as excinfo:
        with run_stage(RunStage.ASSEMBLE):
            raise original
    assert excinfo.value is original

    with pytest.raises(KeyError):
        with run_stage(RunStage.EXTRACTION):
            raise KeyError("upstream")


def test_error_string_and_dict() -> None:
    error = ExtractionError("bad module", module="org.acme:app:1.0.0", source_file="app.yaml")

    assert str(error) == "bad module | Context: module=org.acme:app:1.0.0, source_file=app.yaml"
    assert error.to_dict()["error_type"] == "ExtractionError"


def test_error_handler_records_stages() -> None:
    handler = ErrorHandler()
    handler.handle_error(BomGenerationError("failed", stage="export"))
    handler.handle_error(ValueError("plain"))

    stats = handler.get_error_statistics()
    assert stats["total_errors"] == 2
    assert stats["failed_stages"] == ["export"]
    assert stats["error_counts_by_type"] == {"BomGenerationError": 1, "ValueError": 1}
    assert handler.clear_error_history() == 2


def test_structured_formatter_emits_json_with_extra() -> None:
    record = logging.LogRecord("bom_normalizer.test", logging.INFO, __file__, 10, "hello %s", ("bom",), None)
    record.component_count = 4

    entry = json.loads(StructuredFormatter().format(record))

    assert entry["message"] == "hello bom"
    assert entry["level"] == "INFO"
    assert entry["extra"] == {"component_count": 4}


def test_setup_logging_with_rotating_file(tmp_path) -> None:
    log_file = tmp_path / "logs" / "bom.log"
    setup_logging(LoggerConfig(level="DEBUG", file_path=str(log_file), enable_console=False))

    logging.getLogger("bom_normalizer.test").info("written to file")

    stats = get_logging_stats()
    assert stats["handlers_active"] == ["file"]
    assert "written to file" in log_file.read_text(encoding="utf-8")


def test_structured_formatter_writes_normalizer_error_details() -> None:
    error = BomGenerationError("failed", stage="export")
    record = logging.LogRecord(
        "bom_normalizer.cli", logging.ERROR, __file__, 20, "run failed", (), (BomGenerationError, error, None)
    )

    entry = json.loads(StructuredFormatter().format(record))

    assert entry["error"]["error_type"] == "BomGenerationError"
    assert entry["error"]["context"] == {"stage": "export"}
    assert "exception" not in entry


def test_colored_formatter_leaves_record_untouched() -> None:
    record = logging.LogRecord("bom_normalizer.test", logging.WARNING, __file__, 30, "careful", (), None)

    formatted = ColoredFormatter("%(levelname)s %(message)s").format(record)

    assert formatted == "\033[33mWARNING\033[0m careful"
    assert record.levelname == "WARNING"
