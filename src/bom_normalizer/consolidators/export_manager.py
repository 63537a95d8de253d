"""
Export manager that writes and validates serialized BOMs.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..models import Bom
from ..generators import BomFormat, BomValidator, CycloneDXFormatter, resolve_output_formats

logger = logging.getLogger(__name__)

MESSAGE_WRITING_BOM = "Writing and validating BOM (%s): %s"


class ExportManager:
    """
    Writes a BOM as ``<output_name>.xml`` and/or ``<output_name>.json``.

    Each file is validated right after it is written; a document that does
    not conform stops the export with a BomValidationError.
    """

    def __init__(
        self,
        formatter: Optional[CycloneDXFormatter] = None,
        validator: Optional[BomValidator] = None
    ):
        """
        Initialize export manager.

        Args:
            formatter: Serializer for the supported document formats
            validator: Structural validator run on each written document
        """
        self.formatter = formatter or CycloneDXFormatter()
        self.validator = validator or BomValidator()

        self._export_statistics = {
            "exports_performed": 0,
            "formats_exported": {},
            "files_created": 0,
            "total_size_bytes": 0
        }

    def export_bom(
        self,
        bom: Bom,
        output_directory: Union[str, Path],
        output_name: str = "bom",
        output_format: str = "all"
    ) -> Dict[BomFormat, Path]:
        """
        Export a BOM in the configured formats.

        Args:
            bom: BOM to export
            output_directory: Directory the files are written to
            output_name: File name without extension
            output_format: xml, json or all

        Returns:
            Written file path per format

        Raises:
            UnsupportedOutputFormatError: If output_format is not recognized
            BomValidationError: If a written document does not conform
        """
        formats = resolve_output_formats(output_format)

        output_dir = Path(output_directory)
        output_dir.mkdir(parents=True, exist_ok=True)

        written: Dict[BomFormat, Path] = {}
        for bom_format in formats:
            written[bom_format] = self._export_format(bom, output_dir, output_name, bom_format)

        self._export_statistics["exports_performed"] += 1
        return written

    def _export_format(self, bom: Bom, output_dir: Path, output_name: str, bom_format: BomFormat) -> Path:
        """
        Write and validate one format.

        Args:
            bom: BOM to export
            output_dir: Output directory
            output_name: File name without extension
            bom_format: Format to export

        Returns:
            Path of the written file
        """
        formatter = self.formatter.get_formatter(bom_format)
        content = formatter.format_bom(bom)

        file_path = output_dir / f"{output_name}.{formatter.file_extension}"
        logger.info(MESSAGE_WRITING_BOM, formatter.format_name, file_path.resolve())
        file_path.write_text(content, encoding="utf-8")

        self.validator.validate(content, bom_format, bom.schema_version)

        file_size = file_path.stat().st_size
        formats_exported = self._export_statistics["formats_exported"]
        formats_exported[bom_format.value] = formats_exported.get(bom_format.value, 0) + 1
        self._export_statistics["files_created"] += 1
        self._export_statistics["total_size_bytes"] += file_size

        logger.debug(f"Exported {bom_format.value} format to {file_path} ({file_size} bytes)")
        return file_path

    def get_export_statistics(self):
        """
        Get export statistics.

        Returns:
            Dictionary of export statistics
        """
        stats = self._export_statistics.copy()
        stats["formats_exported"] = dict(stats["formats_exported"])
        return stats
