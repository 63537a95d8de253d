"""
Orchestration of a BOM generation run.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .config import AppConfig, ScopeFilter, get_config
from .consolidators import ExportManager, GraphFinalizer
from .error_handling import ExtractionError, RunStage, run_stage
from .generators import BomAssembler, BomFormat, BomOptions, ModelConverter
from .generators.model_converter import PurlFunction
from .models import Bom, ModuleContribution, SchemaVersion
from .scanners import ExtractionResult, ModuleExtractor

logger = logging.getLogger(__name__)

PARAMETER_SEPARATOR = "-" * 72


class BomGenerationRun:
    """
    Coordinates one BOM generation run.

    Contributions are extracted into a registry and graph, the project is
    turned into metadata, the graph is finalized around the project's root
    identity, and the BOM is assembled and optionally written to disk.
    Any normalizer error is surfaced as a BomGenerationError naming the stage.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        purl_function: Optional[PurlFunction] = None,
        export: bool = True
    ):
        """
        Initialize the run.

        Args:
            config: Application configuration
            purl_function: Identity function for artifacts (defaults to Maven purls)
            export: Whether to write the BOM files after assembly
        """
        self.config = config or get_config()
        self.export = export

        bom_config = self.config.bom
        self.scope_filter = ScopeFilter.from_config(bom_config)
        self.converter = ModelConverter(purl_function)
        self.extractor = ModuleExtractor(self.scope_filter, bom_config.exclude_types, self.converter)
        self.finalizer = GraphFinalizer()
        self.assembler = BomAssembler()
        self.export_manager = ExportManager()

        self.written_files: Dict[BomFormat, Path] = {}
        self._run_statistics: Dict[str, Any] = {
            "start_time": None,
            "end_time": None,
            "skipped": False,
            "analysis": None,
            "root_promoted": False,
            "component_count": 0
        }

    def execute(self, contributions: Sequence[ModuleContribution], aggregate: bool = False) -> Optional[Bom]:
        """
        Run BOM generation over module contributions.

        Args:
            contributions: Module contributions; the first describes the project
            aggregate: Fold every contribution instead of only the first

        Returns:
            The assembled BOM, or None when generation is skipped

        Raises:
            BomGenerationError: If any stage fails
        """
        bom_config = self.config.bom
        if bom_config.skip:
            logger.info("Skipping BOM generation")
            self._run_statistics["skipped"] = True
            return None

        self._run_statistics["start_time"] = datetime.utcnow()
        self.log_parameters()

        with run_stage(RunStage.EXTRACTION):
            result = self._extract(contributions, aggregate)
        count = result.component_count

        with run_stage(RunStage.ASSEMBLE, count):
            analysis = f"{result.analysis} {'+'.join(self.scope_filter.scopes)}"
            metadata = self.converter.convert_project(
                contributions[0].project, analysis, bom_config.project_type
            )

        with run_stage(RunStage.FINALIZE, count):
            project_purl = metadata.component.purl
            root_identity = result.project_identities.get(project_purl, project_purl)
            finalized = self.finalizer.finalize(
                result.registry.components,
                result.graph.as_dict(),
                root_identity,
                metadata.component
            )

        with run_stage(RunStage.ASSEMBLE, count):
            bom = self.assembler.assemble(
                finalized.components,
                finalized.dependencies,
                self.assembler.with_root(metadata, finalized.root_component),
                SchemaVersion.from_string(bom_config.schema_version),
                BomOptions(
                    include_serial_number=bom_config.include_bom_serial_number,
                    output_format=bom_config.output_format
                )
            )

        if self.export:
            with run_stage(RunStage.EXPORT, bom.component_count):
                self.written_files = self.export_manager.export_bom(
                    bom,
                    bom_config.output_directory,
                    bom_config.output_name,
                    bom_config.output_format
                )

        self._run_statistics.update({
            "end_time": datetime.utcnow(),
            "analysis": analysis,
            "root_promoted": finalized.promoted,
            "component_count": bom.component_count
        })
        return bom

    def _extract(self, contributions: Sequence[ModuleContribution], aggregate: bool) -> ExtractionResult:
        if not contributions:
            raise ExtractionError("No module contributions given")
        if aggregate:
            return self.extractor.extract_aggregate(contributions)
        if len(contributions) > 1:
            logger.warning(
                f"Ignoring {len(contributions) - 1} module contribution(s) after "
                f"'{contributions[0].project.name}'; use aggregate mode to fold them"
            )
        return self.extractor.extract_single(contributions[0])

    def log_parameters(self) -> None:
        """Log the effective run parameters when verbose output is enabled."""
        bom_config = self.config.bom
        if not bom_config.verbose or not logger.isEnabledFor(logging.INFO):
            return

        schema_version = SchemaVersion.from_string(bom_config.schema_version)
        logger.info("BOM generation: Parameters")
        logger.info(PARAMETER_SEPARATOR)
        logger.info(f"schemaVersion          : {schema_version.version_string}")
        logger.info(f"includeBomSerialNumber : {bom_config.include_bom_serial_number}")
        logger.info(f"includeCompileScope    : {bom_config.include_compile_scope}")
        logger.info(f"includeProvidedScope   : {bom_config.include_provided_scope}")
        logger.info(f"includeRuntimeScope    : {bom_config.include_runtime_scope}")
        logger.info(f"includeTestScope       : {bom_config.include_test_scope}")
        logger.info(f"includeSystemScope     : {bom_config.include_system_scope}")
        logger.info(f"excludeTypes           : {', '.join(bom_config.exclude_types)}")
        logger.info(f"outputFormat           : {bom_config.output_format}")
        logger.info(f"outputName             : {bom_config.output_name}")
        logger.info(PARAMETER_SEPARATOR)

    def get_run_statistics(self) -> Dict[str, Any]:
        """
        Get statistics of the run and of its components.

        Returns:
            Dictionary of run statistics
        """
        stats = self._run_statistics.copy()
        stats["extraction"] = self.extractor.get_extraction_statistics()
        stats["finalization"] = self.finalizer.get_finalize_statistics()
        stats["export"] = self.export_manager.get_export_statistics()
        stats["written_files"] = {fmt.value: str(path) for fmt, path in self.written_files.items()}
        return stats
