"""
Loader for module contribution documents.

A contribution document is YAML (JSON is accepted as a YAML subset) and
describes either one module or, under a ``modules`` key, several:

    project: {group: org.acme, name: app, version: 1.0.0}
    artifacts:
      - {group: org.acme, name: core, version: 1.0.0, scope: compile}
    usage_report:
      used_declared:
        - {group: org.acme, name: core, version: 1.0.0}
    dependencies:
      "pkg:maven/org.acme/app@1.0.0?type=jar":
        - "pkg:maven/org.acme/core@1.0.0?type=jar"
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from ..error_handling import ExtractionError
from ..models import Artifact, ModuleContribution, ProjectDescriptor, UsageReport

logger = logging.getLogger(__name__)

NUMERIC_TAGS = ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float")


class ContributionYamlLoader(yaml.SafeLoader):
    """Safe loader that keeps unquoted numbers as text, so version 1.10 stays "1.10"."""


ContributionYamlLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class ContributionLoader:
    """Reads module contributions from YAML or JSON documents."""

    def __init__(self):
        self._load_statistics = {
            "files_loaded": 0,
            "modules_loaded": 0,
            "artifacts_loaded": 0
        }

    def load_file(self, file_path: Union[str, Path]) -> List[ModuleContribution]:
        """
        Load every module contribution from a document.

        Args:
            file_path: Path to the contribution document

        Returns:
            Contributions in document order

        Raises:
            ExtractionError: If the file cannot be read or is malformed
        """
        path = Path(file_path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                document = yaml.load(f, Loader=ContributionYamlLoader)
        except OSError as e:
            raise ExtractionError(
                f"Cannot read contribution document: {e}", source_file=str(path), cause=e
            ) from e
        except yaml.YAMLError as e:
            raise ExtractionError(
                f"Malformed contribution document: {e}", source_file=str(path), cause=e
            ) from e

        contributions = self.load_document(document, source_file=str(path))
        self._load_statistics["files_loaded"] += 1
        logger.info(f"Loaded {len(contributions)} module contribution(s) from {path}")
        return contributions

    def load_files(self, file_paths: Iterable[Union[str, Path]]) -> List[ModuleContribution]:
        """Load several documents, keeping file order then document order."""
        contributions: List[ModuleContribution] = []
        for file_path in file_paths:
            contributions.extend(self.load_file(file_path))
        return contributions

    def load_document(self, document: Any, source_file: Optional[str] = None) -> List[ModuleContribution]:
        """
        Build contributions from an already parsed document.

        Args:
            document: Parsed mapping
            source_file: Originating file, for error reporting

        Returns:
            Contributions in document order

        Raises:
            ExtractionError: If the document is malformed
        """
        if not isinstance(document, dict):
            raise ExtractionError("Contribution document must be a mapping", source_file=source_file)

        modules = document["modules"] if "modules" in document else [document]
        if not isinstance(modules, list):
            raise ExtractionError("'modules' must be a list", source_file=source_file)

        return [self._parse_module(module, source_file) for module in modules]

    def _parse_module(self, data: Any, source_file: Optional[str]) -> ModuleContribution:
        if not isinstance(data, dict) or "project" not in data:
            raise ExtractionError("Module contribution has no project", source_file=source_file)

        try:
            project = ProjectDescriptor.from_dict(data["project"])
            artifacts = [Artifact.from_dict(item) for item in data.get("artifacts") or []]
            usage_data = data.get("usage_report")
            usage_report = UsageReport.from_dict(usage_data) if usage_data is not None else None
            dependencies = self._parse_dependencies(data.get("dependencies") or {})
        except (KeyError, TypeError, AttributeError) as e:
            raise ExtractionError(
                f"Malformed module contribution: {e!r}", source_file=source_file, cause=e
            ) from e

        self._load_statistics["modules_loaded"] += 1
        self._load_statistics["artifacts_loaded"] += len(artifacts)

        return ModuleContribution(
            project=project,
            artifacts=artifacts,
            usage_report=usage_report,
            dependencies=dependencies
        )

    @staticmethod
    def _parse_dependencies(data: Dict[str, Any]) -> Dict[str, List[str]]:
        dependencies: Dict[str, List[str]] = {}
        for ref, targets in data.items():
            dependencies[str(ref)] = [str(target) for target in targets or []]
        return dependencies

    def get_load_statistics(self):
        return self._load_statistics.copy()
