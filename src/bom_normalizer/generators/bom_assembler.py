"""
Assembles the final BOM model, gated by the target schema version.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Union

from ..models import Bom, Component, Dependency, Metadata, SchemaVersion
from .base_generator import BomFormat, resolve_output_formats

logger = logging.getLogger(__name__)

MESSAGE_CREATING_BOM = "Creating BOM version %s with %d component(s)"

SERIAL_NUMBER_MIN_VERSION = 1.1
METADATA_MIN_VERSION = 1.2


@dataclass(frozen=True)
class BomOptions:
    """
    Caller choices that shape the assembled BOM.

    Attributes:
        include_serial_number: Emit a ``urn:uuid`` serial number (1.1+)
        output_format: xml, json or all; anything else is a caller error
    """
    include_serial_number: bool = True
    output_format: str = "all"

    @property
    def formats(self) -> List[BomFormat]:
        return resolve_output_formats(self.output_format)


class BomAssembler:
    """
    Builds the immutable BOM handed to the serializer.

    The component list is always present. Older schema versions silently
    drop the fields they cannot represent: no serial number before 1.1, no
    metadata or dependency graph before 1.2.
    """

    def __init__(self):
        self._assembly_statistics = {
            "boms_assembled": 0,
            "components_emitted": 0
        }

    def assemble(
        self,
        components: Iterable[Component],
        dependencies: Iterable[Dependency],
        root: Union[Metadata, Component],
        schema_version: Union[SchemaVersion, str],
        options: Optional[BomOptions] = None
    ) -> Bom:
        """
        Assemble the BOM model.

        Args:
            components: Finalized components, root excluded
            dependencies: Finalized adjacency records
            root: Project metadata, or the bare root component
            schema_version: Target CycloneDX version
            options: Serial number and output format choices

        Returns:
            Immutable BOM model

        Raises:
            UnsupportedOutputFormatError: If the output format is not recognized
        """
        options = options or BomOptions()
        # fail before building anything
        resolve_output_formats(options.output_format)

        if not isinstance(schema_version, SchemaVersion):
            schema_version = SchemaVersion.from_string(schema_version)

        component_list = tuple(components)
        logger.info(MESSAGE_CREATING_BOM, schema_version.version_string, len(component_list))

        serial_number = None
        if options.include_serial_number and schema_version.version >= SERIAL_NUMBER_MIN_VERSION:
            serial_number = f"urn:uuid:{uuid.uuid4()}"

        metadata = None
        dependency_list = None
        if schema_version.version >= METADATA_MIN_VERSION:
            metadata = root if isinstance(root, Metadata) else Metadata(component=root)
            dependency_list = tuple(dependencies)

        self._assembly_statistics["boms_assembled"] += 1
        self._assembly_statistics["components_emitted"] += len(component_list)

        return Bom(
            schema_version=schema_version,
            components=component_list,
            serial_number=serial_number,
            metadata=metadata,
            dependencies=dependency_list
        )

    @staticmethod
    def with_root(metadata: Metadata, root_component: Component) -> Metadata:
        """Return metadata whose component is the finalized root."""
        return replace(metadata, component=root_component)

    def get_assembly_statistics(self):
        return self._assembly_statistics.copy()
