"""
CycloneDX formatters and structural validator for BOM models.
"""

import json
import logging
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Any, Dict, List

from ..error_handling import BomValidationError
from ..models import Bom, Component, Metadata, SchemaVersion
from .base_generator import BaseFormatter, BomFormat

logger = logging.getLogger(__name__)

CYCLONEDX_NAMESPACE = "http://cyclonedx.org/schema/bom/{version}"

MESSAGE_VALIDATION_FAILURE = "The BOM does not conform to the CycloneDX BOM standard"

BOM_REF_MIN_VERSION = 1.1
PROPERTIES_MIN_VERSION = 1.3


def _format_timestamp(timestamp: datetime) -> str:
    return timestamp.replace(microsecond=0).isoformat() + "Z"


class CycloneDXJsonFormatter(BaseFormatter):
    """
    Renders a BOM as a CycloneDX JSON document.

    Only the fields the model populates are written, so a BOM assembled for
    an old schema version simply has no metadata or dependencies keys.
    """

    def __init__(self, indent: int = 2):
        self.indent = indent

    @property
    def format_name(self) -> str:
        return "JSON"

    @property
    def file_extension(self) -> str:
        return "json"

    def format_bom(self, bom: Bom) -> str:
        """
        Format a BOM as CycloneDX JSON.

        Args:
            bom: BOM to format

        Returns:
            JSON document
        """
        return json.dumps(self.to_dict(bom), indent=self.indent)

    def to_dict(self, bom: Bom) -> Dict[str, Any]:
        version = bom.schema_version
        document: Dict[str, Any] = {
            "bomFormat": "CycloneDX",
            "specVersion": version.version_string
        }
        if bom.serial_number:
            document["serialNumber"] = bom.serial_number
        document["version"] = bom.version

        if bom.metadata is not None:
            document["metadata"] = self._metadata_to_dict(bom.metadata, version)

        document["components"] = [
            self._component_to_dict(component, version) for component in bom.components
        ]

        if bom.dependencies is not None:
            document["dependencies"] = [dependency.to_dict() for dependency in bom.dependencies]

        return document

    def _metadata_to_dict(self, metadata: Metadata, version: SchemaVersion) -> Dict[str, Any]:
        result: Dict[str, Any] = {"timestamp": _format_timestamp(metadata.timestamp)}
        if metadata.tools:
            result["tools"] = [
                {"vendor": tool.vendor, "name": tool.name, "version": tool.version}
                for tool in metadata.tools
            ]
        result["component"] = self._component_to_dict(metadata.component, version)
        if metadata.properties and version.version >= PROPERTIES_MIN_VERSION:
            result["properties"] = [
                {"name": name, "value": value} for name, value in metadata.properties
            ]
        return result

    def _component_to_dict(self, component: Component, version: SchemaVersion) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": component.component_type.value}
        if version.version >= BOM_REF_MIN_VERSION:
            result["bom-ref"] = component.bom_ref
        if component.group:
            result["group"] = component.group
        result["name"] = component.name
        result["version"] = component.version
        if component.description:
            result["description"] = component.description
        if component.scope.is_known:
            result["scope"] = component.scope.value
        if component.purl:
            result["purl"] = component.purl
        return result


class CycloneDXXmlFormatter(BaseFormatter):
    """Renders a BOM as a CycloneDX XML document."""

    @property
    def format_name(self) -> str:
        return "XML"

    @property
    def file_extension(self) -> str:
        return "xml"

    def format_bom(self, bom: Bom) -> str:
        """
        Format a BOM as CycloneDX XML.

        Args:
            bom: BOM to format

        Returns:
            XML document with declaration
        """
        version = bom.schema_version
        attributes = {
            "xmlns": CYCLONEDX_NAMESPACE.format(version=version.version_string),
            "version": str(bom.version)
        }
        if bom.serial_number:
            attributes["serialNumber"] = bom.serial_number

        root = ET.Element("bom", attributes)

        if bom.metadata is not None:
            self._add_metadata(root, bom.metadata, version)

        components_elem = ET.SubElement(root, "components")
        for component in bom.components:
            self._add_component(components_elem, component, version)

        if bom.dependencies is not None:
            deps_elem = ET.SubElement(root, "dependencies")
            for dependency in bom.dependencies:
                dep_elem = ET.SubElement(deps_elem, "dependency", {"ref": dependency.ref})
                for target in dependency.depends_on:
                    ET.SubElement(dep_elem, "dependency", {"ref": target})

        ET.indent(root)
        return ET.tostring(root, encoding="unicode", xml_declaration=True)

    def _add_metadata(self, parent: ET.Element, metadata: Metadata, version: SchemaVersion) -> None:
        meta_elem = ET.SubElement(parent, "metadata")
        ET.SubElement(meta_elem, "timestamp").text = _format_timestamp(metadata.timestamp)

        if metadata.tools:
            tools_elem = ET.SubElement(meta_elem, "tools")
            for tool in metadata.tools:
                tool_elem = ET.SubElement(tools_elem, "tool")
                ET.SubElement(tool_elem, "vendor").text = tool.vendor
                ET.SubElement(tool_elem, "name").text = tool.name
                ET.SubElement(tool_elem, "version").text = tool.version

        self._add_component(meta_elem, metadata.component, version)

        if metadata.properties and version.version >= PROPERTIES_MIN_VERSION:
            props_elem = ET.SubElement(meta_elem, "properties")
            for name, value in metadata.properties:
                ET.SubElement(props_elem, "property", {"name": name}).text = value

    def _add_component(self, parent: ET.Element, component: Component, version: SchemaVersion) -> None:
        attributes = {"type": component.component_type.value}
        if version.version >= BOM_REF_MIN_VERSION:
            attributes["bom-ref"] = component.bom_ref

        comp_elem = ET.SubElement(parent, "component", attributes)
        if component.group:
            ET.SubElement(comp_elem, "group").text = component.group
        ET.SubElement(comp_elem, "name").text = component.name
        ET.SubElement(comp_elem, "version").text = component.version
        if component.description:
            ET.SubElement(comp_elem, "description").text = component.description
        if component.scope.is_known:
            ET.SubElement(comp_elem, "scope").text = component.scope.value
        if component.purl:
            ET.SubElement(comp_elem, "purl").text = component.purl


class CycloneDXFormatter:
    """Dispatches a BOM to the formatter for the requested document format."""

    def __init__(self):
        self._formatters: Dict[BomFormat, BaseFormatter] = {
            BomFormat.XML: CycloneDXXmlFormatter(),
            BomFormat.JSON: CycloneDXJsonFormatter()
        }

    def get_formatter(self, bom_format: BomFormat) -> BaseFormatter:
        return self._formatters[bom_format]

    def format_bom(self, bom: Bom, bom_format: BomFormat) -> str:
        formatted = self._formatters[bom_format].format_bom(bom)
        logger.debug(f"Formatted BOM as {bom_format.value} ({len(formatted)} characters)")
        return formatted


class BomValidator:
    """
    Structural validator for serialized CycloneDX documents.

    Checks what the normalizer itself is responsible for: the document
    parses, declares the expected schema version, every component has a
    name and version, bom-refs are unique and dependency records are
    well formed.
    """

    def validate(self, content: str, bom_format: BomFormat, schema_version: SchemaVersion) -> None:
        """
        Validate a serialized BOM.

        Args:
            content: Serialized document
            bom_format: Format of the document
            schema_version: Version the document must declare

        Raises:
            BomValidationError: If the document does not conform
        """
        if bom_format is BomFormat.JSON:
            problems = self._check_json(content, schema_version)
        else:
            problems = self._check_xml(content, schema_version)

        if problems:
            for problem in problems:
                logger.warning(f"  - {problem}")
            raise BomValidationError(
                MESSAGE_VALIDATION_FAILURE,
                bom_format=bom_format.value,
                invalid_fields=problems
            )

    def is_valid(self, content: str, bom_format: BomFormat, schema_version: SchemaVersion) -> bool:
        try:
            self.validate(content, bom_format, schema_version)
        except BomValidationError:
            return False
        return True

    def _check_json(self, content: str, schema_version: SchemaVersion) -> List[str]:
        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            return [f"Invalid JSON: {e}"]

        if not isinstance(document, dict):
            return ["Document is not a JSON object"]

        problems: List[str] = []
        if document.get("bomFormat") != "CycloneDX":
            problems.append("bomFormat must be 'CycloneDX'")
        if document.get("specVersion") != schema_version.version_string:
            problems.append(
                f"specVersion {document.get('specVersion')!r} does not match {schema_version.version_string}"
            )

        components = document.get("components", [])
        if not isinstance(components, list):
            return problems + ["components must be a list"]

        metadata = document.get("metadata")
        if metadata is not None and "component" in metadata:
            components = [metadata["component"]] + components

        problems.extend(self._check_components(
            [(c.get("name"), c.get("version"), c.get("bom-ref")) for c in components]
        ))

        for index, dependency in enumerate(document.get("dependencies", [])):
            if not isinstance(dependency.get("ref"), str):
                problems.append(f"Dependency {index} has no ref")
            depends_on = dependency.get("dependsOn", [])
            if not isinstance(depends_on, list) or not all(isinstance(t, str) for t in depends_on):
                problems.append(f"Dependency {index} has malformed dependsOn")

        return problems

    def _check_xml(self, content: str, schema_version: SchemaVersion) -> List[str]:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            return [f"Invalid XML: {e}"]

        namespace = CYCLONEDX_NAMESPACE.format(version=schema_version.version_string)
        ns = {"bom": namespace}

        if root.tag != f"{{{namespace}}}bom":
            return [f"Root element {root.tag} is not a CycloneDX {schema_version.version_string} bom"]

        entries = []
        for component in root.iterfind(".//bom:component", ns):
            entries.append((
                component.findtext("bom:name", namespaces=ns),
                component.findtext("bom:version", namespaces=ns),
                component.get("bom-ref")
            ))
        problems = self._check_components(entries)

        for index, dependency in enumerate(root.iterfind("bom:dependencies/bom:dependency", ns)):
            if not dependency.get("ref"):
                problems.append(f"Dependency {index} has no ref")
            for target in dependency.iterfind("bom:dependency", ns):
                if not target.get("ref"):
                    problems.append(f"Dependency {index} has a target without ref")

        return problems

    @staticmethod
    def _check_components(entries) -> List[str]:
        problems: List[str] = []
        seen_refs: Dict[str, int] = {}
        for index, (name, version, bom_ref) in enumerate(entries):
            if not name:
                problems.append(f"Component {index} missing name")
            if not version:
                problems.append(f"Component {index} ({name}) missing version")
            if bom_ref is not None:
                if bom_ref in seen_refs:
                    problems.append(f"Duplicate bom-ref {bom_ref}")
                seen_refs[bom_ref] = index
        return problems
