from __future__ import annotations

import pytest

from bom_normalizer.error_handling import ConfigurationError, UnsupportedOutputFormatError
from bom_normalizer.generators import (
    ANALYSIS_PROPERTY, BomAssembler, BomFormat, BomOptions, ModelConverter, resolve_output_formats
)
from bom_normalizer.models import Artifact, Component, ComponentType, Dependency, SchemaVersion

ROOT = "pkg:maven/org.acme/app@1.0.0?type=jar"
CORE = "pkg:maven/org.acme/core@2.1.0?type=jar"


@pytest.fixture
def metadata(project):
    return ModelConverter().convert_project(project, "makeBom compile+runtime", "application")


@pytest.fixture
def components():
    return [Component(bom_ref=CORE, name="core", version="2.1.0", purl=CORE)]


@pytest.fixture
def dependencies():
    return [Dependency(ref=ROOT, depends_on=(CORE,))]


def test_schema_10_has_no_metadata_dependencies_or_serial(metadata, components, dependencies) -> None:
    bom = BomAssembler().assemble(components, dependencies, metadata, "1.0", BomOptions())

    assert bom.schema_version is SchemaVersion.VERSION_10
    assert bom.component_count == 1
    assert bom.serial_number is None
    assert bom.metadata is None
    assert bom.dependencies is None


def test_schema_11_adds_serial_number_only(metadata, components, dependencies) -> None:
    bom = BomAssembler().assemble(components, dependencies, metadata, "1.1")

    assert bom.serial_number.startswith("urn:uuid:")
    assert bom.metadata is None
    assert bom.dependencies is None


def test_schema_14_populates_everything(metadata, components, dependencies) -> None:
    bom = BomAssembler().assemble(
        components, dependencies, metadata, SchemaVersion.VERSION_14, BomOptions(include_serial_number=True)
    )

    assert bom.serial_number.startswith("urn:uuid:")
    assert bom.metadata.component.bom_ref == ROOT
    assert bom.metadata.get_property(ANALYSIS_PROPERTY) == "makeBom compile+runtime"
    assert bom.dependencies == (Dependency(ref=ROOT, depends_on=(CORE,)),)


def test_schema_14_without_serial_number(metadata, components, dependencies) -> None:
    bom = BomAssembler().assemble(
        components, dependencies, metadata, "1.4", BomOptions(include_serial_number=False)
    )
    assert bom.serial_number is None
    assert bom.metadata is not None


def test_serial_numbers_are_unique(metadata, components) -> None:
    assembler = BomAssembler()
    first = assembler.assemble(components, [], metadata, "1.4")
    second = assembler.assemble(components, [], metadata, "1.4")
    assert first.serial_number != second.serial_number


def test_bare_root_component_is_wrapped_in_metadata(components) -> None:
    root = Component(bom_ref=ROOT, name="app", version="1.0.0")
    bom = BomAssembler().assemble(components, [], root, "1.2")
    assert bom.metadata.component is root
    assert bom.dependencies == ()


def test_unknown_schema_version_falls_back_to_latest(metadata, components) -> None:
    bom = BomAssembler().assemble(components, [], metadata, "2.7")
    assert bom.schema_version is SchemaVersion.latest()


def test_unsupported_output_format_is_raised(metadata, components) -> None:
    with pytest.raises(UnsupportedOutputFormatError) as excinfo:
        BomAssembler().assemble(components, [], metadata, "1.4", BomOptions(output_format="spdx"))

    assert isinstance(excinfo.value, ConfigurationError)
    assert "Valid options are XML and JSON" in str(excinfo.value)


def test_creating_bom_message_is_logged(metadata, components, caplog) -> None:
    with caplog.at_level("INFO", logger="bom_normalizer.generators.bom_assembler"):
        BomAssembler().assemble(components, [], metadata, "1.3")
    assert "Creating BOM version 1.3 with 1 component(s)" in caplog.text


@pytest.mark.parametrize("value,expected", [
    ("all", [BomFormat.XML, BomFormat.JSON]),
    ("ALL", [BomFormat.XML, BomFormat.JSON]),
    ("xml", [BomFormat.XML]),
    ("Json", [BomFormat.JSON]),
])
def test_resolve_output_formats(value, expected) -> None:
    assert resolve_output_formats(value) == expected


@pytest.mark.parametrize("value", ["", None, "yaml"])
def test_resolve_output_formats_rejects_unknown(value) -> None:
    with pytest.raises(UnsupportedOutputFormatError):
        resolve_output_formats(value)


def test_convert_project_builds_metadata(project) -> None:
    metadata = ModelConverter().convert_project(project, "makeAggregateBom compile", "library")

    assert metadata.component.purl == ROOT
    assert metadata.component.component_type is ComponentType.LIBRARY
    assert metadata.component.description == "Acme app"
    assert metadata.tools[0].name == "bom-normalizer"


def test_convert_project_rejects_unknown_type(project) -> None:
    with pytest.raises(ConfigurationError):
        ModelConverter().convert_project(project, "makeBom compile", "spaceship")


def test_package_url_includes_classifier() -> None:
    artifact = Artifact(group="org.acme", name="core", version="2.1.0", classifier="sources")
    assert ModelConverter().generate_package_url(artifact) == (
        "pkg:maven/org.acme/core@2.1.0?classifier=sources&type=jar"
    )
