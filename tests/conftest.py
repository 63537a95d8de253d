"""Pytest configuration and fixtures for bom-normalizer tests."""
from __future__ import annotations

import pytest

from bom_normalizer.config import AppConfig, BomConfig, reset_config_manager
from bom_normalizer.generators import generate_package_url
from bom_normalizer.logging import close_logging
from bom_normalizer.models import Artifact, ModuleContribution, ProjectDescriptor, UsageReport


ENV_VARS = (
    "BOM_SCHEMA_VERSION", "BOM_OUTPUT_FORMAT", "BOM_OUTPUT_NAME", "BOM_OUTPUT_DIR",
    "BOM_INCLUDE_SERIAL_NUMBER", "BOM_PROJECT_TYPE", "BOM_INCLUDE_COMPILE_SCOPE",
    "BOM_INCLUDE_PROVIDED_SCOPE", "BOM_INCLUDE_RUNTIME_SCOPE", "BOM_INCLUDE_SYSTEM_SCOPE",
    "BOM_INCLUDE_TEST_SCOPE", "BOM_EXCLUDE_TYPES", "BOM_SKIP", "BOM_VERBOSE",
    "LOG_LEVEL", "LOG_FILE", "LOG_FORMAT", "LOG_MAX_SIZE", "LOG_BACKUP_COUNT",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep configuration and logging state from leaking between tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config_manager()

    yield

    reset_config_manager()
    close_logging()


@pytest.fixture
def project() -> ProjectDescriptor:
    return ProjectDescriptor(group="org.acme", name="app", version="1.0.0", description="Acme app")


@pytest.fixture
def core() -> Artifact:
    return Artifact(group="org.acme", name="core", version="2.1.0", scope="compile")


@pytest.fixture
def util() -> Artifact:
    return Artifact(group="org.acme", name="util", version="0.9", scope="runtime")


@pytest.fixture
def junit() -> Artifact:
    return Artifact(group="junit", name="junit", version="4.13.2", scope="test")


@pytest.fixture
def contribution(project, core, util, junit) -> ModuleContribution:
    root = generate_package_url(project.as_artifact())
    return ModuleContribution(
        project=project,
        artifacts=[core, util, junit],
        usage_report=UsageReport.of(used_declared=[core], unused_declared=[util]),
        dependencies={
            root: [generate_package_url(core), generate_package_url(util), generate_package_url(junit)],
            generate_package_url(core): [generate_package_url(util)],
        },
    )


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    return AppConfig(bom=BomConfig(output_directory=str(tmp_path / "target")))
