from __future__ import annotations

import json

import pytest
import yaml

from bom_normalizer.config import AppConfig, BomConfig, ConfigManager, ScopeFilter
from bom_normalizer.error_handling import ExtractionError
from bom_normalizer.models import UsageScope
from bom_normalizer.orchestrator import BomGenerationRun
from bom_normalizer.scanners import ContributionLoader, ModuleExtractor

ROOT = "pkg:maven/org.acme/app@1.0.0?type=jar"
CORE = "pkg:maven/org.acme/core@2.1.0?type=jar"

MODULE = {
    "project": {"group": "org.acme", "name": "app", "version": "1.0.0", "packaging": "jar"},
    "artifacts": [
        {"group": "org.acme", "name": "core", "version": "2.1.0", "scope": "compile"},
    ],
    "usage_report": {
        "used_declared": [{"group": "org.acme", "name": "core", "version": "2.1.0"}],
    },
    "dependencies": {ROOT: [CORE]},
}


def test_load_yaml_document(tmp_path) -> None:
    path = tmp_path / "app.yaml"
    path.write_text(yaml.safe_dump(MODULE), encoding="utf-8")

    (contribution,) = ContributionLoader().load_file(path)

    assert contribution.project.name == "app"
    assert contribution.artifacts[0].scope == "compile"
    assert contribution.dependencies == {ROOT: [CORE]}

    result = ModuleExtractor().extract_single(contribution)
    assert result.registry.get(CORE).scope is UsageScope.REQUIRED


def test_load_json_document_with_modules(tmp_path) -> None:
    path = tmp_path / "modules.json"
    second = dict(MODULE, project={"group": "org.acme", "name": "lib", "version": "1.0.0"})
    path.write_text(json.dumps({"modules": [MODULE, second]}), encoding="utf-8")

    loader = ContributionLoader()
    contributions = loader.load_file(path)

    assert [c.project.name for c in contributions] == ["app", "lib"]
    assert contributions[1].usage_report is not None
    assert loader.get_load_statistics()["modules_loaded"] == 2


def test_missing_usage_report_stays_none(tmp_path) -> None:
    path = tmp_path / "app.yaml"
    module = {key: value for key, value in MODULE.items() if key != "usage_report"}
    path.write_text(yaml.safe_dump(module), encoding="utf-8")

    (contribution,) = ContributionLoader().load_file(path)

    assert contribution.usage_report is None


@pytest.mark.parametrize("content", [
    "project: [unclosed",
    "- just\n- a list\n",
    "artifacts: []\n",
    "project: {group: org.acme}\n",
])
def test_malformed_documents_raise_extraction_error(tmp_path, content) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ExtractionError) as excinfo:
        ContributionLoader().load_file(path)

    assert excinfo.value.source_file == str(path)


def test_missing_file_raises_extraction_error(tmp_path) -> None:
    with pytest.raises(ExtractionError):
        ContributionLoader().load_file(tmp_path / "absent.yaml")


def test_default_configuration() -> None:
    config = ConfigManager().load_config()

    assert config.bom == BomConfig()
    assert config.logging.level == "INFO"


def test_configuration_layers(tmp_path, monkeypatch) -> None:
    config_file = tmp_path / "bom.yaml"
    config_file.write_text(yaml.safe_dump({
        "bom": {"schema_version": 1.2, "output_name": "${BOM_TEST_NAME}", "exclude_types": "pom, war"},
        "logging": {"level": "debug"},
    }), encoding="utf-8")
    monkeypatch.setenv("BOM_TEST_NAME", "from-env")
    monkeypatch.setenv("BOM_INCLUDE_TEST_SCOPE", "true")
    monkeypatch.setenv("BOM_OUTPUT_FORMAT", "xml")

    config = ConfigManager(config_file).load_config({"bom": {"output_format": "json"}})

    assert config.bom.schema_version == "1.2"
    assert config.bom.output_name == "from-env"
    assert config.bom.exclude_types == ["pom", "war"]
    assert config.bom.include_test_scope is True
    assert config.bom.output_format == "json"
    assert config.logging.level == "DEBUG"


def test_schema_version_from_env_stays_string(monkeypatch) -> None:
    monkeypatch.setenv("BOM_SCHEMA_VERSION", "1.3")
    assert ConfigManager().load_config().bom.schema_version == "1.3"


@pytest.mark.parametrize("overrides", [
    {"logging": {"level": "LOUD"}},
    {"bom": {"project_type": "spaceship"}},
])
def test_invalid_configuration_raises(overrides) -> None:
    with pytest.raises(ValueError):
        ConfigManager().load_config(overrides)


def test_scope_filter_order_and_membership() -> None:
    scope_filter = ScopeFilter.from_config(BomConfig(include_provided_scope=False, include_test_scope=True))

    assert scope_filter.scopes == ["compile", "runtime", "system", "test"]
    assert scope_filter.includes(None)
    assert scope_filter.includes("TEST")
    assert not scope_filter.includes("provided")
    assert not scope_filter.includes("import")


def test_unquoted_versions_stay_text(tmp_path) -> None:
    path = tmp_path / "app.yaml"
    path.write_text(
        "project: {group: org.acme, name: app, version: 2.10}\n"
        "artifacts:\n"
        "  - {group: org.acme, name: core, version: 1.10, scope: compile, optional: false}\n"
        "dependencies:\n"
        "  \"pkg:maven/org.acme/app@2.10?type=jar\": [\"pkg:maven/org.acme/core@1.10?type=jar\"]\n",
        encoding="utf-8",
    )

    (contribution,) = ContributionLoader().load_file(path)

    assert contribution.project.version == "2.10"
    assert contribution.artifacts[0].version == "1.10"
    assert contribution.artifacts[0].optional is False

    bom = BomGenerationRun(AppConfig(), export=False).execute([contribution])
    root = "pkg:maven/org.acme/app@2.10?type=jar"
    assert bom.metadata.component.bom_ref == root
    assert [c.bom_ref for c in bom.components] == ["pkg:maven/org.acme/core@1.10?type=jar"]
    assert bom.get_dependency(root).depends_on == ("pkg:maven/org.acme/core@1.10?type=jar",)


def test_json_number_version_stays_text(tmp_path) -> None:
    path = tmp_path / "app.json"
    path.write_text('{"project": {"group": "org.acme", "name": "app", "version": 3.0}}', encoding="utf-8")

    (contribution,) = ContributionLoader().load_file(path)

    assert contribution.project.version == "3.0"


def test_numeric_coordinates_in_parsed_document_are_rejected() -> None:
    document = {"project": {"group": "org.acme", "name": "app", "version": 1.1}}

    with pytest.raises(ExtractionError, match="'version' must be a string"):
        ContributionLoader().load_document(document, source_file="app.yaml")
