from __future__ import annotations

import json

import yaml
from click.testing import CliRunner

from bom_normalizer.cli import cli

ROOT = "pkg:maven/org.acme/app@1.0.0?type=jar"
CORE = "pkg:maven/org.acme/core@2.1.0?type=jar"


def _write_contribution(tmp_path):
    path = tmp_path / "app.yaml"
    path.write_text(yaml.safe_dump({
        "project": {"group": "org.acme", "name": "app", "version": "1.0.0"},
        "artifacts": [{"group": "org.acme", "name": "core", "version": "2.1.0", "scope": "compile"}],
        "dependencies": {ROOT: [CORE]},
    }), encoding="utf-8")
    return path


def test_generate_writes_json_bom(tmp_path) -> None:
    contribution = _write_contribution(tmp_path)
    out = tmp_path / "out"

    result = CliRunner().invoke(cli, [
        "generate", str(contribution), "-f", "json", "-o", str(out), "--output-name", "app-bom",
        "--project-type", "application",
    ])

    assert result.exit_code == 0, result.output
    assert "Components: 1" in result.output
    document = json.loads((out / "app-bom.json").read_text(encoding="utf-8"))
    assert document["metadata"]["component"]["type"] == "application"
    assert document["dependencies"] == [{"ref": ROOT, "dependsOn": [CORE]}]
    assert not (out / "app-bom.xml").exists()


def test_generate_old_schema_without_serial(tmp_path) -> None:
    contribution = _write_contribution(tmp_path)

    result = CliRunner().invoke(cli, [
        "generate", str(contribution), "--schema-version", "1.1", "--no-serial-number",
        "-f", "json", "-o", str(tmp_path),
    ])

    assert result.exit_code == 0, result.output
    document = json.loads((tmp_path / "bom.json").read_text(encoding="utf-8"))
    assert document["specVersion"] == "1.1"
    assert "serialNumber" not in document
    assert "metadata" not in document


def test_generate_unsupported_format_exits_1(tmp_path) -> None:
    contribution = _write_contribution(tmp_path)

    result = CliRunner().invoke(cli, ["generate", str(contribution), "-f", "spdx", "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "Unsupported output format 'spdx'" in result.output


def test_generate_malformed_contribution_exits_1(tmp_path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("artifacts: []\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["generate", str(path)])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_generate_skip_from_environment(tmp_path) -> None:
    contribution = _write_contribution(tmp_path)

    result = CliRunner().invoke(cli, ["generate", str(contribution), "-o", str(tmp_path / "out")],
                                env={"BOM_SKIP": "true"})

    assert result.exit_code == 0
    assert "BOM generation skipped" in result.output
    assert not (tmp_path / "out").exists()


def test_config_command_json(tmp_path) -> None:
    config_file = tmp_path / "bom.yaml"
    config_file.write_text(yaml.safe_dump({"bom": {"output_name": "custom"}}), encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(config_file), "config", "--format", "json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["bom"]["output_name"] == "custom"


def test_config_command_table() -> None:
    result = CliRunner().invoke(cli, ["config"])

    assert result.exit_code == 0
    assert "[BOM]" in result.output
    assert "schema_version: 1.4" in result.output
