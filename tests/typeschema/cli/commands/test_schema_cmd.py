"""Tests for typeschema.cli.commands.schema_cmd module."""

import json
from dataclasses import dataclass
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml
from typer.testing import CliRunner

from typeschema.adapters.python import OpenApiByFields, annotate
from typeschema.cli.commands.schema_cmd import _config, app
from typeschema.kernel.config import GeneratorConfig, TypeSchemaConfig


@dataclass
class Address:
    city: str


@dataclass
class Customer:
    name: str
    age: int
    address: Address


@annotate(OpenApiByFields())
class Node:
    next: "Node"


@pytest.fixture
def runner():
    """Fixture providing a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def empty_cwd(tmp_path, monkeypatch):
    """Run commands where no configuration file can be discovered."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TYPESCHEMA_CONFIG_PATH", raising=False)


class TestJsonCommand:
    """Test the json command."""

    def test_prints_json_schema(self, runner):
        """Test the schema of a type is printed as JSON."""
        result = runner.invoke(app, ["json", f"{__name__}:Customer"])

        assert result.exit_code == 0
        schema = json.loads(result.stdout)
        assert schema["$schema"] == "http://json-schema.org/draft-07/schema#"
        assert schema["properties"]["address"]["properties"] == {"city": {"type": "string"}}
        assert schema["required"] == ["age"]

    def test_recursive_type(self, runner):
        """Test recursive types are emitted with definitions."""
        result = runner.invoke(app, ["json", f"{__name__}:Node"])

        assert result.exit_code == 0
        schema = json.loads(result.stdout)
        assert schema["properties"]["next"] == {"$ref": "#/definitions/Node"}
        assert "Node" in schema["definitions"]

    def test_yaml_format(self, runner):
        """Test YAML output."""
        result = runner.invoke(app, ["json", f"{__name__}:Address", "--format", "yaml"])

        assert result.exit_code == 0
        assert yaml.safe_load(result.stdout)["properties"] == {"city": {"type": "string"}}

    def test_unknown_format(self, runner):
        """Test an unsupported format fails with a hint."""
        result = runner.invoke(app, ["json", f"{__name__}:Address", "--format", "xml"])
        assert result.exit_code == 1

    def test_unresolvable_target(self, runner):
        """Test a target that cannot be imported fails."""
        result = runner.invoke(app, ["json", "no_such_module_xyz:Thing"])
        assert result.exit_code == 1

    def test_pretty_output(self, runner):
        """Test --pretty renders a panel titled with the target."""
        result = runner.invoke(app, ["json", f"{__name__}:Address", "--pretty"])

        assert result.exit_code == 0
        assert "JSON Schema" in result.stdout
        assert "city" in result.stdout


class TestComponentsCommand:
    """Test the components command."""

    def test_prints_components(self, runner):
        """Test root types and their references are listed under components.schemas."""
        result = runner.invoke(app, ["components", f"{__name__}:Customer"])

        assert result.exit_code == 0
        schemas = json.loads(result.stdout)["components"]["schemas"]
        assert list(schemas) == ["Customer", "Address"]
        assert schemas["Customer"]["properties"]["address"] == {
            "$ref": "#/components/schemas/Address"
        }

    def test_multiple_roots(self, runner):
        """Test several roots are resolved into one document."""
        result = runner.invoke(app, ["components", f"{__name__}:Node", f"{__name__}:Address"])

        assert result.exit_code == 0
        assert list(json.loads(result.stdout)["components"]["schemas"]) == ["Node", "Address"]

    def test_writes_output_file(self, runner, tmp_path):
        """Test --output writes the document and reports up-to-date files."""
        output = tmp_path / "schemas" / "components.yaml"
        args = ["components", f"{__name__}:Customer", "-f", "yaml", "-o", str(output)]

        first = runner.invoke(app, args)
        assert first.exit_code == 0
        assert output.exists()
        content = output.read_text(encoding="utf-8")
        assert content.endswith("\n")
        assert "Customer" in yaml.safe_load(content)["components"]["schemas"]

        second = runner.invoke(app, args)
        assert second.exit_code == 0
        assert output.read_text(encoding="utf-8") == content

    def test_requires_targets(self, runner):
        """Test at least one target is required."""
        result = runner.invoke(app, ["components"])
        assert result.exit_code != 0


class TestConfig:
    """Test configuration lookup for commands."""

    def test_uses_context_config(self):
        """Test the configuration stored by the main callback is reused."""
        config = TypeSchemaConfig(generator=GeneratorConfig(require_non_nulls_by_default=False))
        ctx = MagicMock()
        ctx.obj = {"config": config}

        assert _config(ctx) is config

    def test_loads_config_without_context(self, tmp_path: Path):
        """Test the configuration is discovered when run standalone."""
        (tmp_path / "pyproject.toml").write_text(
            "[tool.typeschema]\nrequire_non_nulls_by_default = false\n", encoding="utf-8"
        )
        ctx = MagicMock()
        ctx.obj = None

        assert _config(ctx).generator.require_non_nulls_by_default is False
