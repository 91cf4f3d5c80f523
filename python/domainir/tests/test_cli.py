"""Tests for the domainir CLI."""

from __future__ import annotations

import json

import msgpack
import pytest
from typer.testing import CliRunner

from domainir.cli import app

runner = CliRunner()


def _write(path, data):
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def units(tmp_path):
    """Directory with a consistent pair of models."""
    directory = tmp_path / "models"
    directory.mkdir()
    _write(
        directory / "user.json",
        {
            "name": "User",
            "module": "auth",
            "fields": [{"name": "id", "type": "integer", "primaryKey": True, "autoIncrement": True}],
            "relations": [
                {
                    "name": "posts",
                    "type": "hasMany",
                    "target": "Post",
                    "foreignKey": "authorId",
                    "inverseSide": "author",
                }
            ],
            "access": {"read": ["user"]},
        },
    )
    _write(
        directory / "post.json",
        {
            "name": "Post",
            "module": "cms",
            "fields": [
                {"name": "id", "type": "integer", "primaryKey": True, "autoIncrement": True},
                {"name": "authorId", "type": "integer", "required": True},
            ],
            "relations": [
                {
                    "name": "author",
                    "type": "belongsTo",
                    "target": "User",
                    "foreignKey": "authorId",
                    "inverseSide": "posts",
                }
            ],
            "access": {"read": ["user"], "create": ["user"]},
        },
    )
    return directory


@pytest.fixture
def dangling(tmp_path):
    return _write(
        tmp_path / "dangling.json",
        {
            "name": "Bar",
            "fields": [{"name": "id", "type": "integer", "primaryKey": True}],
            "relations": [
                {"name": "foo", "type": "belongsTo", "target": "Foo", "foreignKey": "fooId"}
            ],
        },
    )


class TestCheck:
    """Test the check command."""

    def test_valid_units(self, units):
        """Test a consistent model set passes."""
        result = runner.invoke(app, ["check", str(units)])
        assert result.exit_code == 0, result.output
        assert "Registered 2 model(s)" in result.output
        assert "Schema is valid" in result.output

    def test_compile_errors(self, dangling):
        """Test relation errors fail the check."""
        result = runner.invoke(app, ["check", str(dangling)])
        assert result.exit_code == 1
        assert "Compilation failed with 2 error(s)" in result.output
        assert "Bar.foo" in result.output

    def test_registration_errors(self, tmp_path):
        """Test an invalid declaration fails before compiling."""
        path = _write(tmp_path / "bad.json", {"name": "Foo", "fields": []})
        result = runner.invoke(app, ["check", str(path)])
        assert result.exit_code == 1
        assert "Registration failed" in result.output

    def test_unknown_unit(self):
        """Test an unimportable unit fails cleanly."""
        result = runner.invoke(app, ["check", "no_such_models_pkg.models"])
        assert result.exit_code == 1
        assert "Registration failed" in result.output


class TestCompile:
    """Test the compile command."""

    def test_stdout(self, units):
        """Test JSON goes to stdout by default."""
        result = runner.invoke(app, ["compile", str(units)])
        assert result.exit_code == 0, result.output
        assert '"version": 1' in result.output
        assert '"name": "Post"' in result.output

    def test_json_file(self, units, tmp_path):
        """Test the artifact can be written as JSON."""
        output = tmp_path / "out" / "schema.json"
        result = runner.invoke(app, ["compile", str(units), "--output", str(output)])
        assert result.exit_code == 0, result.output
        assert "Wrote 2 model(s)" in result.output

        data = json.loads(output.read_text())
        assert [m["name"] for m in data["models"]] == ["Post", "User"]

    def test_msgpack_file(self, units, tmp_path):
        """Test the artifact can be written as msgpack."""
        output = tmp_path / "schema.bin"
        result = runner.invoke(app, ["compile", str(units), "-f", "msgpack", "-o", str(output)])
        assert result.exit_code == 0, result.output

        data = msgpack.unpackb(output.read_bytes(), raw=False)
        assert data["version"] == 1
        assert len(data["graph"]) == 2

    def test_msgpack_needs_output(self, units):
        """Test msgpack is refused on stdout."""
        result = runner.invoke(app, ["compile", str(units), "--format", "msgpack"])
        assert result.exit_code == 1
        assert "requires --output" in result.output

    def test_unknown_format(self, units):
        """Test unknown formats are refused."""
        result = runner.invoke(app, ["compile", str(units), "--format", "xml"])
        assert result.exit_code == 1
        assert "Unknown format" in result.output

    def test_compile_errors(self, dangling, tmp_path):
        """Test nothing is written when compilation fails."""
        output = tmp_path / "schema.json"
        result = runner.invoke(app, ["compile", str(dangling), "-o", str(output)])
        assert result.exit_code == 1
        assert not output.exists()


class TestList:
    """Test the list command."""

    def test_lists_models(self, units):
        """Test every model is listed in registration order."""
        result = runner.invoke(app, ["list", str(units)])
        assert result.exit_code == 0, result.output
        assert "Found 2 model(s):" in result.output
        assert result.output.index("Post") < result.output.index("User")

    def test_module_filter(self, units):
        """Test --module narrows the listing."""
        result = runner.invoke(app, ["list", str(units), "--module", "auth"])
        assert "Found 1 model(s):" in result.output
        assert "User [auth]" in result.output

    def test_no_match(self, units):
        """Test an unknown module reports nothing found."""
        result = runner.invoke(app, ["list", str(units), "--module", "billing"])
        assert result.exit_code == 0
        assert "No models found" in result.output


class TestDescribe:
    """Test the describe command."""

    def test_declaration(self, units):
        """Test the declaration is printed as JSON."""
        result = runner.invoke(app, ["describe", str(units), "--model", "Post"])
        assert result.exit_code == 0, result.output
        assert '"name": "Post"' in result.output
        assert '"authorId"' in result.output

    def test_compiled(self, units):
        """Test --compiled prints the compiled record."""
        result = runner.invoke(app, ["describe", str(units), "-m", "User", "--compiled"])
        assert result.exit_code == 0, result.output
        assert '"accessPolicy"' in result.output
        assert '"targetTable": "post"' in result.output

    def test_unknown_model(self, units):
        """Test an unknown model name fails."""
        result = runner.invoke(app, ["describe", str(units), "-m", "Ghost"])
        assert result.exit_code == 1
        assert "Ghost" in result.output
