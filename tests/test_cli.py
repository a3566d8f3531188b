"""Tests for the click CLI."""

import json
from pathlib import Path

from click.testing import CliRunner

from alias_graph.cli import cli

FIXTURES = Path(__file__).parent / "fixtures"
ALIASES = str(FIXTURES / "aliases.yaml")
ACYCLIC = str(FIXTURES / "acyclic.json")


def _run(*args):
    return CliRunner().invoke(cli, list(args))


class TestCheck:
    def test_reports_cycles(self):
        result = _run("check", ALIASES)
        assert result.exit_code == 1
        assert "::ping, ::pong" in result.output
        assert "::broken -> missing" in result.output

    def test_clean(self):
        result = _run("check", ACYCLIC)
        assert result.exit_code == 0
        assert "No circular aliases found." in result.output

    def test_json(self):
        result = _run("check", ACYCLIC, "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["order"] == ["::id", "::name", "::name_list", "::callback"]

    def test_guarded_lazy(self):
        result = _run("check", ALIASES, "--guarded", "--lazy", "--json")
        data = json.loads(result.output)
        assert "::Core::json" not in data["circular"]
        assert result.exit_code == 1

    def test_invalid_document(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"aliases": [{"name": "Bad", "type": {"kind": "base", "name": "nil"}}]}')
        result = _run("check", str(path))
        assert result.exit_code == 1
        assert "Invalid definitions document" in result.output


class TestDeps:
    def test_deps(self):
        result = _run("deps", ALIASES, "::user")
        assert result.exit_code == 0
        assert "::Core::str, ::ping" in result.output
        assert "circular" not in result.output

    def test_circular(self):
        result = _run("deps", ALIASES, "ping")
        assert result.exit_code == 0
        assert "circular:   ::ping, ::pong" in result.output

    def test_unknown(self):
        result = _run("deps", ALIASES, "nope")
        assert result.exit_code == 1
        assert "Unknown entity" in result.output


class TestOrder:
    def test_order(self):
        result = _run("order", ACYCLIC)
        assert result.exit_code == 0
        assert result.output.split() == ["::id", "::name", "::name_list", "::callback"]

    def test_cycle(self):
        result = _run("order", ALIASES)
        assert result.exit_code == 1
        assert "Circular dependency" in result.output


class TestComponents:
    def test_components(self):
        result = _run("components", ALIASES)
        assert result.exit_code == 0
        assert "::ping, ::pong" in result.output
