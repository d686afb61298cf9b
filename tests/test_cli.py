"""End-to-end tests of the specfront command line via Typer's CliRunner."""

from __future__ import annotations

import json
import sys
import textwrap
from pathlib import Path

import pytest
import yaml

from specfront import __version__
from specfront.app import app

PLUGIN = """
    import sys
    from specfront.extensions.plugin import run_plugin
    from specfront.models import ExtensionResponse

    def handle(request):
        if request.extension_name == "x-fail":
            return ExtensionResponse(errors=["cannot compile"])
        if request.extension_name != "x-book":
            return ExtensionResponse(handled=False)
        return ExtensionResponse(handled=True, value=b"compiled")

    sys.exit(run_plugin(handle))
"""


@pytest.fixture()
def doc(isolated_config: Path, write_doc) -> Path:
    write_doc("models.yaml", """
        Pet:
          type: object
          properties:
            name: {type: string}
    """)
    return write_doc("openapi.yaml", """
        swagger: "2.0"
        info:
          title: Petstore
          x-book: {title: Dune}
        definitions:
          Pet:
            $ref: "models.yaml#/Pet"
    """)


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------


class TestGlobalOptions:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_args_shows_help(self, cli_runner) -> None:
        result = cli_runner.invoke(app, [])
        assert "load" in result.output
        assert "resolve" in result.output


# ---------------------------------------------------------------------------
# load / resolve
# ---------------------------------------------------------------------------


class TestLoad:
    def test_load_json(self, cli_runner, doc: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "load", str(doc)])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["info"]["title"] == "Petstore"
        assert data["definitions"]["Pet"] == {"$ref": "models.yaml#/Pet"}

    def test_load_expand_yaml(self, cli_runner, doc: Path) -> None:
        result = cli_runner.invoke(app, ["--yaml", "load", "--expand", str(doc)])
        assert result.exit_code == 0, result.output
        data = yaml.safe_load(result.stdout)
        assert data["definitions"]["Pet"]["properties"]["name"] == {"type": "string"}

    def test_load_describe(self, cli_runner, doc: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "load", "--describe", str(doc)])
        assert result.exit_code == 0, result.output
        assert "  title:\n    Petstore" in result.stdout

    def test_load_stdin(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "load", "-"], input="a: [1, 2]\n")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"a": [1, 2]}

    def test_output_file(self, cli_runner, doc: Path, isolated_config: Path) -> None:
        out = isolated_config / "out.json"
        result = cli_runner.invoke(app, ["--json", "-o", str(out), "load", str(doc)])
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text(encoding="utf-8"))["swagger"] == "2.0"

    def test_missing_file_exit_code(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "load", "nope.yaml"])
        assert result.exit_code == 4
        assert "File not found" in result.output

    def test_parse_error_exit_code(self, cli_runner, write_doc, isolated_config: Path) -> None:
        path = write_doc("bad.yaml", "a: [\n")
        result = cli_runner.invoke(app, ["--no-color", "load", str(path)])
        assert result.exit_code == 7
        assert "Invalid YAML" in result.output


class TestResolve:
    def test_resolve_cross_document(self, cli_runner, doc: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "resolve", str(doc), "models.yaml#/Pet/type"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == "object"

    def test_resolve_expand(self, cli_runner, doc: Path) -> None:
        result = cli_runner.invoke(
            app, ["--json", "resolve", "--expand", str(doc), "#/definitions/Pet"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["type"] == "object"

    def test_unresolved_reference(self, cli_runner, doc: Path) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", "resolve", str(doc), "#/definitions/Missing"]
        )
        assert result.exit_code == 8
        assert "definitions/Missing" in result.output


# ---------------------------------------------------------------------------
# extensions
# ---------------------------------------------------------------------------


class TestExtensions:
    def test_run_without_handlers(self, cli_runner, doc: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "--quiet", "extensions", "run", str(doc)])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert rows == [
            {
                "path": "$root.info.x-book",
                "extension": "x-book",
                "status": "unhandled",
                "handler": "",
                "value": "",
            }
        ]

    def test_run_with_process_handler(self, cli_runner, doc: Path) -> None:
        wrapper = doc.parent / "run-handler"
        wrapper.write_text(f"#!/bin/sh\nexec {sys.executable} {doc.parent / 'handler.py'}\n")
        wrapper.chmod(0o755)
        (doc.parent / "handler.py").write_text(textwrap.dedent(PLUGIN), encoding="utf-8")

        result = cli_runner.invoke(
            app, ["--json", "--handler", str(wrapper), "extensions", "run", str(doc)]
        )
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert rows[0]["status"] == "handled"
        assert rows[0]["handler"] == "run-handler"
        assert rows[0]["value"] == "compiled"

    def test_handler_errors_exit_code(self, cli_runner, write_doc, isolated_config: Path) -> None:
        path = write_doc("fail.yaml", "info:\n  x-fail: 1\n")
        wrapper = isolated_config / "fail-handler"
        script = isolated_config / "handler.py"
        script.write_text(textwrap.dedent(PLUGIN), encoding="utf-8")
        wrapper.write_text(f"#!/bin/sh\nexec {sys.executable} {script}\n")
        wrapper.chmod(0o755)

        result = cli_runner.invoke(
            app, ["--no-color", "-x", str(wrapper), "extensions", "run", str(path)]
        )
        assert result.exit_code == 10
        assert "$root.info.x-fail" in result.output
        assert "cannot compile" in result.output

    def test_list_from_env(self, cli_runner, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv("SPECFRONT_HANDLERS", "gnostic-x-book,/opt/bin/lint")
        result = cli_runner.invoke(app, ["--json", "extensions", "list"])
        assert result.exit_code == 0, result.output
        assert [row["name"] for row in json.loads(result.stdout)] == ["gnostic-x-book", "lint"]


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_show_defaults(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["fetch"]["timeout"] is None
        assert data["cache"]["enabled"] is False

    def test_set_values(self, cli_runner, isolated_config: Path) -> None:
        for key, value in [
            ("fetch.timeout", "30"),
            ("cache.enabled", "true"),
            ("cache.ttl_seconds", "60"),
            ("extensions.handlers", "a,b"),
        ]:
            result = cli_runner.invoke(app, ["config", "set", key, value])
            assert result.exit_code == 0, result.output

        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show"])
        data = json.loads(result.stdout)
        assert data["fetch"]["timeout"] == 30.0
        assert data["cache"] == {"enabled": True, "ttl_seconds": 60}
        assert data["extensions"]["handlers"] == ["a", "b"]

    def test_set_unknown_key(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "fetch.retries", "3"])
        assert result.exit_code == 2

    def test_set_invalid_value(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "cache.ttl_seconds", "soon"])
        assert result.exit_code == 2

    def test_reset(self, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(app, ["config", "set", "cache.enabled", "true"])
        result = cli_runner.invoke(app, ["--force", "config", "reset"])
        assert result.exit_code == 0, result.output
        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert json.loads(result.stdout)["cache"]["enabled"] is False

    def test_unknown_configured_format_warns(self, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(app, ["config", "set", "output.format", "fancy"])
        result = cli_runner.invoke(app, ["--no-color", "config", "show"])
        assert result.exit_code == 0, result.output
        assert "Unknown output format 'fancy'" in result.output

    def test_set_reports_success(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "config", "set", "fetch.timeout", "30"])
        assert result.exit_code == 0, result.output
        assert "Set fetch.timeout = 30" in result.output

    def test_format_flag_overrides_configured_format(
        self, cli_runner, isolated_config: Path
    ) -> None:
        cli_runner.invoke(app, ["config", "set", "output.format", "yaml"])

        result = cli_runner.invoke(app, ["--quiet", "config", "show"])
        assert yaml.safe_load(result.stdout)["output"]["format"] == "yaml"

        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert json.loads(result.stdout)["output"]["format"] == "yaml"
