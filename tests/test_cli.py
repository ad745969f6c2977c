"""
Tests for the nsflatten command line.
"""

import io
import json

import pytest
from rich.console import Console

from nsflatten.cli.commands import convert as convert_command
from nsflatten.cli.rich_output import RichOutputManager
from nsflatten.cli_entry import create_parser, main
from nsflatten.config import NsFlattenConfig

WIDGET = "my.name.space.Widget = function() {\n    this.f = new my.other.Factory();\n};\n"


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NSFLATTEN_NAMESPACE_ROOTS", raising=False)
    src = tmp_path / "src"
    widget = src / "my" / "name" / "space" / "Widget.js"
    widget.parent.mkdir(parents=True)
    widget.write_text(WIDGET, encoding="utf-8")
    return src


class TestParser:
    """Tests for argument parsing."""

    def test_convert_arguments(self):
        args = create_parser().parse_args(
            ["convert", "src", "--root", "my", "--root", "other", "--require", "jQuery=jquery", "--dry-run"]
        )
        assert args.roots == ["my", "other"]
        assert args.requires == ["jQuery=jquery"]
        assert args.dry_run

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out


class TestConvertCommand:
    """Tests for `nsflatten convert`."""

    def test_stdout_output(self, project, capsys):
        code = main(
            ["--no-rich", "convert", str(project), "--root", "my", "--source-root", str(project), "--stdout"]
        )
        out = capsys.readouterr().out
        assert code == 0
        assert out.startswith('var Factory = require("my/other/Factory");\nfunction Widget() {')
        assert (project / "my" / "name" / "space" / "Widget.js").read_text(encoding="utf-8") == WIDGET

    def test_stdout_is_highlighted_on_a_terminal(self, project, monkeypatch, capsys):
        buffer = io.StringIO()
        manager = RichOutputManager(use_rich=True, console=Console(file=buffer, width=200))
        monkeypatch.setattr(convert_command, "get_rich_output", lambda: manager)
        args = create_parser().parse_args(
            ["convert", str(project), "--root", "my", "--source-root", str(project), "--stdout"]
        )

        assert convert_command.cmd_convert(args, NsFlattenConfig.default()) == 0
        highlighted = buffer.getvalue()
        assert 'var Factory = require("my/other/Factory");' in highlighted
        assert "function Widget() {" in highlighted
        assert capsys.readouterr().out == ""

    def test_converts_in_place(self, project, capsys):
        code = main(["--no-rich", "convert", str(project), "--root", "my", "--no-class-flatten"])
        assert code == 0
        converted = (project / "my" / "name" / "space" / "Widget.js").read_text(encoding="utf-8")
        assert converted.endswith("module.exports = Widget;\n")
        assert "Conversion Summary" in capsys.readouterr().out

    def test_no_export_flag(self, project, capsys):
        main(["--no-rich", "convert", str(project), "--root", "my", "--no-export", "--stdout"])
        assert "module.exports" not in capsys.readouterr().out

    def test_require_flag(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        script = tmp_path / "app.js"
        script.write_text("jQuery(document);\n", encoding="utf-8")
        main(["--no-rich", "convert", str(script), "--require", "jQuery=jquery", "--stdout"])
        assert 'var jQuery = require("jquery");' in capsys.readouterr().out

    def test_bad_require_flag(self, project):
        assert main(["--no-rich", "convert", str(project), "--require", "jQuery"]) == 2

    def test_failed_file_sets_exit_code(self, project):
        (project / "Broken.js").write_text("var = ;\n", encoding="utf-8")
        assert main(["--no-rich", "convert", str(project), "--root", "my"]) == 1


class TestConfigCommand:
    """Tests for `nsflatten config`."""

    def test_init_and_show(self, project, capsys):
        assert main(["--no-rich", "config", "init", "--path", "nsflatten.json"]) == 0
        with open("nsflatten.json", encoding="utf-8") as f:
            data = json.load(f)
        assert data["namespaces"]["insert_export"] is True

        capsys.readouterr()
        assert main(["--no-rich", "--config", "nsflatten.json", "config", "show"]) == 0
        assert "Namespace roots" in capsys.readouterr().out

    def test_invalid_config_file(self, project):
        with open("bad.json", "w", encoding="utf-8") as f:
            json.dump({"namespaces": {"namespace_roots": ["my.name"]}}, f)
        assert main(["--config", "bad.json", "config", "show"]) == 2
