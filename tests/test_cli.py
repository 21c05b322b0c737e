"""Tests for CLI bootstrap and the demo program."""

import io
import json
import sys

import pytest

from replkit import cli
from replkit.config import ProgramConfig
from replkit.demo import Color, DemoProgram


def _run(monkeypatch, capsys, stdin: str, argv=None) -> tuple[int, str]:
    monkeypatch.setattr(sys, "stdin", io.StringIO(stdin))
    code = cli.main(argv or [])
    return code, capsys.readouterr().out


class TestMain:
    """Test CLI main entry point."""

    def test_piped_input(self, monkeypatch, capsys):
        """Test that piped lines are dispatched in order."""
        code, out = _run(monkeypatch, capsys, "double 21\ngreet bob 2\nexit\ndouble 1\n")

        assert code == 0
        assert out.splitlines() == ["42", "Hello, bob!", "Hello, bob!"]

    def test_help_uses_shipped_documentation(self, monkeypatch, capsys):
        """Test that demo help comes from the bundled XML files."""
        _, out = _run(monkeypatch, capsys, "help\n")

        assert "\tdouble\t\tPrints twice the given integer." in out
        assert "\thelp\t\tDisplays a help message." in out

    def test_missing_docs_file_is_fatal(self, monkeypatch, capsys, tmp_path):
        """Test that an unloadable documentation file aborts startup."""
        code, out = _run(monkeypatch, capsys, "", ["--docs", str(tmp_path / "absent.xml")])

        assert code == 1
        assert out.startswith("ERROR: Cannot load documentation")

    def test_bad_config_is_fatal(self, monkeypatch, capsys, tmp_path):
        """Test that configuration errors abort startup."""
        path = tmp_path / "c.json"
        path.write_text(json.dumps({"prompt": 3}), encoding="utf-8")

        code, out = _run(monkeypatch, capsys, "", ["--config", str(path)])

        assert code == 1
        assert out == "ERROR: prompt must be a string\n"

    def test_log_file_written(self, monkeypatch, capsys, tmp_path):
        """Test that --log-file records structured events."""
        log_path = tmp_path / "logs" / "run.log"

        code, _ = _run(monkeypatch, capsys, "exit\n", ["--log-file", str(log_path)])

        assert code == 0
        text = log_path.read_text(encoding="utf-8")
        assert "=== program_start ===" in text
        assert "=== program_stop ===" in text


class TestBuildProgram:
    """Test program construction from configuration."""

    def test_config_applied(self):
        """Test prompt and debug settings."""
        program = cli.build_program(ProgramConfig(prompt="demo> ", debug=True))

        assert program.prompt == "demo> "
        assert program.debug is True

    def test_extra_docs_merged(self, docs_xml):
        """Test that extra documentation adds entries without overriding."""
        path = docs_xml(
            '<member name="M:replkit.demo.DemoProgram.reset"><summary>Resets.</summary></member>'
            '<member name="M:replkit.demo.DemoProgram.double"><summary>Other.</summary></member>'
        )

        program = cli.build_program(ProgramConfig(docs=[str(path)]))

        assert "M:replkit.demo.DemoProgram.reset" in program.docs
        assert program.docs.entry_for(DemoProgram.double).summary == "Prints twice the given integer."


class TestDemoProgram:
    """Test the demo commands."""

    @pytest.fixture
    def demo(self, output):
        return DemoProgram(write=output.append)

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("scale 2.5", "2.5"),
            ("scale 2 4", "8"),
            ("toggle TRUE", "false"),
            ("divide 7 2", "3"),
            ("paint Blue", "Painting it blue."),
        ],
    )
    def test_commands(self, demo, output, line, expected):
        """Test each demo command."""
        demo.process(line)

        assert output == [expected]

    def test_divide_by_zero(self, demo, output):
        """Test that a handler failure prints only its message."""
        demo.process("divide 1 0")

        assert output == ["Cannot divide by zero."]

    def test_unknown_color(self, demo, output):
        """Test that a failing custom converter is an argument error."""
        demo.process("paint purple")

        assert output[0].startswith(
            "Error in arguments: Incorrect parameter type for parameter 1. "
            "Expected a Color but got 'purple'."
        )
        assert output[1] == "Usage:\n\tpaint color"

    def test_color_converter_registered(self, demo):
        """Test that the demo registers its custom converter."""
        assert demo.converters.get(Color)("RED") is Color.RED

    def test_undecorated_reset_hidden(self, demo, output):
        """Test that reset is not a command."""
        demo.process("reset")

        assert output == ["No command 'reset' exists! Try `help`."]
