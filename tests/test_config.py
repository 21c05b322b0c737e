"""Tests for config module."""

import json
from pathlib import Path

import pytest

from replkit.config import ProgramConfig, load_config, map_path, validate_config
from replkit.errors import ConfigError


def _write_config(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestMapPath:
    """Test path mapping."""

    def test_home(self):
        """Test that ~ expands to the home directory."""
        assert map_path("~/x.xml") == str((Path.home() / "x.xml").resolve())

    def test_app_root(self):
        """Test that @ maps into the package directory."""
        assert map_path("@/program.xml").endswith("program.xml")
        assert Path(map_path("@/program.xml")).exists()

    def test_relative_with_base(self, tmp_path):
        """Test that relative paths resolve against the given directory."""
        assert map_path("docs/a.xml", str(tmp_path)) == str((tmp_path / "docs" / "a.xml").resolve())

    def test_relative_without_base(self):
        """Test that relative paths need a base directory."""
        with pytest.raises(ConfigError, match="needs a base directory"):
            map_path("docs/a.xml")

    def test_nul_rejected(self):
        """Test that NUL bytes are rejected."""
        with pytest.raises(ConfigError, match="NUL"):
            map_path("/tmp/a\0b")


class TestValidateConfig:
    """Test configuration validation."""

    def test_empty_object_valid(self):
        """Test that every key is optional."""
        validate_config({})

    def test_not_object(self):
        """Test that the top level must be an object."""
        with pytest.raises(ConfigError, match="JSON object"):
            validate_config([])

    def test_unknown_keys(self):
        """Test that unknown keys are reported."""
        with pytest.raises(ConfigError, match="Unknown configuration keys: colour, size"):
            validate_config({"size": 1, "colour": "red"})

    @pytest.mark.parametrize(
        ("raw", "message"),
        [
            ({"prompt": 1}, "prompt must be a string"),
            ({"debug": "yes"}, "debug must be a boolean"),
            ({"history": 0}, "history must be a boolean"),
            ({"log_file": 5}, "log_file must be a string"),
            ({"log_file": ""}, "log_file must be a non-empty string"),
            ({"docs": "a.xml"}, "docs must be a list"),
            ({"docs": ["a.xml", ""]}, "docs must be a list"),
        ],
    )
    def test_field_types(self, raw, message):
        """Test per-field type checks."""
        with pytest.raises(ConfigError, match=message):
            validate_config(raw)


class TestLoadConfig:
    """Test loading configuration files."""

    def test_defaults(self, tmp_path):
        """Test that an empty file yields defaults."""
        config = load_config(str(_write_config(tmp_path / "c.json", {})))

        assert config == ProgramConfig()

    def test_values_and_relative_paths(self, tmp_path):
        """Test that relative paths resolve against the config directory."""
        path = _write_config(
            tmp_path / "c.json",
            {
                "prompt": "demo> ",
                "docs": ["extra.xml"],
                "log_file": "logs/replkit.log",
                "debug": True,
                "history": False,
            },
        )

        config = load_config(str(path))

        assert config.prompt == "demo> "
        assert config.docs == [str((tmp_path / "extra.xml").resolve())]
        assert config.log_file == str((tmp_path / "logs" / "replkit.log").resolve())
        assert config.debug is True
        assert config.history is False

    def test_missing_file(self, tmp_path):
        """Test that a missing file is a config error."""
        with pytest.raises(ConfigError, match="Configuration not found"):
            load_config(str(tmp_path / "absent.json"))

    def test_invalid_json(self, tmp_path):
        """Test that malformed JSON is a config error."""
        path = tmp_path / "c.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(str(path))
