"""Program configuration: loading, validation, and path mapping."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from replkit.errors import ConfigError
from replkit.session import DEFAULT_PROMPT

_KNOWN_FIELDS = frozenset(("prompt", "docs", "log_file", "debug", "history"))


@dataclass
class ProgramConfig:
    """Runtime settings for a command program."""

    prompt: str = DEFAULT_PROMPT
    docs: list[str] = field(default_factory=list)
    log_file: str | None = None
    debug: bool = False
    history: bool = True


def _package_dir() -> Path:
    return Path(__file__).resolve().parent


def map_path(path: str, config_dir: str | None = None) -> str:
    """Return ``path`` as an absolute path string.

    A leading ``~`` expands to the home directory and a leading ``@`` names a
    file shipped inside the package (``@/demo.xml``). Other relative paths
    need ``config_dir``.
    """
    if "\0" in path:
        raise ConfigError("Path cannot contain NUL bytes")

    if path.startswith("@"):
        return str((_package_dir() / path[1:].lstrip("/\\")).resolve())

    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return str(candidate.resolve())
    if config_dir is None:
        raise ConfigError(
            f"Relative path '{path}' needs a base directory. "
            "Use an absolute path or start with '~/' or '@/'."
        )
    return str((Path(config_dir) / candidate).resolve())


def _require_string(raw: dict[str, Any], name: str) -> None:
    if name in raw and not isinstance(raw[name], str):
        raise ConfigError(f"{name} must be a string")


def _require_bool(raw: dict[str, Any], name: str) -> None:
    if name in raw and not isinstance(raw[name], bool):
        raise ConfigError(f"{name} must be a boolean")


def validate_config(raw: Any) -> None:
    """Validate configuration structure.

    Raises:
        ConfigError: If the configuration is invalid
    """
    if not isinstance(raw, dict):
        raise ConfigError("Configuration must be a JSON object")

    unknown = sorted(set(raw) - _KNOWN_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    _require_string(raw, "prompt")
    _require_bool(raw, "debug")
    _require_bool(raw, "history")

    if raw.get("log_file") is not None:
        _require_string(raw, "log_file")
        if not raw["log_file"]:
            raise ConfigError("log_file must be a non-empty string")

    docs = raw.get("docs", [])
    if not isinstance(docs, list) or not all(isinstance(d, str) and d for d in docs):
        raise ConfigError("docs must be a list of non-empty strings")


def load_config(path: str) -> ProgramConfig:
    """Load and validate configuration from a JSON file.

    Relative ``docs`` and ``log_file`` paths resolve against the file's
    directory.

    Raises:
        ConfigError: If the file is missing, malformed, or invalid
    """
    config_path = Path(map_path(path, str(Path.cwd())))

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read configuration {config_path}: {e}") from e

    validate_config(raw)

    config_dir = str(config_path.parent)
    log_file = raw.get("log_file")
    return ProgramConfig(
        prompt=raw.get("prompt", DEFAULT_PROMPT),
        docs=[map_path(doc, config_dir) for doc in raw.get("docs", [])],
        log_file=map_path(log_file, config_dir) if log_file else None,
        debug=raw.get("debug", False),
        history=raw.get("history", True),
    )
