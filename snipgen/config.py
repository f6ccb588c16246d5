"""Configuration loading for snipgen (.snipgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import SnipgenError
from .extract.metadata import DEFAULT_MARKERS
from .output.formatter import DEFAULT_RUSTFMT_COMMAND, DEFAULT_TIMEOUT
from .output.writers import OutputType

CONFIG_FILENAME = ".snipgen.yml"


class ConfigError(SnipgenError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class FormatterConfig:
    """External formatter settings."""

    enabled: bool = True
    command: List[str] = field(default_factory=lambda: list(DEFAULT_RUSTFMT_COMMAND))
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class SnipgenConfig:
    """Represents the settings defined in .snipgen.yml."""

    root: Path
    output_type: OutputType = OutputType.NEOSNIPPET
    paths: List[str] = field(default_factory=list)
    exclude_paths: List[str] = field(default_factory=list)
    markers: List[str] = field(default_factory=lambda: list(DEFAULT_MARKERS))
    formatter: FormatterConfig = field(default_factory=FormatterConfig)


def load_config(config_path: Path) -> SnipgenConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SnipgenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = SnipgenConfig(root=root)

    output_type = _as_str(data.get("output_type"))
    if output_type:
        try:
            config.output_type = OutputType.parse(output_type)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    config.paths = _as_str_list(data.get("paths"))
    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    markers = _as_str_list(data.get("markers"))
    if markers:
        config.markers = markers

    formatter_data = _as_dict(data.get("formatter"))
    if formatter_data:
        enabled = _as_bool(formatter_data.get("enabled"))
        if enabled is not None:
            config.formatter.enabled = enabled
        command = _as_str_list(formatter_data.get("command"))
        if command:
            config.formatter.command = command
        timeout = _as_float(formatter_data.get("timeout"))
        if timeout is not None:
            if timeout <= 0:
                raise ConfigError("formatter.timeout must be positive")
            config.formatter.timeout = timeout

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "FormatterConfig", "SnipgenConfig", "load_config"]
