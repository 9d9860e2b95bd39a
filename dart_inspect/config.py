"""Configuration loading for dart_inspect (.dart_inspect.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .policy import FilterPolicy, PolicyError

CONFIG_FILENAME = ".dart_inspect.yml"

OUTPUT_FORMATS = ("simple", "markdown", "json")

_OPTION_KEYS = (
    "private_only",
    "no_primitives",
    "final_only",
    "no_final",
    "no_classes",
    "no_imports",
)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class InspectConfig:
    """Settings defined in .dart_inspect.yml."""

    root: Path
    options: Dict[str, bool] = field(default_factory=dict)
    output_format: str = "simple"
    exclude_paths: List[str] = field(default_factory=list)

    def policy(self, output_format: Optional[str] = None, **flags: bool) -> FilterPolicy:
        """Build a FilterPolicy.

        ``flags`` (e.g. from the command line) can only switch options on;
        ``output_format`` replaces the configured format when given.
        """
        values = {key: bool(self.options.get(key, False)) for key in _OPTION_KEYS}
        for key, value in flags.items():
            if key not in values:
                raise ConfigError(f"Unknown option: {key}")
            values[key] = values[key] or bool(value)
        values["markdown"] = (output_format or self.output_format) == "markdown"
        try:
            return FilterPolicy(**values)
        except PolicyError as exc:
            raise ConfigError(str(exc)) from exc


def load_config(config_path: Path) -> InspectConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return InspectConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    options_data = data.get("options")
    if options_data is None:
        options_data = {}
    if not isinstance(options_data, dict):
        raise ConfigError("'options' must be a mapping of option names to booleans")

    options: Dict[str, bool] = {}
    for key, value in options_data.items():
        name = str(key).replace("-", "_")
        if name not in _OPTION_KEYS:
            raise ConfigError(f"Unknown option in {CONFIG_FILENAME}: {key}")
        flag = _as_bool(value)
        if flag is None:
            raise ConfigError(f"Option '{key}' must be a boolean")
        options[name] = flag

    output_format = _as_str(data.get("format")) or "simple"
    if output_format not in OUTPUT_FORMATS:
        allowed = ", ".join(OUTPUT_FORMATS)
        raise ConfigError(f"Unsupported format '{output_format}' (expected one of: {allowed})")

    return InspectConfig(
        root=root,
        options=options,
        output_format=output_format,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


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


__all__ = ["CONFIG_FILENAME", "ConfigError", "InspectConfig", "OUTPUT_FORMATS", "load_config"]
