"""Configuration loading for routegen (.routegen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".routegen.yml"
DEFAULT_OUTPUT = "routes.gen.ts"
DEFAULT_SNAPSHOT_ENV_KEY = "ROUTEGEN_PREVIOUS_MANIFEST"
DEFAULT_FORMATTER_COMMAND = ("deno", "fmt", "-")
DEFAULT_MIN_RUNTIME_VERSION = "1.31.0"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class FormatterConfig:
    """External formatter invocation."""

    command: List[str] = field(default_factory=lambda: list(DEFAULT_FORMATTER_COMMAND))
    enabled: bool = True


@dataclass
class BuildConfig:
    """Production build command; the generated manifest path is appended."""

    command: List[str] = field(default_factory=list)


@dataclass
class RuntimeConfig:
    """JavaScript runtime version gate."""

    executable: str = "deno"
    min_version: str = DEFAULT_MIN_RUNTIME_VERSION
    check: bool = True


@dataclass
class RouteGenConfig:
    """Represents the settings defined in .routegen.yml."""

    root: Path
    routes_dir: str = "routes"
    islands_dir: str = "islands"
    extensions: List[str] = field(default_factory=lambda: ["ts", "tsx", "js", "jsx"])
    output: str = DEFAULT_OUTPUT
    snapshot_env_key: str = DEFAULT_SNAPSHOT_ENV_KEY
    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    @property
    def output_path(self) -> Path:
        return self.root / self.output


def load_config(config_path: Path) -> RouteGenConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return RouteGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = RouteGenConfig(root=root)
    config.routes_dir = _dir_name(data, "routes_dir", config.routes_dir)
    config.islands_dir = _dir_name(data, "islands_dir", config.islands_dir)

    if "extensions" in data:
        extensions = [ext.lstrip(".") for ext in _as_str_list(data.get("extensions"))]
        extensions = [ext for ext in extensions if ext]
        if not extensions:
            raise ConfigError("extensions must list at least one file extension")
        config.extensions = extensions

    output = _as_str(data.get("output"))
    if output:
        if Path(output).is_absolute():
            raise ConfigError("output must be relative to the project root")
        config.output = output

    env_key = _as_str(data.get("snapshot_env_key"))
    if env_key:
        config.snapshot_env_key = env_key

    formatter_data = _as_dict(data.get("formatter"))
    if formatter_data:
        command = _as_command(formatter_data.get("command"), "formatter.command")
        if command:
            config.formatter.command = command
        enabled = _as_bool(formatter_data.get("enabled"))
        if enabled is not None:
            config.formatter.enabled = enabled

    build_data = _as_dict(data.get("build"))
    if build_data:
        config.build.command = _as_command(build_data.get("command"), "build.command")

    runtime_data = _as_dict(data.get("runtime"))
    if runtime_data:
        executable = _as_str(runtime_data.get("executable"))
        if executable:
            config.runtime.executable = executable
        min_version = _as_str(runtime_data.get("min_version"))
        if min_version:
            config.runtime.min_version = min_version
        check = _as_bool(runtime_data.get("check"))
        if check is not None:
            config.runtime.check = check

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _dir_name(data: Dict[str, Any], key: str, default: str) -> str:
    value = _as_str(data.get(key))
    if value is None:
        return default
    value = value.strip().strip("/")
    if not value or Path(value).is_absolute() or ".." in value.split("/"):
        raise ConfigError(f"{key} must be a directory name inside the project root")
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


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
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _as_command(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Sequence) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ConfigError(f"{key} must be a string or a list of strings")


__all__ = [
    "BuildConfig",
    "ConfigError",
    "FormatterConfig",
    "RouteGenConfig",
    "RuntimeConfig",
    "load_config",
]
