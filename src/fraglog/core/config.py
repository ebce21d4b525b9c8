"""
Configuration Management for fraglog

Provides configuration loading from multiple sources:
- Default values
- Configuration files (YAML, TOML, JSON)
- Environment variables
- Command line arguments

Configuration precedence (highest to lowest):
1. Command line arguments
2. Environment variables (FRAGLOG_*)
3. Configuration file
4. Default values
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class ParserConfig:
    """Configuration for reading and parsing log files."""

    # Map the log into memory instead of buffered reading
    use_mmap: bool = False

    encoding: str = "utf-8"
    # Codec error handler for bytes that are not valid in `encoding`
    encoding_errors: str = "replace"


@dataclass
class ExportConfig:
    """Configuration for rendering reports."""

    default_format: str = "text"
    json_indent: int = 2
    csv_delimiter: str = ","
    include_metadata: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


@dataclass
class FraglogConfig:
    """Main configuration container."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Version of the config format
    config_version: str = "1.0"


SECTIONS = ("parser", "export", "logging")


# ============================================================================
# Configuration Loading
# ============================================================================


def get_default_config_paths() -> list[Path]:
    """
    Paths searched, in order, when no --config file is given.

    fraglog.yaml, fraglog.toml and fraglog.json in the working directory,
    then $XDG_CONFIG_HOME/fraglog/config.yaml (~/.config when unset).
    """
    cwd = Path.cwd()
    paths = [cwd / "fraglog.yaml", cwd / "fraglog.toml", cwd / "fraglog.json"]

    xdg_config = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    paths.append(Path(xdg_config) / "fraglog" / "config.yaml")

    return paths


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file."""
    import yaml

    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file."""
    import tomllib

    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(path) as f:
        return json.load(f)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a file, detecting format from extension."""
    if not path.exists():
        return {}

    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return load_yaml_config(path)
    elif suffix == ".toml":
        return load_toml_config(path)
    elif suffix == ".json":
        return load_json_config(path)
    else:
        logger.warning(f"Unknown config file format: {suffix}")
        return {}


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}

    env_mappings = {
        "FRAGLOG_LOG_LEVEL": ("logging", "level"),
        "FRAGLOG_LOG_FILE": ("logging", "file"),
        "FRAGLOG_USE_MMAP": ("parser", "use_mmap"),
        "FRAGLOG_ENCODING": ("parser", "encoding"),
        "FRAGLOG_EXPORT_FORMAT": ("export", "default_format"),
        "FRAGLOG_JSON_INDENT": ("export", "json_indent"),
    }

    for env_var, (section, key) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            if section not in config:
                config[section] = {}

            # Type conversion
            if value.lower() in ("true", "false"):
                value = value.lower() == "true"
            elif value.isdigit():
                value = int(value)

            config[section][key] = value

    return config


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two configuration dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def dict_to_config(data: dict[str, Any]) -> FraglogConfig:
    """Convert a dictionary to FraglogConfig, ignoring unknown keys."""
    config = FraglogConfig()

    for section in SECTIONS:
        if section not in data:
            continue
        target = getattr(config, section)
        # An empty section ("parser:" with nothing under it) loads as None
        for key, value in (data[section] or {}).items():
            if hasattr(target, key):
                setattr(target, key, value)
            else:
                logger.warning(f"Ignoring unknown config key: {section}.{key}")

    return config


def load_config(config_file: Path | None = None, include_env: bool = True) -> FraglogConfig:
    """
    Load configuration from all sources.

    Args:
        config_file: Explicit path to a config file (optional)
        include_env: Whether to include environment variables

    Returns:
        Merged FraglogConfig
    """
    config_data: dict[str, Any] = {}

    if config_file:
        config_data = load_config_file(config_file)
        logger.info(f"Loaded config from: {config_file}")
    else:
        for path in get_default_config_paths():
            if path.exists():
                config_data = load_config_file(path)
                logger.info(f"Loaded config from: {path}")
                break

    if include_env:
        env_config = load_env_config()
        config_data = merge_configs(config_data, env_config)

    return dict_to_config(config_data)


# ============================================================================
# Configuration Saving
# ============================================================================


def save_config(config: FraglogConfig, path: Path) -> None:
    """
    Save configuration to a file.

    Args:
        config: Configuration to save
        path: Path to save to (format detected from extension)
    """
    data = config_to_dict(config)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        import yaml

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    elif suffix == ".json":
        with open(path, "w") as f:
            json.dump(data, f, indent=2)

    else:
        raise ValueError(f"Unknown config format: {suffix}")

    logger.info(f"Saved config to: {path}")


def config_to_dict(config: FraglogConfig) -> dict[str, Any]:
    """Convert FraglogConfig to a dictionary."""
    return asdict(config)


# ============================================================================
# Configuration Templates
# ============================================================================

DEFAULT_CONFIG_YAML = """# fraglog Configuration

# Log reading settings
parser:
  use_mmap: false
  encoding: utf-8
  encoding_errors: replace

# Report output settings
export:
  default_format: text  # text, json or csv
  json_indent: 2
  csv_delimiter: ","
  include_metadata: false

# Logging settings
logging:
  level: WARNING
  # file: /path/to/fraglog.log
"""


def generate_default_config(path: Path) -> None:
    """Generate a default configuration file."""
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        path.write_text(DEFAULT_CONFIG_YAML)
    else:
        config = FraglogConfig()
        save_config(config, path)

    logger.info(f"Generated default config at: {path}")
