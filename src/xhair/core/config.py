"""
Configuration Management for xhair

Provides configuration loading from multiple sources:
- Default values
- Configuration files (YAML, TOML, JSON)
- A .env file in the working directory
- Environment variables

Configuration precedence (highest to lowest):
1. Environment variables (FACEIT_API_KEY, PORT, XHAIR_*)
2. Configuration file
3. Default values

The configuration is loaded once at startup and treated as read-only by the
request pipelines; the FACEIT credential is the only thing they share.
"""

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass, field
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class FaceitConfig:
    """Configuration for the FACEIT Data API client."""

    api_key: str | None = None
    base_url: str = "https://open.faceit.com/data/v4"
    # Game key used in player/history lookups
    game: str = "csgo"
    # Match history lookback window
    history_limit: int = 20
    timeout_seconds: float = 10.0


@dataclass
class ReplayConfig:
    """Configuration for demo download, decompression and parsing."""

    # Directory for decompressed demos (None = system temp dir)
    temp_dir: str | None = None
    chunk_size: int = 1024 * 1024  # 1MB
    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 60.0
    parse_timeout_seconds: float = 300.0
    max_demo_bytes: int = 2 * 1024 * 1024 * 1024  # 2GB decompressed

    def resolve_temp_dir(self) -> Path:
        return Path(self.temp_dir) if self.temp_dir else Path(tempfile.gettempdir())


@dataclass
class ServiceConfig:
    """Configuration for the HTTP service."""

    host: str = "0.0.0.0"
    port: int = 3500
    # Report every failure as a plain 500
    uniform_error_status: bool = False
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


@dataclass
class XhairConfig:
    """Main configuration container."""

    faceit: FaceitConfig = field(default_factory=FaceitConfig)
    replay: ReplayConfig = field(default_factory=ReplayConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    config_version: str = "1.0"


# ============================================================================
# Configuration Loading
# ============================================================================


def get_default_config_paths() -> list[Path]:
    """Get the default paths to search for configuration files."""
    home = Path.home()
    return [
        Path.cwd() / "xhair.toml",
        Path.cwd() / "xhair.yaml",
        Path.cwd() / "xhair.json",
        home / ".config" / "xhair" / "config.toml",
        home / ".config" / "xhair" / "config.yaml",
    ]


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file."""
    try:
        import yaml

        with open(path) as f:
            return yaml.safe_load(f) or {}
    except ImportError:
        logger.warning("PyYAML not installed, cannot load YAML config")
        return {}


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


ENV_MAPPINGS = {
    "FACEIT_API_KEY": ("faceit", "api_key"),
    "XHAIR_FACEIT_BASE_URL": ("faceit", "base_url"),
    "XHAIR_FACEIT_GAME": ("faceit", "game"),
    "XHAIR_FACEIT_TIMEOUT": ("faceit", "timeout_seconds"),
    "XHAIR_TEMP_DIR": ("replay", "temp_dir"),
    "XHAIR_DOWNLOAD_TIMEOUT": ("replay", "read_timeout_seconds"),
    "XHAIR_PARSE_TIMEOUT": ("replay", "parse_timeout_seconds"),
    "XHAIR_MAX_DEMO_BYTES": ("replay", "max_demo_bytes"),
    "PORT": ("service", "port"),
    "XHAIR_HOST": ("service", "host"),
    "XHAIR_UNIFORM_ERROR_STATUS": ("service", "uniform_error_status"),
    "XHAIR_LOG_LEVEL": ("logging", "level"),
    "XHAIR_LOG_FILE": ("logging", "file"),
}

# Values that must stay strings even when they look numeric
_STRING_KEYS = {("faceit", "api_key"), ("faceit", "game"), ("replay", "temp_dir")}


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}

    for env_var, (section, key) in ENV_MAPPINGS.items():
        value = os.environ.get(env_var)
        if value is None or value == "":
            continue

        if (section, key) not in _STRING_KEYS:
            if value.lower() in ("true", "false"):
                value = value.lower() == "true"
            elif value.isdigit():
                value = int(value)
            else:
                try:
                    value = float(value)
                except ValueError:
                    pass

        config.setdefault(section, {})[key] = value

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


def dict_to_config(data: dict[str, Any]) -> XhairConfig:
    """Convert a dictionary to XhairConfig, ignoring unknown keys."""
    config = XhairConfig()

    for section in ("faceit", "replay", "service", "logging"):
        target = getattr(config, section)
        for key, value in data.get(section, {}).items():
            if hasattr(target, key):
                setattr(target, key, value)
            else:
                logger.debug(f"Ignoring unknown config key {section}.{key}")

    return config


def load_config(
    config_file: Path | None = None, include_env: bool = True, load_dotenv_file: bool = True
) -> XhairConfig:
    """
    Load configuration from all sources.

    Args:
        config_file: Explicit path to a config file (optional)
        include_env: Whether to include environment variables
        load_dotenv_file: Whether to read a .env file into the environment first

    Returns:
        Merged XhairConfig
    """
    if load_dotenv_file:
        load_dotenv(find_dotenv(usecwd=True), override=False)

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
        config_data = merge_configs(config_data, load_env_config())

    config = dict_to_config(config_data)
    if not config.faceit.api_key:
        logger.warning("No FACEIT API key configured. Set FACEIT_API_KEY.")
    return config


def config_to_dict(config: XhairConfig, redact: bool = True) -> dict[str, Any]:
    """Convert XhairConfig to a dictionary, hiding the API key by default."""
    data = asdict(config)
    if redact and data["faceit"].get("api_key"):
        data["faceit"]["api_key"] = "***"
    return data


# ============================================================================
# Logging
# ============================================================================


def setup_logging(config: LoggingConfig) -> None:
    """Configure the root logger from a LoggingConfig."""
    root = logging.getLogger()
    root.setLevel(config.level.upper())
    formatter = logging.Formatter(config.format)

    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        root.addHandler(stream)

    log_path = os.path.abspath(config.file) if config.file else None
    already_logging = any(
        isinstance(h, RotatingFileHandler) and h.baseFilename == log_path for h in root.handlers
    )
    if log_path and not already_logging:
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.file_max_bytes,
            backupCount=config.file_backup_count,
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


# ============================================================================
# Global Configuration
# ============================================================================

_global_config: XhairConfig | None = None


def get_config() -> XhairConfig:
    """Get the global configuration, loading it if necessary."""
    global _global_config

    if _global_config is None:
        _global_config = load_config()

    return _global_config


def set_config(config: XhairConfig) -> None:
    """Set the global configuration."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration so the next access reloads it."""
    global _global_config
    _global_config = None
