"""Configuration loading for wgswitch."""

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .vpn.exceptions import ConfigurationError


BASE_PATH = Path(__file__).parent.parent
DEFAULT_CONFIG_FILE = BASE_PATH / "config" / "wgswitch.conf"
CONFIG_ENV_VAR = "WGSWITCH_CONFIG"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULTS = {
    "profiles": {
        "directory": "/etc/wireguard",
    },
    "supervisor": {
        "wants_directory": "/etc/systemd/system/multi-user.target.wants",
        "resolver_unit": "systemd-resolved.service",
        "use_sudo": "false",
    },
    "latency": {
        "count": "1",
        "timeout": "1",
    },
    "sync": {
        "command": "mullvad-wg-sync --output {output}",
    },
    "logging": {
        "level": "INFO",
    },
}


@dataclass(frozen=True)
class Settings:
    profile_dir: Path
    wants_dir: Path
    resolver_unit: str
    use_sudo: bool
    ping_count: int
    ping_timeout: int
    sync_command: str
    log_level: str


def _read_config(config_file: Path) -> configparser.ConfigParser:
    config = configparser.ConfigParser()
    config.read_dict(DEFAULTS)
    try:
        config.read(config_file)
    except configparser.Error as e:
        raise ConfigurationError(f"Invalid configuration file {config_file}: {e}")
    return config


def load_settings(config_file: Optional[Union[str, Path]] = None) -> Settings:
    """
    Build Settings from an INI file layered over the built-in defaults.

    Args:
        config_file: Path to the INI file; falls back to $WGSWITCH_CONFIG,
            then config/wgswitch.conf. A missing file means defaults only.

    Returns:
        Settings instance
    """
    if config_file is None:
        config_file = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE)
    config = _read_config(Path(config_file))

    try:
        settings = Settings(
            profile_dir=Path(config["profiles"]["directory"]),
            wants_dir=Path(config["supervisor"]["wants_directory"]),
            resolver_unit=config["supervisor"]["resolver_unit"],
            use_sudo=config.getboolean("supervisor", "use_sudo"),
            ping_count=config.getint("latency", "count"),
            ping_timeout=config.getint("latency", "timeout"),
            sync_command=config["sync"]["command"],
            log_level=config["logging"]["level"],
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration value in {config_file}: {e}")

    if settings.log_level.upper() not in LOG_LEVELS:
        raise ConfigurationError(f"[logging] level must be one of {', '.join(LOG_LEVELS)}")
    if settings.ping_count < 1:
        raise ConfigurationError("[latency] count must be at least 1")
    if "{output}" not in settings.sync_command:
        raise ConfigurationError("[sync] command must contain the {output} placeholder")
    return settings
