"""
Configuration management with environment variable and .env support.

Configuration precedence (highest to lowest):
1. Environment variables (RELAYLOGS_*)
2. User config file (~/.relaylogs/config/settings.toml)
3. Default config file (packaged settings.default.toml)
4. Hardcoded constants (constants.py)
"""

from __future__ import annotations

import os
from typing import overload
from dataclasses import dataclass, field
from pathlib import Path
import tomli
from dotenv import load_dotenv

from ..core.logging_config import LogConfig
from .constants import (
    DEFAULT_DATA_DIR,
    DEFAULT_CONFIG_SUBDIR,
    SETTINGS_FILE,
    DEFAULT_SETTINGS_FILE,
    ENV_FILE,
    # Defaults
    DEFAULT_ARCHIVE_PATH,
    DEFAULT_CHANNELS_TO_FILE,
    DEFAULT_FILETYPE,
    DEFAULT_PUBLIC_CHANNEL_PREFIX,
    # Environment variable names
    ENV_DATA_DIR,
    ENV_ARCHIVE_PATH,
    ENV_CHANNELS_TO_FILE,
    ENV_DEFAULT_FILETYPE,
    ENV_REGISTERED_NETWORKS,
    ENV_PUBLIC_CHANNEL_PREFIX,
    ENV_LOG_LEVEL,
    ERROR_NO_CONFIG,
)


# Load .env file at module import time
# Search order: ./.env, ~/.relaylogs/.env, ~/.relaylogs/config/.env
def _load_env_files():
    """Load .env files from standard locations."""
    env_locations = [
        Path.cwd() / ENV_FILE,  # Project root
        DEFAULT_DATA_DIR / ENV_FILE,  # Data directory
        DEFAULT_DATA_DIR / DEFAULT_CONFIG_SUBDIR / ENV_FILE,  # Config directory
    ]

    for env_path in env_locations:
        if env_path.exists():
            load_dotenv(env_path, override=False)  # Don't override already-set vars


_load_env_files()


@overload
def _get_env_str(key: str, default: str) -> str: ...


@overload
def _get_env_str(key: str, default: None = None) -> str | None: ...


def _get_env_str(key: str, default: str | None = None) -> str | None:
    """Get string value from environment variable. Empty strings are treated as missing."""
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _get_env_list(key: str, default: list[str]) -> list[str]:
    """Get comma-separated list from environment variable."""
    value = _get_env_str(key)
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class ArchiveConfig:
    channels_to_file: bool
    path: str
    default_filetype: str

    @classmethod
    def from_dict(cls, data: dict) -> "ArchiveConfig":
        """Create ArchiveConfig from dict with environment variable overrides."""
        return cls(
            channels_to_file=_get_env_bool(
                ENV_CHANNELS_TO_FILE,
                bool(data.get("channels_to_file", DEFAULT_CHANNELS_TO_FILE)),
            ),
            path=_get_env_str(
                ENV_ARCHIVE_PATH,
                data.get("path", DEFAULT_ARCHIVE_PATH)
            ) or DEFAULT_ARCHIVE_PATH,
            default_filetype=_get_env_str(
                ENV_DEFAULT_FILETYPE,
                data.get("default_filetype", DEFAULT_FILETYPE)
            ) or DEFAULT_FILETYPE,
        )


@dataclass
class NetworksConfig:
    registered: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "NetworksConfig":
        raw = data.get("registered", [])
        # The relay's config keys networks by name; accept either shape
        if isinstance(raw, dict):
            raw = list(raw.keys())
        return cls(registered=_get_env_list(ENV_REGISTERED_NETWORKS, list(raw)))


@dataclass
class SearchConfig:
    public_channel_prefix: str

    @classmethod
    def from_dict(cls, data: dict) -> "SearchConfig":
        return cls(
            public_channel_prefix=_get_env_str(
                ENV_PUBLIC_CHANNEL_PREFIX,
                data.get("public_channel_prefix", DEFAULT_PUBLIC_CHANNEL_PREFIX),
            ) or DEFAULT_PUBLIC_CHANNEL_PREFIX,
        )


@dataclass
class Config:
    archive: ArchiveConfig
    networks: NetworksConfig
    search: SearchConfig
    logging: LogConfig

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """
        Load configuration with proper precedence.

        Precedence (highest to lowest):
        1. Environment variables (RELAYLOGS_*)
        2. User config (~/.relaylogs/config/settings.toml)
        3. Default config (packaged settings.default.toml)
        4. Hardcoded constants

        Args:
            config_path: Optional explicit config file path

        Returns:
            Loaded Config object

        Raises:
            FileNotFoundError: If an explicit config path does not exist
        """
        if config_path is not None:
            config_files = [config_path]
        else:
            base_data_dir = Path(os.getenv(ENV_DATA_DIR, str(DEFAULT_DATA_DIR))).expanduser()
            user_config = base_data_dir / DEFAULT_CONFIG_SUBDIR / SETTINGS_FILE
            default_config = Path(__file__).parent / DEFAULT_SETTINGS_FILE
            config_files = [user_config, default_config]

        data = None
        for config_file in config_files:
            if config_file.exists():
                with open(config_file, "rb") as f:
                    data = tomli.load(f)
                break

        if data is None:
            if config_path is not None:
                raise FileNotFoundError(
                    ERROR_NO_CONFIG.format(
                        path=config_path,
                        config_dir=DEFAULT_DATA_DIR / DEFAULT_CONFIG_SUBDIR,
                        default_file=Path(__file__).parent / DEFAULT_SETTINGS_FILE,
                        settings_file=SETTINGS_FILE,
                    )
                )
            data = {}

        logging_data = dict(data.get("logging", {}))
        env_level = _get_env_str(ENV_LOG_LEVEL)
        if env_level:
            logging_data["level"] = env_level

        return cls(
            archive=ArchiveConfig.from_dict(data.get("archive", {})),
            networks=NetworksConfig.from_dict(data.get("networks", {})),
            search=SearchConfig.from_dict(data.get("search", {})),
            logging=LogConfig(**logging_data),
        )
