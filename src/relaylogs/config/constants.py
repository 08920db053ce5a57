"""
Constants and default values for relaylogs.

Centralizes magic numbers and strings to improve maintainability.
"""

from pathlib import Path

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "relaylogs"
APP_VERSION = "0.3.0"
CONFIG_DIR_NAME = ".relaylogs"

# ============================================================================
# Path Defaults
# ============================================================================

DEFAULT_DATA_DIR = Path.home() / CONFIG_DIR_NAME
DEFAULT_CONFIG_SUBDIR = "config"
DEFAULT_LOGS_SUBDIR = "logs"

# Config file names
SETTINGS_FILE = "settings.toml"
DEFAULT_SETTINGS_FILE = "settings.default.toml"
ENV_FILE = ".env"

# ============================================================================
# Archive Defaults
# ============================================================================

# Per-channel archives live at <archive path>/<network>/<channel><extension>
DEFAULT_ARCHIVE_PATH = str(DEFAULT_DATA_DIR / "archive")
DEFAULT_CHANNELS_TO_FILE = True

# Partition format discriminator -> file extension
SEARCH_FILE_TYPES: dict[str, str] = {
    "sqlite": ".sqlite3",
}
DEFAULT_FILETYPE = "sqlite"
DEFAULT_SEARCH_EXTENSION = SEARCH_FILE_TYPES[DEFAULT_FILETYPE]

# Public channel partitions are named with this leading marker
DEFAULT_PUBLIC_CHANNEL_PREFIX = "#"

# ============================================================================
# Storage Schema
# ============================================================================

PARTITION_TABLE = "channel"
TIMESTAMP_COLUMN = "__drcIrcRxTs"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_DATA_DIR = "RELAYLOGS_DATA_DIR"
ENV_ARCHIVE_PATH = "RELAYLOGS_ARCHIVE_PATH"
ENV_CHANNELS_TO_FILE = "RELAYLOGS_CHANNELS_TO_FILE"
ENV_DEFAULT_FILETYPE = "RELAYLOGS_DEFAULT_FILETYPE"
ENV_REGISTERED_NETWORKS = "RELAYLOGS_NETWORKS"
ENV_PUBLIC_CHANNEL_PREFIX = "RELAYLOGS_PUBLIC_CHANNEL_PREFIX"
ENV_LOG_LEVEL = "RELAYLOGS_LOG_LEVEL"

# ============================================================================
# Error Messages
# ============================================================================

ERROR_NO_CONFIG = """
Configuration file not found: {path}

Copy the packaged defaults and edit them:
    mkdir -p {config_dir}
    cp {default_file} {config_dir}/{settings_file}
"""
