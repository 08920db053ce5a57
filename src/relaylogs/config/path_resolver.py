"""
Path resolution for the per-network channel archive.

Partitions are laid out as ``<archive root>/<network>/<channel><extension>``.
"""

import os
from pathlib import Path

from .constants import ENV_ARCHIVE_PATH


class PathResolver:
    """Resolves archive locations from configuration."""

    @staticmethod
    def expand_path_template(path: str) -> str:
        """
        Expand path templates with environment variables.

        Supports:
        - {username} -> current username
        - {home} -> user home directory
        - Environment variables: $VAR or ${VAR}

        Args:
            path: Path template string

        Returns:
            Expanded path string
        """
        path = path.replace("{username}", os.getenv("USERNAME") or os.getenv("USER") or "unknown")
        path = path.replace("{home}", str(Path.home()))
        path = os.path.expanduser(path)
        path = os.path.expandvars(path)
        return path

    @staticmethod
    def get_archive_root(config=None) -> Path:
        """
        Get the channel archive root directory.

        Checks in order:
        1. Environment variable (RELAYLOGS_ARCHIVE_PATH)
        2. Config file setting
        3. Default location

        Args:
            config: Optional Config object

        Returns:
            Absolute path to the archive root
        """
        env_dir = os.getenv(ENV_ARCHIVE_PATH)
        if env_dir:
            return Path(PathResolver.expand_path_template(env_dir)).resolve()

        if config is None:
            from relaylogs.config import Config
            config = Config.load()

        archive_path = PathResolver.expand_path_template(config.archive.path)
        return Path(archive_path).resolve()

    @staticmethod
    def network_dir(archive_root: Path, network: str) -> Path:
        """
        Resolve the directory holding one network's partitions.

        Raises:
            ValueError: If the network name would escape the archive root
        """
        if not network or network in (".", "..") or "/" in network or "\\" in network:
            raise ValueError(f"Invalid network name: {network!r}")
        return archive_root / network
