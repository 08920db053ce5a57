"""Discover the channel partitions eligible for a search."""
from __future__ import annotations

import logging
from pathlib import Path

from relaylogs.config import Config, PathResolver
from relaylogs.config.constants import DEFAULT_SEARCH_EXTENSION, SEARCH_FILE_TYPES
from relaylogs.core.errors import PartitionDiscoveryError
from relaylogs.models import FilterSpec, Partition

logger = logging.getLogger(__name__)


class ChannelStoreLocator:
    """Lists a network's partition files. Nothing is cached between calls."""

    def __init__(self, config: Config, archive_root: Path | None = None) -> None:
        self.config = config
        self._archive_root = archive_root

    @property
    def enabled(self) -> bool:
        return bool(self.config.archive.channels_to_file)

    @property
    def archive_root(self) -> Path:
        if self._archive_root is None:
            self._archive_root = PathResolver.get_archive_root(self.config)
        return self._archive_root

    def extension_for(self, spec: FilterSpec) -> str:
        filetype = spec.filetype or self.config.archive.default_filetype
        return SEARCH_FILE_TYPES.get(filetype, DEFAULT_SEARCH_EXTENSION)

    def network_dir(self, network: str) -> Path:
        try:
            return PathResolver.network_dir(self.archive_root, network)
        except ValueError as exc:
            raise PartitionDiscoveryError(network, str(self.archive_root), str(exc)) from exc

    def locate(self, network: str, spec: FilterSpec) -> list[Partition] | None:
        """
        Enumerate the partitions to search for ``network``.

        Returns:
            Partitions sorted by file name, or None when channel archiving
            is disabled

        Raises:
            PartitionDiscoveryError: If the network directory is missing or
                cannot be listed
        """
        if not self.enabled:
            return None

        network_dir = self.network_dir(network)
        extension = self.extension_for(spec)
        try:
            entries = sorted(network_dir.iterdir())
        except OSError as exc:
            raise PartitionDiscoveryError(network, str(network_dir), exc.strerror or str(exc)) from exc

        partitions = [
            Partition(network=network, name=entry.name, path=entry, extension=extension)
            for entry in entries
            if entry.name.endswith(extension) and entry.is_file()
        ]

        if not spec.everything:
            prefix = self.config.search.public_channel_prefix
            partitions = [p for p in partitions if p.is_public(prefix)]

        logger.debug("Search list for %s: %s", network, ", ".join(p.name for p in partitions))
        return partitions

    def partition_for(self, network: str, channel: str, spec: FilterSpec) -> Partition:
        """Resolve a single channel's partition without checking it exists."""
        extension = self.extension_for(spec)
        name = channel if Path(channel).suffix else f"{channel}{extension}"
        if "/" in name or "\\" in name:
            raise PartitionDiscoveryError(network, str(self.archive_root), f"invalid channel {channel!r}")
        return Partition(
            network=network,
            name=name,
            path=self.network_dir(network) / name,
            extension=extension,
        )
