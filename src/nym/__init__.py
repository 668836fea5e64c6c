"""
nym - a per-user Node.js version manager.

The public surface is the version acquisition and installation pipeline:
catalog lookup, download, install and switch.
"""

from nym.nym_config import NymConfig
from nym.nym_logger import NymLogger
from nym.runtime_version_catalog import RemoteCatalogClient
from nym.runtime_version_downloader import ArchiveFetcher, ProgressChannel, ProgressObserver
from nym.runtime_version_installer import ArchiveInstaller
from nym.runtime_version_paths import PathResolver, expand
from nym.runtime_version_switcher import VersionSwitcher

__all__ = [
    "NymConfig",
    "NymLogger",
    "RemoteCatalogClient",
    "ArchiveFetcher",
    "ProgressChannel",
    "ProgressObserver",
    "ArchiveInstaller",
    "PathResolver",
    "expand",
    "VersionSwitcher",
]
