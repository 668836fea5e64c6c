"""
Path resolver implementation.

Maps version identifiers to locations under the install root.
"""

import os
import pathlib
from typing import List, Optional

from nym.nym_exceptions import HomeDirectoryUnavailable

HOME_MARKER = "~"
VERSIONS_DIR_NAME = "versions"
CURRENT_LINK_NAME = "current"


def expand(path: str) -> str:
    """
    Replace a leading home marker with the user's home directory.

    Paths that do not start with the marker are returned unchanged.

    Raises:
        HomeDirectoryUnavailable: If the home directory cannot be determined
    """
    if not path.startswith(HOME_MARKER):
        return path

    home = os.path.expanduser(HOME_MARKER)
    # expanduser hands the marker back untouched when it cannot resolve a home
    if not home or home == HOME_MARKER:
        raise HomeDirectoryUnavailable("Could not determine the user's home directory")

    remainder = path[len(HOME_MARKER):].lstrip("/\\")
    return str(pathlib.Path(home) / remainder) if remainder else home


class PathResolver:
    """
    Resolves the fixed locations of the install tree.

    Layout under the expanded install root:
        versions/<prefix><version>/   one directory per installed version
        current                       symbolic link to one version directory
    """

    def __init__(self, install_root: str, version_prefix: str = "v"):
        """
        Initialize the path resolver.

        Args:
            install_root: Base directory, may start with "~"
            version_prefix: Prefix carried by version directory names
        """
        self.install_root = install_root
        self.version_prefix = version_prefix

    @property
    def root_dir(self) -> pathlib.Path:
        return pathlib.Path(expand(self.install_root))

    @property
    def versions_dir(self) -> pathlib.Path:
        return self.root_dir / VERSIONS_DIR_NAME

    @property
    def current_link(self) -> pathlib.Path:
        return self.root_dir / CURRENT_LINK_NAME

    @property
    def bin_dir(self) -> pathlib.Path:
        """Directory that goes onto PATH; follows the current link."""
        return self.current_link / "bin"

    def normalize_version(self, version: str) -> str:
        """Strip the version prefix if present, e.g. "v18.17.1" -> "18.17.1"."""
        version = version.strip()
        if self.version_prefix and version.startswith(self.version_prefix):
            return version[len(self.version_prefix):]
        return version

    def version_dir(self, version: str) -> pathlib.Path:
        return self.versions_dir / f"{self.version_prefix}{self.normalize_version(version)}"

    def list_installed_versions(self) -> List[str]:
        """
        List installed versions, newest first.

        Ordering is plain string comparison, descending.

        Returns:
            Version identifiers without the prefix; empty if nothing is installed
        """
        versions_dir = self.versions_dir
        if not versions_dir.is_dir():
            return []

        versions = [
            entry.name[len(self.version_prefix):]
            for entry in versions_dir.iterdir()
            if entry.is_dir() and entry.name.startswith(self.version_prefix)
        ]
        return sorted(versions, reverse=True)

    def current_version(self) -> Optional[str]:
        """
        Read the version the current link points at.

        Returns:
            The version identifier, or None if no version is selected
        """
        try:
            target = os.readlink(self.current_link)
        except OSError:
            return None

        name = pathlib.PurePath(target).name
        return self.normalize_version(name)
