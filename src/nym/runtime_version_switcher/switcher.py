"""
Version switcher implementation.
"""

import logging
import os
import pathlib
import stat
import sys

from nym.nym_exceptions import (
    InsufficientPrivilegeError,
    LinkReplacementError,
    VersionNotInstalledError,
)
from nym.nym_logger import NymLogger
from nym.runtime_version_paths import PathResolver

ERROR_PRIVILEGE_NOT_HELD = 1314


class VersionSwitcher:
    """
    Points the current link at an installed version.

    The old link is removed before the new one is created, so there is a
    short window with no current link. Concurrent switches are not
    coordinated; the last one to create the link wins.
    """

    def __init__(self, paths: PathResolver, logger: NymLogger):
        self.paths = paths
        self.logger = logger

    def switch(self, version: str) -> pathlib.Path:
        """
        Make the given version the active one.

        Args:
            version: Version identifier, with or without the leading prefix

        Returns:
            The version directory the current link now points at

        Raises:
            VersionNotInstalledError: If the version directory does not exist;
                the existing link is left untouched
            LinkReplacementError: If the old link cannot be removed or the new one created
            InsufficientPrivilegeError: If Windows refuses the link for lack of privilege
        """
        target_dir = self.paths.version_dir(version)
        if not target_dir.is_dir():
            raise VersionNotInstalledError(
                f"Version {self.paths.normalize_version(version)} is not installed"
            )

        current_link = self.paths.current_link
        self._remove_current(current_link)

        try:
            os.symlink(target_dir, current_link, target_is_directory=True)
        except OSError as e:
            if sys.platform == "win32" and getattr(e, "winerror", None) == ERROR_PRIVILEGE_NOT_HELD:
                raise InsufficientPrivilegeError(
                    "Creating symbolic links on Windows requires administrator rights "
                    "or Developer Mode. Run the shell as administrator, or enable Developer Mode."
                ) from e
            raise LinkReplacementError(f"Failed to create link {current_link}: {e}") from e

        self.logger.log(f"Switched {current_link} -> {target_dir}", logging.INFO)
        return target_dir

    def _remove_current(self, current_link: pathlib.Path) -> None:
        try:
            st = os.lstat(current_link)
        except FileNotFoundError:
            return
        except OSError as e:
            raise LinkReplacementError(f"Failed to inspect {current_link}: {e}") from e

        try:
            if stat.S_ISDIR(st.st_mode):
                # a plain directory left where the link belongs; only an empty one is removed
                os.rmdir(current_link)
            elif stat.S_ISLNK(st.st_mode) and sys.platform == "win32":
                # directory symlinks are removed like directories on Windows
                os.rmdir(current_link)
            else:
                os.unlink(current_link)
        except OSError as e:
            raise LinkReplacementError(f"Failed to remove existing link {current_link}: {e}") from e
