"""
This file contains various utility functions like platform detection.
"""

import platform
from enum import Enum
from typing import Optional


class OSFamily(str, Enum):
    """
    Operating system families as named in release file names.
    """

    WINDOWS = "win"
    DARWIN = "darwin"
    LINUX = "linux"

    @property
    def archive_extension(self) -> str:
        return "zip" if self == OSFamily.WINDOWS else "tar.gz"


# platform.machine() spellings for the three architectures releases are built for
_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "x86",
    "i686": "x86",
    "x86": "x86",
}


class PlatformUtils:
    """
    This class provides utilities for platform detection and identification.
    """

    @staticmethod
    def get_os_family(system: Optional[str] = None) -> OSFamily:
        """
        Map an OS name (platform.system() by default) onto a release OS family.
        Anything that is neither Windows nor macOS is treated as Linux.
        """
        name = (system if system is not None else platform.system()).lower()
        if name.startswith("win"):
            return OSFamily.WINDOWS
        if name in ("darwin", "macos", "mac"):
            return OSFamily.DARWIN
        return OSFamily.LINUX

    @staticmethod
    def get_release_arch(machine: Optional[str] = None) -> str:
        """
        Map a CPU architecture (platform.machine() by default) onto the release naming.
        Unrecognized architectures are returned unchanged.
        """
        raw = machine if machine is not None else platform.machine()
        return _ARCH_ALIASES.get(raw.lower(), raw)

    @staticmethod
    def get_platform_id(system: Optional[str] = None, machine: Optional[str] = None) -> str:
        """
        Returns the release platform id, e.g. "linux-x64" or "win-arm64".
        """
        return f"{PlatformUtils.get_os_family(system).value}-{PlatformUtils.get_release_arch(machine)}"
