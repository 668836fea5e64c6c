"""
PATH registration.

On Linux and macOS an export line is appended to the shell profile; on
Windows the user-level PATH is rewritten through PowerShell. Both are
idempotent: a PATH that already mentions the bin directory is left alone.
"""

import logging
import pathlib
import subprocess
from typing import Optional

from nym.nym_exceptions import EnvironmentRegistrationError
from nym.nym_logger import NymLogger
from nym.nym_utils import OSFamily, PlatformUtils
from nym.runtime_version_paths import expand

PROFILE_MARKER = "# nym Node.js version manager"


class PathRegistrar:
    """
    Registers a directory on the user's future PATH.
    """

    def __init__(self, logger: NymLogger, system: Optional[str] = None, home: Optional[str] = None):
        """
        Args:
            logger: Logger for progress and error messages
            system: OS name, defaults to the host's
            home: Home directory, defaults to the expanded "~"
        """
        self.logger = logger
        self.os_family = PlatformUtils.get_os_family(system)
        self.home = pathlib.Path(home if home is not None else expand("~"))

    def profile_path(self) -> pathlib.Path:
        """Shell profile that receives the export line."""
        if self.os_family == OSFamily.DARWIN:
            zshrc = self.home / ".zshrc"
            return zshrc if zshrc.exists() else self.home / ".bash_profile"
        return self.home / ".bashrc"

    def register(self, bin_path: str) -> bool:
        """
        Persist bin_path onto PATH.

        Returns:
            True if something was written, False if PATH already contained it

        Raises:
            EnvironmentRegistrationError: If the profile or user PATH cannot be updated
        """
        if self.os_family == OSFamily.WINDOWS:
            return self._register_windows(bin_path)
        return self._register_profile(bin_path)

    def _register_profile(self, bin_path: str) -> bool:
        profile = self.profile_path()
        try:
            content = profile.read_text(encoding="utf-8") if profile.exists() else ""
        except OSError as e:
            raise EnvironmentRegistrationError(f"Failed to read {profile}: {e}") from e

        if bin_path in content:
            self.logger.log(f"{profile} already adds {bin_path} to PATH", logging.INFO)
            return False

        export_line = f'\n{PROFILE_MARKER}\nexport PATH="{bin_path}:$PATH"\n'
        try:
            with open(profile, "a", encoding="utf-8") as f:
                f.write(export_line)
        except OSError as e:
            raise EnvironmentRegistrationError(f"Failed to update {profile}: {e}") from e

        self.logger.log(f"Added {bin_path} to PATH in {profile}", logging.INFO)
        return True

    def _run_powershell(self, command: str) -> str:
        try:
            result = subprocess.run(
                ["powershell", "-NoProfile", "-Command", command],
                capture_output=True,
                text=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError) as e:
            raise EnvironmentRegistrationError(f"PowerShell command failed: {e}") from e
        return result.stdout

    def _register_windows(self, bin_path: str) -> bool:
        current = self._run_powershell(
            "[Environment]::GetEnvironmentVariable('PATH','User')"
        ).strip()

        entries = [entry for entry in current.split(";") if entry]
        if bin_path in entries:
            self.logger.log(f"User PATH already contains {bin_path}", logging.INFO)
            return False

        new_path = ";".join(entries + [bin_path])
        escaped = new_path.replace("'", "''")
        self._run_powershell(
            f"[Environment]::SetEnvironmentVariable('PATH','{escaped}','User')"
        )
        self.logger.log(f"Added {bin_path} to the user PATH", logging.INFO)
        return True


def register_bin_path(bin_path: str, logger: NymLogger, system: Optional[str] = None) -> bool:
    return PathRegistrar(logger, system=system).register(bin_path)
