"""
Configuration parameters for nym.
"""

import os
import pathlib
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

from nym.nym_exceptions import ConfigurationError

DEFAULT_INSTALL_ROOT = "~/.nym"
DEFAULT_MIRROR_URL = "https://nodejs.org/dist"
CONFIG_FILE_NAME = "config.toml"
NYM_HOME_ENV = "NYM_HOME"


@dataclass
class NymConfig:
    """
    Configuration parameters
    """

    install_root: str = DEFAULT_INSTALL_ROOT
    mirror_url: str = DEFAULT_MIRROR_URL
    distribution_name: str = "node"
    version_prefix: str = "v"
    chunk_size: int = 1024 * 1024
    # None leaves deadlines to the transport; a stalled connection then blocks indefinitely
    timeout: Optional[float] = None
    progress_queue_size: int = 64

    @property
    def index_url(self) -> str:
        return f"{self.mirror_url.rstrip('/')}/index.json"

    @classmethod
    def from_dict(cls, env: Dict[str, Any]) -> "NymConfig":
        """
        Create a NymConfig instance from a dictionary, ignoring unknown keys.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in env.items() if k in known}

        for key in ("chunk_size", "progress_queue_size"):
            value = values.get(key, 1)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"'{key}' must be a positive integer, got {values[key]!r}")

        if "timeout" in values and values["timeout"] is not None:
            timeout = values["timeout"]
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigurationError(f"'timeout' must be a positive number, got {values['timeout']!r}")

        for key in ("install_root", "mirror_url", "distribution_name", "version_prefix"):
            if key in values and not isinstance(values[key], str):
                raise ConfigurationError(f"'{key}' must be a string, got {values[key]!r}")

        return cls(**values)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "NymConfig":
        """
        Load configuration from the [nym] section of a TOML file.

        Without an explicit path the file is looked up as config.toml under
        $NYM_HOME (or the default install root). A missing file yields the
        defaults. $NYM_HOME, when set, always wins for install_root.

        Raises:
            ConfigurationError: If the file exists but cannot be parsed
        """
        nym_home = os.environ.get(NYM_HOME_ENV)

        if path is None:
            root = nym_home or os.path.expanduser(DEFAULT_INSTALL_ROOT)
            path = str(pathlib.Path(root) / CONFIG_FILE_NAME)

        values: Dict[str, Any] = {}
        if os.path.exists(path):
            try:
                with open(path, "rb") as f:
                    toml_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                raise ConfigurationError(f"Failed to load configuration from {path}: {e}") from e

            section = toml_dict.get("nym", {})
            if not isinstance(section, dict):
                raise ConfigurationError(f"[nym] in {path} must be a table")
            values.update(section)

        if nym_home:
            values["install_root"] = nym_home

        return cls.from_dict(values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
