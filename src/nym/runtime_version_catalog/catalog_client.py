"""
Remote catalog client implementation.

Queries the release index and builds artifact URLs.
"""

import logging
from typing import List, Optional

import requests
from pydantic import ValidationError

from nym.nym_config import NymConfig
from nym.nym_exceptions import FormatError, NetworkError
from nym.nym_logger import NymLogger
from nym.nym_utils import PlatformUtils
from nym.runtime_version_models import VersionCatalog


class RemoteCatalogClient:
    """
    Client for the remote release catalog.

    Lists available versions and resolves the artifact URL of a version for
    a given operating system and CPU architecture.
    """

    def __init__(
        self,
        config: NymConfig,
        logger: NymLogger,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the catalog client.

        Args:
            config: The NymConfig with mirror and naming settings
            logger: Logger for progress and error messages
            session: HTTP session to use; a new one is created if omitted
        """
        self.config = config
        self.logger = logger
        self.session = session or requests.Session()

    def list_available_versions(self) -> List[str]:
        """
        Fetch all published versions.

        Returns:
            Version identifiers without the leading prefix, in server order
            (newest first)

        Raises:
            NetworkError: If the request fails or returns an error status
            FormatError: If the response is not a JSON array of version objects
        """
        url = self.config.index_url
        self.logger.log(f"Fetching release index from {url}", logging.DEBUG)

        try:
            response = self.session.get(url, timeout=self.config.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise NetworkError(f"Failed to fetch release index from {url}: {e}") from e

        try:
            catalog = VersionCatalog.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise FormatError(f"Malformed release index from {url}: {e}") from e

        versions = catalog.versions(self.config.version_prefix)
        self.logger.log(f"Release index lists {len(versions)} versions", logging.DEBUG)
        return versions

    def has_version(self, version: str) -> bool:
        """
        Check whether an exact version is published.

        Raises:
            NetworkError, FormatError: As list_available_versions
        """
        return self.normalize_version(version) in self.list_available_versions()

    def normalize_version(self, version: str) -> str:
        version = version.strip()
        prefix = self.config.version_prefix
        if prefix and version.startswith(prefix):
            return version[len(prefix):]
        return version

    def resolve_download_url(
        self,
        version: str,
        system: Optional[str] = None,
        machine: Optional[str] = None,
    ) -> str:
        """
        Compute the artifact URL of a version.

        Pure in its arguments; system and machine default to the host's
        platform.system() and platform.machine(). Never raises: a bad
        combination only shows up later as a failed download.

        Args:
            version: Version identifier, with or without the leading prefix
            system: Operating system name, e.g. "Linux", "Darwin", "Windows"
            machine: CPU architecture, e.g. "x86_64", "arm64"

        Returns:
            e.g. https://nodejs.org/dist/v18.17.1/node-v18.17.1-linux-x64.tar.gz
        """
        version = self.normalize_version(version)
        prefix = self.config.version_prefix
        os_family = PlatformUtils.get_os_family(system)
        platform_id = PlatformUtils.get_platform_id(system, machine)

        tag = f"{prefix}{version}"
        file_name = (
            f"{self.config.distribution_name}-{tag}-{platform_id}"
            f".{os_family.archive_extension}"
        )
        return f"{self.config.mirror_url.rstrip('/')}/{tag}/{file_name}"
