"""
Archive installer implementation.

Turns a downloaded archive into a populated version directory.
"""

import logging
import os
import pathlib
from typing import List, Type

from nym.nym_exceptions import ExtractionError, UnsupportedFormatError
from nym.nym_logger import NymLogger
from nym.runtime_version_downloader.downloader import TEMP_DIR_PREFIX
from nym.runtime_version_installer.extractors import ArchiveExtractor, TarGzExtractor, ZipExtractor
from nym.runtime_version_paths import PathResolver


class ArchiveInstaller:
    """
    Extracts release archives into their version directory.

    Extraction happens in place: an interrupted install leaves a partially
    populated version directory behind, and installing over an existing
    version overwrites it file by file.
    """

    extractors: List[Type[ArchiveExtractor]] = [TarGzExtractor, ZipExtractor]

    def __init__(self, paths: PathResolver, logger: NymLogger):
        """
        Initialize the archive installer.

        Args:
            paths: Resolver for the version directories
            logger: Logger for progress and error messages
        """
        self.paths = paths
        self.logger = logger

    def extractor_for(self, archive_path: pathlib.Path) -> Type[ArchiveExtractor]:
        for extractor in self.extractors:
            if extractor.handles(archive_path.name):
                return extractor
        raise UnsupportedFormatError(f"Unsupported archive format: {archive_path.name}")

    def install(self, version: str, archive_path) -> pathlib.Path:
        """
        Install a downloaded archive as the given version.

        Args:
            version: Version identifier
            archive_path: Path of the downloaded .tar.gz or .zip archive

        Returns:
            The populated version directory

        Raises:
            UnsupportedFormatError: If the archive suffix is not recognized
            ExtractionError: If the version directory cannot be created or extraction fails
        """
        archive_path = pathlib.Path(archive_path)
        extractor_cls = self.extractor_for(archive_path)
        target_dir = self.paths.version_dir(version)

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExtractionError(f"Failed to create version directory {target_dir}: {e}") from e

        self.logger.log(f"Extracting {archive_path.name} into {target_dir}", logging.INFO)

        try:
            written = extractor_cls(str(archive_path), self.logger).extract(str(target_dir))
        except ExtractionError:
            self.logger.log(
                f"Extraction into {target_dir} failed; the directory may be partially populated",
                logging.ERROR,
            )
            raise

        if written == 0:
            self.logger.log(f"{archive_path.name} contained no entries", logging.WARNING)

        self._discard_archive(archive_path)
        self.logger.log(f"Installed {written} entries into {target_dir}", logging.INFO)
        return target_dir

    def _discard_archive(self, archive_path: pathlib.Path) -> None:
        """Remove the archive and its download directory; failures are only logged."""
        try:
            archive_path.unlink()
        except OSError as e:
            self.logger.log(f"Could not remove {archive_path}: {e}", logging.WARNING)
            return

        parent = archive_path.parent
        if parent.name.startswith(TEMP_DIR_PREFIX):
            try:
                os.rmdir(parent)
            except OSError as e:
                self.logger.log(f"Could not remove {parent}: {e}", logging.DEBUG)
