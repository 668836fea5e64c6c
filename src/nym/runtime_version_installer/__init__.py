"""
Runtime version installer.

This package handles:
1. Dispatching a downloaded archive to the extractor for its format
2. Extracting tar.gz and zip archives with their root directory stripped
3. Discarding the downloaded archive afterwards
"""

from .extractors import ArchiveExtractor, TarGzExtractor, ZipExtractor
from .installer import ArchiveInstaller

__all__ = ["ArchiveInstaller", "ArchiveExtractor", "TarGzExtractor", "ZipExtractor"]
