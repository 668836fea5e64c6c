"""
Runtime version downloader.

This package handles:
1. Streaming release artifacts to a temporary file
2. Reporting download progress
3. Verifying downloads
"""

from .downloader import ArchiveFetcher
from .progress import ProgressChannel, ProgressObserver, ProgressSink

__all__ = ["ArchiveFetcher", "ProgressChannel", "ProgressObserver", "ProgressSink"]
