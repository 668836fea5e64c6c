"""
Archive fetcher implementation.

Streams a release artifact to a temporary file and checks the result.
"""

import logging
import os
import pathlib
import posixpath
import tempfile
import urllib.parse
from typing import Optional

import requests

from nym.nym_config import NymConfig
from nym.nym_exceptions import DownloadError, EmptyArtifactError, InvalidFormatError
from nym.nym_logger import NymLogger
from nym.runtime_version_catalog import RemoteCatalogClient
from nym.runtime_version_downloader.progress import ProgressSink

ZIP_SIGNATURE = b"PK"
TEMP_DIR_PREFIX = "nym-download-"


class ArchiveFetcher:
    """
    Downloads release artifacts.

    The response body is written to disk chunk by chunk; when the server
    declares a Content-Length, integer percentages are emitted to a progress
    sink, strictly increasing within one download.
    """

    def __init__(
        self,
        config: NymConfig,
        catalog: RemoteCatalogClient,
        logger: NymLogger,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the archive fetcher.

        Args:
            config: The NymConfig with chunk size and timeout
            catalog: Client used to resolve download URLs
            logger: Logger for progress and error messages
            session: HTTP session to use; defaults to the catalog's session
        """
        self.config = config
        self.catalog = catalog
        self.logger = logger
        self.session = session or catalog.session

    def download(self, version: str, progress_sink: Optional[ProgressSink] = None) -> pathlib.Path:
        """
        Download the artifact of one version into a fresh temporary directory.

        The sink is never closed here; that is the caller's job once this
        returns or raises.

        Args:
            version: Version identifier
            progress_sink: Receives percentages 1..100 as they increase

        Returns:
            Absolute path of the downloaded file

        Raises:
            EmptyArtifactError: If the downloaded file is empty
            InvalidFormatError: If a .zip file lacks the zip signature
            DownloadError: On any other network or I/O failure
        """
        url = self.catalog.resolve_download_url(version)
        self.logger.log(f"Downloading {url}", logging.INFO)

        try:
            temp_dir = tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX)
        except OSError as e:
            raise DownloadError(f"Failed to create a temporary directory: {e}") from e

        file_name = posixpath.basename(urllib.parse.urlparse(url).path)
        file_path = pathlib.Path(temp_dir, file_name).absolute()

        try:
            with open(file_path, "wb") as f:
                downloaded = self._stream_to_file(url, f, progress_sink)
        except requests.RequestException as e:
            raise DownloadError(f"Failed to download {url}: {e}") from e
        except OSError as e:
            raise DownloadError(f"Failed to write {file_path}: {e}") from e

        self.logger.log(f"Downloaded {downloaded} bytes to {file_path}", logging.DEBUG)

        self._verify_download(file_path)
        return file_path

    def _stream_to_file(self, url: str, f, progress_sink: Optional[ProgressSink]) -> int:
        with self.session.get(url, stream=True, timeout=self.config.timeout) as response:
            response.raise_for_status()
            total = self._content_length(response)

            downloaded = 0
            last_progress = 0
            for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)

                if total and progress_sink is not None:
                    progress = min(downloaded * 100 // total, 100)
                    if progress > last_progress:
                        progress_sink.put(progress)
                        last_progress = progress

        return downloaded

    @staticmethod
    def _content_length(response: requests.Response) -> Optional[int]:
        value = response.headers.get("Content-Length")
        if value is None:
            return None
        try:
            total = int(value)
        except ValueError:
            return None
        return total if total > 0 else None

    def _verify_download(self, file_path: pathlib.Path) -> None:
        """
        Minimal structural checks on a finished download.

        tar.gz artifacts are not inspected here; a broken one fails at extraction.
        """
        try:
            size = os.path.getsize(file_path)
        except OSError as e:
            raise DownloadError(f"Could not stat downloaded file {file_path}: {e}") from e

        if size == 0:
            raise EmptyArtifactError(f"Downloaded file is empty: {file_path.name}")

        if file_path.name.endswith(".zip"):
            try:
                with open(file_path, "rb") as f:
                    header = f.read(len(ZIP_SIGNATURE))
            except OSError as e:
                raise DownloadError(f"Could not read downloaded file {file_path}: {e}") from e

            if header != ZIP_SIGNATURE:
                raise InvalidFormatError(f"Not a valid zip archive: {file_path.name}")
